"""Commands: add a task and change task state."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand, build_selection, selection_options

if TYPE_CHECKING:
    from nkt.commands._context import AppContext

_IMPORTANCE = click.Choice(["low", "high", "urgent"], case_sensitive=False)


@click.command(
    cls=NktCommand,
    examples="""\
  nkt task "water the plants"
  nkt task "file taxes" "collect receipts" --due "next week" --importance high
  nkt task "call mum" --due tonight --tasklist home""",
)
@click.argument("outcome")
@click.argument("action", required=False)
@click.option("-t", "--tasklist", "--tl", default=None, metavar="NAME", help="Tasklist to add to.")
@click.option("--details", default=None, help="Longer description.")
@click.option("--due", default=None, help="Due date: today, tomorrow, monday, soon, 2024-05-01 evening...")
@click.option("--importance", type=_IMPORTANCE, default="low", show_default=True)
@click.option("--tag", "tags", multiple=True, help="Tag to attach (repeatable).")
@click.pass_obj
def task(
    app: AppContext,
    outcome: str,
    action: str | None,
    tasklist: str | None,
    details: str | None,
    due: str | None,
    importance: str,
    tags: tuple[str, ...],
) -> None:
    """Add a task with OUTCOME (and optionally the next ACTION)."""
    from nkt.services.create import CreateService

    svc = app.service(CreateService, "add_task")
    app.emit(
        svc.add_task(
            outcome,
            action,
            tasklist=tasklist,
            details=details,
            due=due,
            importance=importance,
            tags=tags,
        )
    )


@click.command(
    "set",
    cls=NktCommand,
    examples="""\
  nkt set t0 --done
  nkt set /1a2b --due tomorrow --importance urgent
  nkt set "water the plants" --archive
  nkt set t3 --no-due""",
)
@click.argument("item")
@selection_options
@click.option("--done", is_flag=True, help="Mark as done.")
@click.option("--undone", is_flag=True, help="Clear the done mark.")
@click.option("--archive", is_flag=True, help="Archive the task.")
@click.option("--due", default=None, help="New due date.")
@click.option("--no-due", "clear_due", is_flag=True, help="Remove the due date.")
@click.option("--importance", type=_IMPORTANCE, default=None)
@click.option("--details", default=None, help="Replace the details.")
@click.pass_obj
def set_cmd(
    app: AppContext,
    item: str,
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
    done: bool,
    undone: bool,
    archive: bool,
    due: str | None,
    clear_due: bool,
    importance: str | None,
    details: str | None,
) -> None:
    """Change the state of the task selected by ITEM."""
    from nkt.services.update import UpdateService

    if done and undone:
        msg = "--done and --undone are mutually exclusive"
        raise click.UsageError(msg)
    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    svc = app.service(UpdateService, "set_task")
    app.emit(
        svc.set_task(
            selection,
            done=done,
            undone=undone,
            archive=archive,
            due=due,
            clear_due=clear_due,
            importance=importance,
            details=details,
        )
    )
