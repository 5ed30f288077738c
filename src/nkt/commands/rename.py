"""Command: rename notes, tasks and collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand, build_selection, selection_options

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    cls=NktCommand,
    examples="""\
  nkt rename hello greeting
  nkt rename t2 "water the garden"
  nkt rename hello hello --directory notes --to-directory archive
  nkt rename todo: chores       # the whole collection""",
)
@click.argument("item")
@click.argument("new_name")
@selection_options
@click.option("--to-directory", default=None, metavar="NAME", help="Move a note into another directory.")
@click.pass_obj
def rename(
    app: AppContext,
    item: str,
    new_name: str,
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
    to_directory: str | None,
) -> None:
    """Rename ITEM to NEW_NAME; a bare NAME: selects the collection itself."""
    from nkt.services.update import UpdateService

    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    svc = app.service(UpdateService, "rename")
    app.emit(svc.rename(selection, new_name, to_directory=to_directory))
