"""Commands: select and read a single item."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand, build_selection, selection_options

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    cls=NktCommand,
    examples="""\
  nkt select 0                  # today in the default journal
  nkt select 2024-01-07
  nkt select t4                 # fourth active task
  nkt select /1a2b              # task by hash prefix
  nkt select hello -d notes
  nkt select 0 --time 09:30     # entry logged at 09:30 today
  nkt --json select work:t0""",
)
@click.argument("item", required=False)
@selection_options
@click.pass_obj
def select(
    app: AppContext,
    item: str | None,
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
) -> None:
    """Resolve ITEM to exactly one day, entry, note, task or collection."""
    from nkt.services.query import QueryService

    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    app.emit(app.service(QueryService, "select").select(selection))


@click.command(
    cls=NktCommand,
    examples="""\
  nkt read 0
  nkt read 1 --journal diary
  nkt read hello
  nkt read -t todo""",
)
@click.argument("item", required=False)
@selection_options
@click.pass_obj
def read(
    app: AppContext,
    item: str | None,
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
) -> None:
    """Print the contents of the selected item."""
    from nkt.services.query import QueryService

    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    app.emit(app.service(QueryService, "read").read(selection))
