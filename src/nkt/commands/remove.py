"""Command: remove an item or a whole collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand, build_selection, selection_options

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    cls=NktCommand,
    examples="""\
  nkt remove t0
  nkt remove 2024-01-07 --journal diary
  nkt remove 0 --time 09:30
  nkt remove -d scratch          # the whole directory""",
)
@click.argument("item", required=False)
@selection_options
@click.pass_obj
def remove(
    app: AppContext,
    item: str | None,
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
) -> None:
    """Remove the selected item; a bare collection flag removes the collection."""
    from nkt.services.update import UpdateService

    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    app.emit(app.service(UpdateService, "remove").remove(selection))
