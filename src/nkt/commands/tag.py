"""Command: attach or detach tags on any item."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand, build_selection, selection_options

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    cls=NktCommand,
    examples="""\
  nkt new tag work && nkt tag t0 work
  nkt tag 0 @idea @later
  nkt tag hello idea --delete""",
)
@click.argument("item")
@click.argument("tags", nargs=-1, required=True)
@selection_options
@click.option("--delete", is_flag=True, help="Remove the tags instead.")
@click.pass_obj
def tag(
    app: AppContext,
    item: str,
    tags: tuple[str, ...],
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
    delete: bool,
) -> None:
    """Tag the selected ITEM with TAGS (which must exist, see 'nkt new tag')."""
    from nkt.services.update import UpdateService

    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    app.emit(app.service(UpdateService, "tag").tag(selection, tags, delete=delete))
