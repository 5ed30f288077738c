"""Command: list collections, their contents, or the tag registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand
from nkt.domain.types import CollectionKind

if TYPE_CHECKING:
    from nkt.commands._context import AppContext

_WHAT = click.Choice([*(str(k) for k in CollectionKind), "collections", "tags"], case_sensitive=False)


@click.command(
    "list",
    cls=NktCommand,
    examples="""\
  nkt list                      # every collection
  nkt list tasklist             # the default tasklist
  nkt list tasklist todo --all  # including done and archived tasks
  nkt list journal diary
  nkt list tags""",
)
@click.argument("what", type=_WHAT, default="collections")
@click.argument("name", required=False)
@click.option("-a", "--all", "include_inactive", is_flag=True, help="Include done and archived tasks.")
@click.pass_obj
def list_cmd(app: AppContext, what: str, name: str | None, include_inactive: bool) -> None:
    """List collections, or the contents of one collection."""
    from nkt.services.query import QueryService

    what = what.lower()
    if what == "tags":
        app.emit(app.service(QueryService, "list_tags").list_tags())
    elif what == "collections":
        app.emit(app.service(QueryService, "list_collections").list_collections())
    else:
        svc = app.service(QueryService, "list_items")
        app.emit(svc.list_items(CollectionKind(what), name, include_inactive=include_inactive))
