"""Command group: create collections and registry entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktGroup
from nkt.domain.types import CollectionKind

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.group(
    cls=NktGroup,
    examples="""\
  nkt new journal health
  nkt new directory work
  nkt new tasklist shopping
  nkt new tag urgent
  nkt new chain "morning run" --alias run
  nkt new stack reading""",
)
def new() -> None:
    """Create collections, tags, chains and stacks."""


def _collection_command(kind: CollectionKind) -> click.Command:
    @new.command(name=str(kind), help=f"Create a new {kind} NAME.")
    @click.argument("name")
    @click.pass_obj
    def command(app: AppContext, name: str) -> None:
        from nkt.services.create import CreateService

        app.emit(app.service(CreateService, "new_collection").new_collection(kind, name))

    return command


for _kind in CollectionKind:
    _collection_command(_kind)


@new.command(name="tag")
@click.argument("name")
@click.pass_obj
def new_tag(app: AppContext, name: str) -> None:
    """Register tag NAME (lowercase letters, '.' and '-')."""
    from nkt.services.create import CreateService

    app.emit(app.service(CreateService, "new_tag").new_tag(name))


@new.command(name="chain")
@click.argument("name")
@click.option("--alias", default=None, help="Short name for 'nkt chain complete'.")
@click.option("--details", default=None, help="What completing the chain means.")
@click.pass_obj
def new_chain(app: AppContext, name: str, alias: str | None, details: str | None) -> None:
    """Start a new habit chain NAME."""
    from nkt.services.create import CreateService

    app.emit(app.service(CreateService, "new_chain").new_chain(name, alias=alias, details=details))


@new.command(name="stack")
@click.argument("name")
@click.pass_obj
def new_stack(app: AppContext, name: str) -> None:
    """Create an empty stack NAME."""
    from nkt.services.create import CreateService

    app.emit(app.service(CreateService, "new_stack").new_stack(name))
