"""Command group: habit chains."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktGroup

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.group(
    cls=NktGroup,
    examples="""\
  nkt chain list
  nkt chain complete run
  nkt chain list --all""",
)
def chain() -> None:
    """List and complete habit chains."""


@chain.command(name="list")
@click.option("-a", "--all", "include_inactive", is_flag=True, help="Include inactive chains.")
@click.pass_obj
def list_chains(app: AppContext, include_inactive: bool) -> None:
    """Show each chain with its current streak."""
    from nkt.services.registries import ChainService

    app.emit(app.service(ChainService, "list_chains").list_chains(include_inactive=include_inactive))


@chain.command()
@click.argument("name")
@click.pass_obj
def complete(app: AppContext, name: str) -> None:
    """Mark chain NAME (or its alias) done for today."""
    from nkt.services.registries import ChainService

    app.emit(app.service(ChainService, "complete_chain").complete(name))
