"""Command group: stacks of references to items."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktGroup, build_selection, selection_options

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.group(
    cls=NktGroup,
    examples="""\
  nkt stack push reading hello -m "finish by friday"
  nkt stack push next t0 --position 2
  nkt stack peek reading
  nkt stack pop reading""",
)
def stack() -> None:
    """Push, pop and inspect stacks."""


@stack.command()
@click.argument("name")
@click.argument("item")
@selection_options
@click.option("-m", "--message", default=None, help="Note stored with the reference.")
@click.option("--position", default=0, show_default=True, type=click.IntRange(min=0))
@click.pass_obj
def push(
    app: AppContext,
    name: str,
    item: str,
    journal: str | None,
    directory: str | None,
    tasklist: str | None,
    entry_time: str | None,
    message: str | None,
    position: int,
) -> None:
    """Push a reference to ITEM onto stack NAME."""
    from nkt.services.registries import StackService

    selection = build_selection(
        item, journal=journal, directory=directory, tasklist=tasklist, entry_time=entry_time
    )
    svc = app.service(StackService, "push")
    app.emit(svc.push(name, selection, message=message, position=position))


@stack.command()
@click.argument("name")
@click.option("--index", default=0, show_default=True, type=click.IntRange(min=0))
@click.pass_obj
def pop(app: AppContext, name: str, index: int) -> None:
    """Remove and show the reference at INDEX (top by default)."""
    from nkt.services.registries import StackService

    app.emit(app.service(StackService, "pop").pop(name, index))


@stack.command()
@click.argument("name")
@click.pass_obj
def peek(app: AppContext, name: str) -> None:
    """Show every reference on stack NAME, top first."""
    from nkt.services.registries import StackService

    app.emit(app.service(StackService, "peek").peek(name))
