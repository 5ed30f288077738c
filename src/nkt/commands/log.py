"""Command: add a journal entry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    cls=NktCommand,
    examples="""\
  nkt log "started on the parser"
  nkt log "call with @work about budgets"
  nkt log "ran 5k" --journal health --tag fitness""",
)
@click.argument("text")
@click.option("-j", "--journal", default=None, metavar="NAME", help="Journal to log into.")
@click.option("--tag", "tags", multiple=True, help="Tag to attach (repeatable).")
@click.pass_obj
def log(app: AppContext, text: str, journal: str | None, tags: tuple[str, ...]) -> None:
    """Log TEXT to today's day in a journal; inline @tags are picked up."""
    from nkt.services.create import CreateService

    app.emit(app.service(CreateService, "log").log(text, journal=journal, tags=tags))
