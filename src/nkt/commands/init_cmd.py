"""Command: create a root directory (named init_cmd to avoid shadowing)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    "init",
    cls=NktCommand,
    examples="""\
  nkt init
  nkt --root ~/notes init
  NKT_ROOT_DIR=/tmp/scratch nkt init --force""",
)
@click.option("--force", is_flag=True, help="Overwrite an existing topology.json.")
@click.pass_obj
def init_cmd(app: AppContext, force: bool) -> None:
    """Create topology.json and the default collections in the root directory."""
    from nkt.services.init import InitService

    app.emit(app.service(InitService, "init", load=False).init(force=force))
