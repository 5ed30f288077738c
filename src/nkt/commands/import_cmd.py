"""Command: bring existing files into the root (named import_cmd; import is a keyword)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    "import",
    cls=NktCommand,
    examples="""\
  nkt import ~/old-notes/ideas.md
  nkt import *.md --directory work --move
  nkt import ~/backup/groceries.json --tasklist""",
)
@click.argument("paths", nargs=-1, required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option("-d", "--directory", default=None, metavar="NAME", help="Directory to import notes into.")
@click.option("--tasklist", "as_tasklists", is_flag=True, help="Import each .json file as a new tasklist.")
@click.option("--move", is_flag=True, help="Move the files instead of copying them.")
@click.pass_obj
def import_cmd(
    app: AppContext,
    paths: tuple[Path, ...],
    directory: str | None,
    as_tasklists: bool,
    move: bool,
) -> None:
    """Import files as notes (or tasklists) and register them in the topology."""
    from nkt.services.create import CreateService

    if as_tasklists and directory is not None:
        msg = "--directory and --tasklist cannot be used together"
        raise click.UsageError(msg)
    svc = app.service(CreateService, "import")
    app.emit(svc.import_files(paths, directory=directory, as_tasklists=as_tasklists, move=move))
