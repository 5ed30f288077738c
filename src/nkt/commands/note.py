"""Command: create a note file in a directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.commands._base import NktCommand

if TYPE_CHECKING:
    from nkt.commands._context import AppContext


@click.command(
    cls=NktCommand,
    examples="""\
  nkt note reading-list
  nkt note design --directory work --ext txt
  echo "# Ideas" | nkt note ideas --stdin""",
)
@click.argument("name")
@click.option("-d", "--directory", default=None, metavar="NAME", help="Directory to create the note in.")
@click.option("--ext", default="md", show_default=True, help="File extension.")
@click.option("--tag", "tags", multiple=True, help="Tag to attach (repeatable).")
@click.option("--stdin", "from_stdin", is_flag=True, help="Read the initial content from stdin.")
@click.pass_obj
def note(
    app: AppContext,
    name: str,
    directory: str | None,
    ext: str,
    tags: tuple[str, ...],
    from_stdin: bool,
) -> None:
    """Create a new note NAME."""
    from nkt.services.create import CreateService

    content = click.get_text_stream("stdin").read() if from_stdin else None
    svc = app.service(CreateService, "add_note")
    app.emit(svc.add_note(name, directory=directory, ext=ext, content=content, tags=tags))
