"""Rich Console factory and theme for nkt output.

Consoles render into a StringIO buffer so renderers keep a plain
``str`` return value. Rich drops colour codes when the output is not a
terminal (pipes, CliRunner).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

NKT_THEME = Theme(
    {
        "nkt.ok": "bold green",
        "nkt.error": "bold red",
        "nkt.warning": "bold yellow",
        "nkt.op": "bold cyan",
        "nkt.key": "dim",
        "nkt.name": "bold blue",
        "nkt.path": "dim",
        "nkt.index": "bold magenta",
        "nkt.hash": "dim cyan",
        "nkt.status.archived": "dim",
        "nkt.status.done": "green",
        "nkt.status.past_due": "bold red",
        "nkt.status.nearly_due": "yellow",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "archived": "nkt.status.archived",
    "done": "nkt.status.done",
    "past-due": "nkt.status.past_due",
    "nearly-due": "nkt.status.nearly_due",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=NKT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Rich style name for a task status (empty for no status)."""
    return _STATUS_STYLES.get(status, "")
