"""Operation-specific Rich renderers for ServiceResult.

Renderers write to a StringIO-backed Console from
:func:`~nkt.output.console.create_console` and are picked by
``result.op``. Unknown ops fall back to a key-value listing.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from nkt.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from nkt.services.result import ServiceResult

type Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to text (no ANSI codes outside a terminal)."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per listed item, or a bare status line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if isinstance(items, list) and items:
        return "\n".join(_quiet_key(item) for item in items)
    return f"OK: {result.op}"


# --- Helpers ---


def _quiet_key(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("index", "name", "day"):
            if item.get(key) is not None:
                return str(item[key])
    return str(item)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="nkt.ok"), Text(f"  {result.op}", style="nkt.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="nkt.key")
    if key in ("name", "collection", "outcome"):
        v = Text(str(value), style="nkt.name")
    elif key == "path":
        v = Text(str(value), style="nkt.path")
    elif key == "index":
        v = Text(str(value), style="nkt.index")
    elif key in ("hash", "mini_hash"):
        v = Text(str(value), style="nkt.hash")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k.append_text(v))


def _fields(console: Console, data: dict[str, Any], keys: tuple[str, ...]) -> None:
    for key in keys:
        value = data.get(key)
        if value is None or value == []:
            continue
        if isinstance(value, list) and isinstance(value[0], dict):
            continue
        if key == "tags":
            value = ", ".join(f"@{t}" for t in value)
        _field(console, key, value)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span: dict[str, Any], indent: int = 4) -> None:
    """Span tree, slow spans highlighted."""
    duration = span.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"
    line = f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# --- Error ---


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="nkt.error"), Text(f"  {result.op}", style="nkt.op"), Text(": "), msg)
    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# --- Items ---

_ITEM_KEYS: dict[str, tuple[str, ...]] = {
    "entry": ("collection", "day", "time", "text", "tags"),
    "day": ("collection", "day", "entries", "tags"),
    "note": ("collection", "name", "path", "modified", "tags"),
    "task": (
        "collection",
        "index",
        "mini_hash",
        "outcome",
        "action",
        "status",
        "importance",
        "due",
        "tags",
    ),
    "collection": ("collection_kind", "name"),
}


def _render_item(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render select/set_task/tag/remove results describing one item."""
    d = result.data
    _status_line(console, result)
    _field(console, "item", d.get("item", "?"))
    _fields(console, d, _ITEM_KEYS.get(str(d.get("item")), ()))
    for key in ("changed", "added", "removed"):
        if d.get(key):
            _field(console, key, ", ".join(d[key]))
    if verbose:
        if d.get("hash"):
            _field(console, "hash", d["hash"])
        _render_meta(console, result)


def _render_read(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Full contents: entries of a day, note text, task details."""
    d = result.data
    _render_item(result, console, verbose=verbose)
    if "entries" in d and isinstance(d["entries"], list):
        console.print()
        for entry in d["entries"]:
            tags = " ".join(f"@{t}" for t in entry.get("tags", []))
            line = Text(f"  {entry['time']}  ", style="nkt.key")
            line.append(entry["text"])
            if tags:
                line.append(f" {tags}", style="nkt.key")
            console.print(line)
    if d.get("content"):
        console.print()
        console.print(d["content"].rstrip("\n"))
    if d.get("details"):
        console.print()
        console.print(d["details"])
    if isinstance(d.get("items"), list):
        console.print()
        _render_rows(console, d["items"], verbose=verbose)


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render creation results: log, add_task, add_note, new_*, rename."""
    _status_line(console, result)
    for key, value in result.data.items():
        if value is None or value == []:
            continue
        if key == "tags":
            value = ", ".join(f"@{t}" for t in value)
        if key == "hash" and not verbose:
            continue
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# --- Tables ---


def _rows_table(rows: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    columns = [k for k in rows[0] if verbose or k != "hash"]
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for column in columns:
        style = {"index": "nkt.index", "name": "nkt.name", "mini_hash": "nkt.hash"}.get(column)
        table.add_column(column.replace("_", " ").title(), style=style, no_wrap=column == "index")
    for row in rows:
        cells = []
        for column in columns:
            value = row.get(column)
            text = "" if value is None else str(value)
            if column == "status":
                cells.append(Text(text, style=style_for_status(text)))
            else:
                cells.append(Text(text))
        table.add_row(*cells)
    return table


def _render_rows(console: Console, rows: list[dict[str, Any]], *, verbose: bool = False) -> None:
    if not rows:
        console.print(Text("  (empty)", style="dim"))
        return
    console.print(_rows_table(rows, verbose=verbose))


def _render_list_items(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    header = Text(f"{d.get('kind', '')} ", style="nkt.key")
    console.print(header.append_text(Text(str(d.get("name", "")), style="nkt.name")))
    items = d.get("items", [])
    _render_rows(console, items, verbose=verbose)
    console.print(f"\n{len(items)} items")


def _render_collections(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for field_name, rows in result.data.items():
        console.print(Text(field_name, style="nkt.op"))
        _render_rows(
            console,
            [{**r, "default": "*" if r.get("default") else ""} for r in rows],
            verbose=verbose,
        )


def _render_named_rows(key: str) -> Renderer:
    def render(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
        rows = result.data.get(key, [])
        _render_rows(console, rows, verbose=verbose)
        if verbose:
            _render_meta(console, result)

    return render


def _render_peek(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text("stack ", style="nkt.key").append_text(Text(str(result.data.get("stack")), style="nkt.name")))
    _render_rows(console, result.data.get("items", []), verbose=verbose)


def _render_import(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _fields(console, d, ("kind", "collection", "moved"))
    _render_rows(console, d.get("imported", []), verbose=verbose)
    if verbose:
        _render_meta(console, result)


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "root", d.get("root"))
    for key in ("directories", "journals", "tasklists"):
        _field(console, key, ", ".join(d.get(key, [])))
    if verbose:
        _render_meta(console, result)


# --- Generic fallback ---


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Renderer] = {
    "init": _render_init,
    # Creation
    "log": _render_mutation,
    "add_task": _render_mutation,
    "add_note": _render_mutation,
    "new_collection": _render_mutation,
    "new_tag": _render_mutation,
    "new_chain": _render_mutation,
    "new_stack": _render_mutation,
    "import": _render_import,
    "rename": _render_mutation,
    "remove_collection": _render_mutation,
    "complete_chain": _render_mutation,
    "push": _render_mutation,
    "pop": _render_mutation,
    # Items
    "select": _render_item,
    "set_task": _render_item,
    "tag": _render_item,
    "remove": _render_item,
    "read": _render_read,
    # Listings
    "list_items": _render_list_items,
    "list_collections": _render_collections,
    "list_tags": _render_named_rows("tags"),
    "list_chains": _render_named_rows("chains"),
    "peek": _render_peek,
}
