"""Front-matter handling for imported notes.

Dendron notes open with a ``---`` delimited block of ``key: value``
lines carrying millisecond ``created``/``updated`` stamps and a
``title``. On import the block is replaced by a ``# title`` heading and
the stamps are kept on the note.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from nkt.domain.time import from_millis

DELIMITER = "---"


@dataclass(frozen=True)
class Imported:
    pipeline: str
    content: str
    created: datetime
    modified: datetime


def split_front_matter(content: str) -> tuple[dict[str, str], str] | None:
    """``(fields, body)`` if *content* opens with a front-matter block."""
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return None
    fields: dict[str, str] = {}
    for i, line in enumerate(lines[1:], start=1):
        stripped = line.strip()
        if stripped == DELIMITER:
            return fields, "".join(lines[i + 1 :])
        key, sep, value = stripped.partition(":")
        if sep and key.strip():
            fields[key.strip()] = value.strip().strip("'\"")
    return None


def dendron(content: str) -> Imported | None:
    parsed = split_front_matter(content)
    if parsed is None:
        return None
    fields, body = parsed
    try:
        created = from_millis(int(fields["created"]))
        modified = from_millis(int(fields["updated"]))
    except (KeyError, ValueError, OverflowError, OSError):
        return None
    title = fields.get("title")
    if title:
        body = f"# {title}\n" + body.lstrip("\n")
    return Imported(pipeline="dendron", content=body, created=created, modified=modified)


PIPELINES = (dendron,)


def process(content: str) -> Imported | None:
    """Run *content* through each known pipeline; first match wins."""
    for pipeline in PIPELINES:
        result = pipeline(content)
        if result is not None:
            return result
    return None
