"""Shared service-layer helpers: item payloads and input parsing."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from nkt.domain.items import CollectionItem, DayItem, EntryItem, Item, NoteItem, TaskItem
from nkt.domain.tasklist import hash_hex, mini_hash
from nkt.domain.time import TimeZone, parse_timelike


def parse_due(text: str | None, now: datetime, tz: TimeZone) -> datetime | None:
    """Colloquial due date, with ``tonight`` meaning today evening."""
    if text is None:
        return None
    return parse_timelike(now, text, tz)


def describe_item(item: Item, tz: TimeZone, now: datetime) -> dict[str, Any]:
    """JSON-ready summary of *item*, tagged with its kind of record."""
    collection = item.collection
    base: dict[str, Any] = {
        "collection": collection.name,
        "collection_kind": str(collection.kind),
    }
    match item:
        case EntryItem(day=day, entry=entry):
            return {
                **base,
                "item": "entry",
                "day": day.name,
                "time": tz.format_time(entry.created),
                "text": entry.text,
                "tags": [t.name for t in entry.tags],
            }
        case DayItem(journal=journal, day=day):
            return {
                **base,
                "item": "day",
                "day": day.name,
                "entries": len(journal.get_entries(day)),
                "tags": [t.name for t in day.tags],
            }
        case NoteItem(note=note):
            return {
                **base,
                "item": "note",
                "name": note.name,
                "path": note.path,
                "modified": tz.format_datetime(note.modified),
                "tags": [t.name for t in note.tags],
            }
        case TaskItem(tasklist=tasklist, task=task):
            index = tasklist.index_of(task)
            return {
                **base,
                "item": "task",
                "outcome": task.outcome,
                "action": task.action,
                "index": None if index is None else f"t{index}",
                "hash": hash_hex(task.hash),
                "mini_hash": mini_hash(task.hash),
                "status": str(task.status(now)),
                "importance": str(task.importance),
                "due": tz.format_datetime(task.due) if task.due else None,
                "tags": [t.name for t in task.tags],
            }
        case CollectionItem():
            return {**base, "item": "collection", "name": collection.name}
    return base
