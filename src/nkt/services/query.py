"""QueryService: read-only access (select, read, list).

INVARIANT: nothing in this module mutates the Root.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from nkt.domain.collection import Collection
from nkt.domain.directory import Directory
from nkt.domain.items import CollectionItem, DayItem, EntryItem, NoteItem, TaskItem
from nkt.domain.journal import Journal
from nkt.domain.tasklist import Tasklist, canonical_order, hash_hex, mini_hash
from nkt.domain.types import SEARCH_ORDER, CollectionKind
from nkt.errors import NktError
from nkt.services._helpers import describe_item
from nkt.services.base import BaseService
from nkt.services.resolve import Selection
from nkt.services.result import ServiceResult
from nkt.services.telemetry import traced


class QueryService(BaseService):
    """Selection, reading and listing."""

    @traced
    def select(self, selection: Selection) -> ServiceResult:
        """Resolve *selection* and describe the item it points at."""
        op = "select"
        try:
            now = self._clock()
            item = self._resolve(selection, now)
            data = describe_item(item, self._tz, now)
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def read(self, selection: Selection) -> ServiceResult:
        """Full contents of the selected item."""
        op = "read"
        try:
            now = self._clock()
            item = self._resolve(selection, now)
            data = describe_item(item, self._tz, now)
            match item:
                case EntryItem(entry=entry):
                    data["text"] = entry.text
                case DayItem(journal=journal, day=day):
                    data["entries"] = [
                        {
                            "time": self._tz.format_time(e.created),
                            "text": e.text,
                            "tags": [t.name for t in e.tags],
                        }
                        for e in journal.get_entries(day)
                    ]
                case NoteItem(directory=directory, note=note):
                    data["content"] = directory.read_note(note)
                case TaskItem(task=task):
                    data["details"] = task.details
                    data["created"] = self._tz.format_datetime(task.created)
                case CollectionItem(collection=collection):
                    data["items"] = self._contents(collection, now, include_inactive=False)
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def list_collections(self, kind: CollectionKind | None = None) -> ServiceResult:
        """Descriptors of every collection, grouped by kind."""
        op = "list_collections"
        kinds = [kind] if kind else list(SEARCH_ORDER)
        data: dict[str, Any] = {}
        for k in kinds:
            default = self._root.default_name(k)
            data[k.field_name] = [
                {
                    "name": d.name,
                    "default": d.name == default,
                    "path": d.path,
                    "modified": self._tz.format_datetime(d.modified),
                }
                for d in self._root.descriptors(k)
            ]
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def list_items(
        self,
        kind: CollectionKind,
        name: str | None = None,
        *,
        include_inactive: bool = False,
    ) -> ServiceResult:
        """Contents of one collection (default collection of *kind* if unnamed)."""
        op = "list_items"
        try:
            collection = self._collection(kind, name)
            items = self._contents(collection, self._clock(), include_inactive=include_inactive)
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"kind": str(kind), "name": collection.name, "items": items},
        )

    @traced
    def list_tags(self) -> ServiceResult:
        op = "list_tags"
        try:
            registry = self._root.tags()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"tags": [{"name": t.name, "color": t.color.hex()} for t in registry.tags]},
        )

    # ------------------------------------------------------------------

    def _contents(self, collection: Collection, now: datetime, *, include_inactive: bool) -> list[dict[str, Any]]:
        match collection:
            case Journal():
                return [
                    {"day": d.name, "entries": len(collection.get_entries(d))}
                    for d in collection.sorted_days()
                ]
            case Directory():
                return [
                    {"name": n.name, "path": n.path, "modified": self._tz.format_datetime(n.modified)}
                    for n in sorted(collection.info.notes, key=lambda n: n.name)
                ]
            case Tasklist():
                rows = []
                for task in canonical_order(collection.info.tasks):
                    index = collection.index_of(task)
                    if index is None and not include_inactive:
                        continue
                    rows.append(
                        {
                            "index": None if index is None else f"t{index}",
                            "outcome": task.outcome,
                            "mini_hash": mini_hash(task.hash),
                            "hash": hash_hex(task.hash),
                            "status": str(task.status(now)),
                            "importance": str(task.importance),
                            "due": self._tz.format_datetime(task.due) if task.due else None,
                        }
                    )
                return rows
        return []
