"""UpdateService: task state, tagging, renaming and removal.

Every operation resolves its target through the selection engine, applies
the change through the collection model and flushes with
``write_changes``. Stack references follow renamed notes, tasks and
collections.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from nkt.domain.directory import Directory
from nkt.domain.items import CollectionItem, DayItem, EntryItem, Item, NoteItem, TaskItem
from nkt.domain.tags import make_tags
from nkt.domain.tasklist import hash_hex, parse_importance
from nkt.domain.types import CollectionKind
from nkt.errors import InvalidSelection, NktError
from nkt.services._helpers import describe_item, parse_due
from nkt.services.base import BaseService
from nkt.services.resolve import Selection
from nkt.services.result import ServiceResult
from nkt.services.telemetry import traced


class UpdateService(BaseService):
    """Modifies, renames and removes existing items."""

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    @traced
    def set_task(
        self,
        selection: Selection,
        *,
        done: bool = False,
        undone: bool = False,
        archive: bool = False,
        due: str | None = None,
        clear_due: bool = False,
        importance: str | None = None,
        details: str | None = None,
    ) -> ServiceResult:
        """Change task state; several changes may be combined."""
        op = "set_task"
        changed: list[str] = []
        try:
            now = self._clock()
            item = self._resolve(selection, now)
            if not isinstance(item, TaskItem):
                msg = f"'{selection.describe()}' is not a task"
                raise InvalidSelection(msg, selector=selection.describe())
            tasklist, task = item.tasklist, item.task

            if done:
                tasklist.set_done(task, now)
                changed.append("done")
            if undone:
                tasklist.set_undone(task, now)
                changed.append("undone")
            if archive:
                tasklist.set_archived(task, now)
                changed.append("archived")
            if due is not None:
                tasklist.set_due(task, parse_due(due, now, self._tz), now)
                changed.append("due")
            if clear_due:
                tasklist.set_due(task, None, now)
                changed.append("due")
            if importance is not None:
                tasklist.set_importance(task, parse_importance(importance), now)
                changed.append("importance")
            if details is not None:
                tasklist.set_details(task, details, now)
                changed.append("details")
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)

        warnings = [] if changed else ["Nothing to change"]
        return ServiceResult(
            ok=True,
            op=op,
            data={**describe_item(item, self._tz, now), "changed": changed},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    @traced
    def tag(self, selection: Selection, names: Sequence[str], *, delete: bool = False) -> ServiceResult:
        """Attach (or with *delete*, detach) tags on any selected item."""
        op = "tag"
        try:
            now = self._clock()
            item = self._resolve(selection, now)
            tags = make_tags(names, now)
            if not delete:
                self._root.validate_tags(tags)
            tag_names = [t.name for t in tags]
            match item:
                case EntryItem(journal=journal, day=day, entry=entry):
                    if delete:
                        journal.remove_entry_tags(day, entry, tag_names)
                    else:
                        journal.add_entry_tags(day, entry, tags)
                case DayItem(journal=journal, day=day):
                    if delete:
                        journal.remove_day_tags(day, tag_names)
                    else:
                        journal.add_day_tags(day, tags)
                case NoteItem(directory=directory, note=note):
                    if delete:
                        directory.remove_note_tags(note, tag_names)
                    else:
                        directory.add_note_tags(note, tags)
                case TaskItem(tasklist=tasklist, task=task):
                    if delete:
                        tasklist.remove_task_tags(task, tag_names)
                    else:
                        tasklist.add_task_tags(task, tags)
                case CollectionItem(collection=collection):
                    if delete:
                        collection.remove_tags(tag_names)
                    else:
                        collection.add_tags(tags)
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={**describe_item(item, self._tz, now), "removed" if delete else "added": tag_names},
        )

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    @traced
    def rename(
        self,
        selection: Selection,
        new_name: str,
        *,
        to_directory: str | None = None,
    ) -> ServiceResult:
        """Rename a note, task or collection; notes may also move directory."""
        op = "rename"
        data: dict[str, Any] = {}
        try:
            now = self._clock()
            item = self._resolve(selection, now)
            stacks = self._root.stacks()
            references = 0
            match item:
                case NoteItem(directory=directory, note=note):
                    old = note.name
                    if to_directory is not None and to_directory != directory.name:
                        target: Directory = self._collection(CollectionKind.DIRECTORY, to_directory)
                        moved = directory.move_note_to(note, target, now, new_name)
                        references = stacks.rename_references(
                            CollectionKind.DIRECTORY, directory.name, old, moved.name, new_parent=target.name
                        )
                        data = {"from": f"{directory.name}:{old}", "to": f"{target.name}:{moved.name}"}
                    else:
                        directory.rename_note(note, new_name, now)
                        references = stacks.rename_references(
                            CollectionKind.DIRECTORY, directory.name, old, new_name
                        )
                        data = {"from": old, "to": new_name, "directory": directory.name}
                case TaskItem(tasklist=tasklist, task=task):
                    old = task.outcome
                    tasklist.rename_task(task, new_name, now)
                    references = stacks.rename_references(CollectionKind.TASKLIST, tasklist.name, old, new_name)
                    data = {"from": old, "to": new_name, "tasklist": tasklist.name, "hash": hash_hex(task.hash)}
                case CollectionItem(collection=collection):
                    old = collection.name
                    self._root.rename_collection(old, new_name, collection.kind)
                    references = stacks.rename_parent(collection.kind, old, new_name)
                    data = {"from": old, "to": new_name, "kind": str(collection.kind)}
                case DayItem() | EntryItem():
                    msg = "Journal days and entries cannot be renamed"
                    raise InvalidSelection(msg, selector=selection.describe())
            self._root.write_changes()
            if references:
                self._root.write_stacks()
        except NktError as exc:
            return self._fail(op, exc)

        return ServiceResult(ok=True, op=op, data={**data, "stack_references": references})

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    @traced
    def remove(self, selection: Selection) -> ServiceResult:
        """Remove the selected day, entry, note, task or collection."""
        op = "remove"
        try:
            now = self._clock()
            item = self._resolve(selection, now)
            removed = describe_item(item, self._tz, now)
            self._remove_item(item, now)
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data=removed)

    @traced
    def remove_collection(self, kind: CollectionKind, name: str) -> ServiceResult:
        op = "remove_collection"
        try:
            descriptor = self._root.remove_collection(name, kind)
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={"kind": str(kind), "name": descriptor.name})

    def _remove_item(self, item: Item, now: datetime) -> None:
        match item:
            case EntryItem(journal=journal, day=day, entry=entry):
                journal.remove_entry(day, entry, now)
            case DayItem(journal=journal, day=day):
                journal.remove_day(day)
            case NoteItem(directory=directory, note=note):
                directory.remove_note(note)
            case TaskItem(tasklist=tasklist, task=task):
                tasklist.remove_task(task)
            case CollectionItem(collection=collection):
                self._root.remove_collection(collection.name, collection.kind)
