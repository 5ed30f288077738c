"""CreateService: journal entries, tasks, notes, collections and registry items.

Pipeline: VALIDATE → APPLY → FLUSH → RESPOND. Tags are validated against
the registry before anything is mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from nkt.domain.chains import Chain
from nkt.domain.directory import DEFAULT_EXTENSION, Directory
from nkt.domain.frontmatter import process
from nkt.domain.journal import Entry, Journal
from nkt.domain.tags import TagDescriptor, make_tags, merge_tags, parse_inline_tags
from nkt.domain.tasklist import Tasklist, hash_hex, mini_hash, parse_importance
from nkt.domain.types import CollectionKind
from nkt.errors import DuplicateItem, InvalidName, NktError, NoSuchFile
from nkt.services._helpers import parse_due
from nkt.services.base import BaseService
from nkt.services.result import ServiceResult
from nkt.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _extension(path: Path) -> str:
    return path.suffix.lstrip(".") or DEFAULT_EXTENSION


class CreateService(BaseService):
    """Adds new records to collections and registries."""

    # ------------------------------------------------------------------
    # Collection contents
    # ------------------------------------------------------------------

    @traced
    def log(
        self,
        text: str,
        *,
        journal: str | None = None,
        tags: Sequence[str] = (),
    ) -> ServiceResult:
        """Add a journal entry stamped now; inline ``@tags`` are picked up."""
        op = "log"
        try:
            now = self._clock()
            target: Journal = self._collection(CollectionKind.JOURNAL, journal)
            entry_tags = merge_tags(make_tags(tags, now), parse_inline_tags(text, now))
            self._root.validate_tags(entry_tags)

            entry = Entry(text=text, created=now, modified=now, tags=entry_tags)
            day = target.add_entry(entry, self._tz)
            with trace_span("write_changes") as span:
                written = self._root.write_changes()
                if span:
                    span.annotate("collections_written", written)
        except NktError as exc:
            return self._fail(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "journal": target.name,
                "day": day.name,
                "time": self._tz.format_time(entry.created),
                "text": entry.text,
                "tags": [t.name for t in entry.tags],
            },
        )

    @traced
    def add_task(
        self,
        outcome: str,
        action: str | None = None,
        *,
        tasklist: str | None = None,
        details: str | None = None,
        due: str | None = None,
        importance: str = "low",
        tags: Sequence[str] = (),
    ) -> ServiceResult:
        op = "add_task"
        try:
            now = self._clock()
            target: Tasklist = self._collection(CollectionKind.TASKLIST, tasklist)
            task_tags = merge_tags(make_tags(tags, now), parse_inline_tags(outcome, now))
            self._root.validate_tags(task_tags)
            task = target.new_task(
                outcome,
                now,
                action=action,
                details=details,
                due=parse_due(due, now, self._tz),
                importance=parse_importance(importance),
                tags=task_tags,
            )
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)

        index = target.index_of(task)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "tasklist": target.name,
                "outcome": task.outcome,
                "action": task.action,
                "hash": hash_hex(task.hash),
                "mini_hash": mini_hash(task.hash),
                "index": None if index is None else f"t{index}",
                "due": self._tz.format_datetime(task.due) if task.due else None,
                "importance": str(task.importance),
            },
        )

    @traced
    def add_note(
        self,
        name: str,
        *,
        directory: str | None = None,
        ext: str = DEFAULT_EXTENSION,
        content: str | None = None,
        tags: Sequence[str] = (),
    ) -> ServiceResult:
        op = "add_note"
        try:
            now = self._clock()
            target: Directory = self._collection(CollectionKind.DIRECTORY, directory)
            note_tags = make_tags(tags, now)
            self._root.validate_tags(note_tags)
            note = target.add_new_note(name, now, ext)
            if note_tags:
                target.add_note_tags(note, note_tags)
            target.write_note(note, content or "", now)
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={"directory": target.name, "name": note.name, "path": note.path},
        )

    @traced
    def import_files(
        self,
        paths: Sequence[Path | str],
        *,
        directory: str | None = None,
        as_tasklists: bool = False,
        move: bool = False,
    ) -> ServiceResult:
        """Bring files from outside the root in and register them.

        Into a directory, each file becomes a note named after its stem
        (front matter is converted where a pipeline recognises it). With
        *as_tasklists*, each ``.json`` file becomes a new tasklist. Every
        file is checked before the first one is copied or moved.
        """
        op = "import"
        imported: list[dict[str, Any]] = []
        try:
            sources = [Path(p) for p in paths]
            missing = [str(s) for s in sources if not s.is_file()]
            if missing:
                msg = f"No such file: {', '.join(missing)}"
                raise NoSuchFile(msg, paths=", ".join(missing))
            stems = [s.stem for s in sources]
            clashes = sorted({s for s in stems if stems.count(s) > 1})
            if clashes:
                msg = f"Several files would be imported as: {', '.join(clashes)}"
                raise DuplicateItem(msg, names=", ".join(clashes))

            if as_tasklists:
                kind = CollectionKind.TASKLIST
                for source in sources:
                    if source.suffix != ".json":
                        msg = f"Tasklists are imported from .json files, not '{source.name}'"
                        raise InvalidName(msg, path=str(source))
                infos = [self._root.read_adoptable(s.stem, kind, s) for s in sources]
                for source, info in zip(sources, infos, strict=True):
                    collection = self._root.adopt_collection(source.stem, kind, source, info, move=move)
                    imported.append({"name": collection.name, "path": collection.descriptor.path, "pipeline": None})
                where = None
            else:
                kind = CollectionKind.DIRECTORY
                now = self._clock()
                target: Directory = self._collection(kind, directory)
                for source in sources:
                    target.check_new_name(source.stem, _extension(source))
                fs = self._root.require_fs()
                for source in sources:
                    note = target.add_new_note(source.stem, now, _extension(source))
                    fs.bring_in(source, note.path, move=move)
                    converted = process(target.read_note(note))
                    if converted is not None:
                        target.write_note(note, converted.content, now)
                        note.created = converted.created
                        note.modified = converted.modified
                    imported.append(
                        {
                            "name": note.name,
                            "path": note.path,
                            "pipeline": converted.pipeline if converted else None,
                        }
                    )
                where = target.name
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)

        logger.info("Imported %d file(s) as %s", len(imported), kind)
        return ServiceResult(
            ok=True,
            op=op,
            data={"kind": str(kind), "collection": where, "moved": move, "imported": imported},
        )

    # ------------------------------------------------------------------
    # Collections and registries
    # ------------------------------------------------------------------

    @traced
    def new_collection(self, kind: CollectionKind, name: str) -> ServiceResult:
        op = "new_collection"
        try:
            collection = self._root.add_new_collection(name, kind)
            self._root.write_changes()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"kind": str(kind), "name": collection.name, "path": collection.descriptor.path},
        )

    @traced
    def new_tag(self, name: str) -> ServiceResult:
        op = "new_tag"
        try:
            now = self._clock()
            (tag,) = make_tags([name], now)
            descriptor = TagDescriptor(name=tag.name, created=now)
            self._root.tags().add(descriptor)
            self._root.write_tags()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": descriptor.name, "color": descriptor.color.hex()},
        )

    @traced
    def new_chain(
        self,
        name: str,
        *,
        alias: str | None = None,
        details: str | None = None,
    ) -> ServiceResult:
        op = "new_chain"
        try:
            chain = Chain(name=name, alias=alias, details=details, created=self._clock())
            self._root.chains().add_chain(chain)
            self._root.write_chains()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={"name": chain.name, "alias": chain.alias})

    @traced
    def new_stack(self, name: str) -> ServiceResult:
        op = "new_stack"
        try:
            stack = self._root.stacks().add_stack(name, self._clock())
            self._root.write_stacks()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={"name": stack.name})

