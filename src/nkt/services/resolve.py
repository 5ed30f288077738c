"""Selection resolution: turn a compact selection into exactly one item.

With an explicit kind (flag or qualifier) only the named (or default)
collection of that kind is searched. Otherwise directories, journals
and tasklists are tried in that order, skipping kinds that cannot
accept the selector; within a kind the default collection goes first.

INVARIANT: resolution never mutates state. Only ``NoSuchItem`` (and
subclasses) is caught, and only to move on to the next candidate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from nkt.domain.collection import Collection
from nkt.domain.directory import Directory
from nkt.domain.items import CollectionItem, DayItem, EntryItem, Item, NoteItem, TaskItem
from nkt.domain.journal import Journal
from nkt.domain.selectors import (
    DateSelector,
    HashSelector,
    IndexSelector,
    NameSelector,
    QualifiedIndexSelector,
    Selector,
    parse_selector,
    selector_text,
)
from nkt.domain.tasklist import Tasklist
from nkt.domain.time import TimeZone, format_date, is_time, shift_back, to_time_of_day
from nkt.domain.types import SEARCH_ORDER, CollectionKind, DirectoryIndexPolicy
from nkt.errors import (
    AmbiguousSelection,
    IncompatibleSelection,
    InvalidSelection,
    NoSuchCollection,
    NoSuchItem,
    NoSuchNote,
    UnknownSelection,
)
from nkt.infrastructure.root import Root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """A selector plus optional kind, collection name and entry time."""

    selector: Selector | None = None
    kind: CollectionKind | None = None
    collection: str | None = None
    entry_time: str | None = None

    @classmethod
    def parse(
        cls,
        text: str | None,
        *,
        kind: CollectionKind | None = None,
        collection: str | None = None,
        entry_time: str | None = None,
    ) -> Selection:
        """Parse *text*; ``name:selector`` names the collection when none is given."""
        if text and collection is None and ":" in text and not is_time(text):
            hint, _, text = text.partition(":")
            collection = hint or None
        if entry_time is not None:
            entry_time = to_time_of_day(entry_time).strftime("%H:%M:%S")
        return cls(
            selector=parse_selector(text) if text else None,
            kind=kind,
            collection=collection,
            entry_time=entry_time,
        )

    def describe(self) -> str:
        text = selector_text(self.selector) if self.selector is not None else ""
        if self.collection:
            text = f"{self.collection}:{text}"
        return text


def accepts(kind: CollectionKind, selection: Selection) -> bool:
    """Can a collection of *kind* hold what *selection* points at?"""
    if selection.entry_time is not None:
        return kind is CollectionKind.JOURNAL
    match selection.selector:
        case IndexSelector():
            return kind is not CollectionKind.DIRECTORY
        case HashSelector():
            return kind is CollectionKind.TASKLIST
        case DateSelector():
            return kind is not CollectionKind.TASKLIST
        case NameSelector():
            return True
    return False


class Resolver:
    """Resolves :class:`Selection` values against a :class:`Root`."""

    def __init__(
        self,
        root: Root,
        tz: TimeZone,
        *,
        now: datetime,
        directory_index: DirectoryIndexPolicy = DirectoryIndexPolicy.REJECT,
    ) -> None:
        self.root = root
        self.tz = tz
        self.now = now
        self.directory_index = directory_index

    def resolve(self, selection: Selection) -> Item:
        logger.debug("Resolving %r", selection)
        if selection.selector is None:
            return self._collection_only(selection)

        kind = self._explicit_kind(selection)
        if kind is not None:
            name = selection.collection or self.root.default_name(kind)
            collection = self.root.require_collection(name, kind)
            return self.within(collection, selection, explicit=True)
        return self._fallback(selection)

    # --- Kind selection ---

    def _explicit_kind(self, selection: Selection) -> CollectionKind | None:
        selector = selection.selector
        if not isinstance(selector, QualifiedIndexSelector):
            return selection.kind
        text = selector_text(selector)
        qualified = selector.kind
        if qualified is None:
            msg = f"Unknown qualifier '{selector.qualifier}' in '{text}'"
            raise UnknownSelection(msg, selector=text)
        if selection.kind is not None and selection.kind is not qualified:
            msg = f"'{text}' selects a {qualified}, not a {selection.kind}"
            raise IncompatibleSelection(msg, selector=text)
        return qualified

    def _collection_only(self, selection: Selection) -> Item:
        name = selection.collection
        if name is None:
            msg = "Nothing selected"
            raise InvalidSelection(msg)
        kinds = [selection.kind] if selection.kind else list(SEARCH_ORDER)
        for kind in kinds:
            collection = self.root.get_collection(name, kind)
            if collection is not None:
                return CollectionItem(collection)
        msg = f"No collection named '{name}'"
        raise NoSuchCollection(msg, name=name)

    # --- Fallback search ---

    def _fallback(self, selection: Selection) -> Item:
        if selection.collection is not None and not any(
            self.root.get_descriptor(selection.collection, kind) for kind in SEARCH_ORDER
        ):
            msg = f"No collection named '{selection.collection}'"
            raise NoSuchCollection(msg, name=selection.collection)

        for kind in SEARCH_ORDER:
            if not accepts(kind, selection):
                continue
            try:
                return self._search_kind(kind, selection)
            except NoSuchItem:
                continue

        msg = f"Nothing matches '{selection.describe()}'"
        raise NoSuchItem(msg, selector=selection.describe())

    def _search_kind(self, kind: CollectionKind, selection: Selection) -> Item:
        if selection.collection is not None:
            collection = self.root.get_collection(selection.collection, kind)
            if collection is None:
                msg = f"No {kind} named '{selection.collection}'"
                raise NoSuchCollection(msg)
            return self.within(collection, selection)

        default = self.root.default_name(kind)
        collection = self.root.get_collection(default, kind)
        if collection is not None:
            try:
                return self.within(collection, selection)
            except NoSuchItem:
                pass

        matches: list[Item] = []
        for name in self.root.collection_names(kind):
            if name == default:
                continue
            other = self.root.get_collection(name, kind)
            if other is None:
                continue
            try:
                matches.append(self.within(other, selection))
            except NoSuchItem:
                continue
        if len(matches) > 1:
            where = ", ".join(m.collection.name for m in matches)
            msg = f"'{selection.describe()}' matches items in several {kind.field_name}: {where}"
            raise AmbiguousSelection(msg, selector=selection.describe())
        if matches:
            return matches[0]
        msg = f"No match in any {kind}"
        raise NoSuchItem(msg)

    # --- Within one collection ---

    def within(self, collection: Collection, selection: Selection, *, explicit: bool = False) -> Item:
        """Resolve *selection* inside a single collection."""
        match collection:
            case Journal():
                return self._in_journal(collection, selection)
            case Directory():
                return self._in_directory(collection, selection, explicit=explicit)
            case Tasklist():
                return self._in_tasklist(collection, selection)
        msg = f"Unsupported collection {collection!r}"
        raise InvalidSelection(msg)

    def _incompatible(self, selection: Selection, kind: CollectionKind) -> IncompatibleSelection:
        text = selection.describe()
        return IncompatibleSelection(f"'{text}' cannot select inside a {kind}", selector=text)

    def _in_journal(self, journal: Journal, selection: Selection) -> Item:
        match selection.selector:
            case IndexSelector(index=index) | QualifiedIndexSelector(index=index):
                day = journal.get_day_offset(self.now, index, self.tz)
            case DateSelector(value=value):
                day = journal.get_day_by_date(value)
            case NameSelector(name=name):
                day = journal.get_day(name)
            case _:
                raise self._incompatible(selection, CollectionKind.JOURNAL)
        if selection.entry_time is None:
            return DayItem(journal, day)
        entry = journal.get_entry_at(day, selection.entry_time, self.tz)
        return EntryItem(journal, day, entry)

    def _in_directory(self, directory: Directory, selection: Selection, *, explicit: bool) -> Item:
        if selection.entry_time is not None:
            raise self._incompatible(selection, CollectionKind.DIRECTORY)
        match selection.selector:
            case NameSelector(name=name):
                return NoteItem(directory, directory.get_note(name))
            case DateSelector(value=value):
                return NoteItem(directory, directory.get_note(format_date(value)))
            case IndexSelector(index=index) if explicit and self.directory_index is DirectoryIndexPolicy.DATE:
                try:
                    name = format_date(shift_back(self.now, index, self.tz))
                except (OverflowError, ValueError) as exc:
                    msg = f"No note {index} days back in directory '{directory.name}'"
                    raise NoSuchNote(msg, directory=directory.name, offset=index) from exc
                return NoteItem(directory, directory.get_note(name))
        raise self._incompatible(selection, CollectionKind.DIRECTORY)

    def _in_tasklist(self, tasklist: Tasklist, selection: Selection) -> Item:
        if selection.entry_time is not None:
            raise self._incompatible(selection, CollectionKind.TASKLIST)
        match selection.selector:
            case IndexSelector(index=index) | QualifiedIndexSelector(index=index):
                return TaskItem(tasklist, tasklist.get_task_by_index(index))
            case HashSelector(value=value, digits=digits):
                return TaskItem(tasklist, tasklist.get_task_by_mini_hash(value, digits))
            case NameSelector(name=name):
                return TaskItem(tasklist, tasklist.get_task(name))
        raise self._incompatible(selection, CollectionKind.TASKLIST)
