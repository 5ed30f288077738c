"""The item union returned by selection: one record plus its owning collection."""

from __future__ import annotations

from dataclasses import dataclass

from nkt.domain.collection import Collection
from nkt.domain.directory import Directory, Note
from nkt.domain.journal import Day, Entry, Journal
from nkt.domain.tasklist import Tasklist, Task
from nkt.domain.types import CollectionKind


@dataclass
class DayItem:
    journal: Journal
    day: Day

    @property
    def collection(self) -> Journal:
        return self.journal


@dataclass
class EntryItem:
    journal: Journal
    day: Day
    entry: Entry

    @property
    def collection(self) -> Journal:
        return self.journal


@dataclass
class NoteItem:
    directory: Directory
    note: Note

    @property
    def collection(self) -> Directory:
        return self.directory


@dataclass
class TaskItem:
    tasklist: Tasklist
    task: Task

    @property
    def collection(self) -> Tasklist:
        return self.tasklist


@dataclass
class CollectionItem:
    collection: Collection


type Item = DayItem | EntryItem | NoteItem | TaskItem | CollectionItem


def item_kind(item: Item) -> CollectionKind:
    return item.collection.kind


def item_name(item: Item) -> str:
    """The name a stack reference records for *item*."""
    match item:
        case DayItem(day=day) | EntryItem(day=day):
            return day.name
        case NoteItem(note=note):
            return note.name
        case TaskItem(task=task):
            return task.outcome
        case CollectionItem(collection=collection):
            return collection.name
