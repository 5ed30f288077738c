"""Tasklist collections: hash-identified tasks with a derived index map.

A task's ``hash`` is a 64-bit digest of ``(outcome, action)`` and is its
primary key within a tasklist. Tasks are stored in reverse canonical
order (soonest due last); the index map numbers active tasks from the
soonest due, starting at 0.

INVARIANT: no two tasks in a tasklist share a hash.
"""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field

from nkt.domain.collection import Collection, stamp
from nkt.domain.tags import Tag, drop_tags, merge_tags
from nkt.domain.time import Time
from nkt.domain.types import CollectionKind, Importance, TaskStatus
from nkt.errors import AmbiguousSelection, DuplicateTask, NoSuchTask, UnknownImportance

HASH_DIGITS = 16
NEARLY_DUE = timedelta(days=1)
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def task_hash(outcome: str, action: str | None = None) -> int:
    """Deterministic 64-bit identifier of ``(outcome, action)``."""
    payload = "\0".join((outcome, action or "")).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(payload, digest_size=8).digest(), "big")


def hash_hex(value: int) -> str:
    return f"{value:0{HASH_DIGITS}x}"


def mini_hash(value: int, digits: int = 5) -> str:
    """The leading *digits* hex digits of a task hash."""
    return hash_hex(value)[:digits]


def parse_importance(text: str) -> Importance:
    try:
        return Importance(text.lower())
    except ValueError as exc:
        msg = f"Unknown importance '{text}' (choose low, high or urgent)"
        raise UnknownImportance(msg, importance=text) from exc


class Task(BaseModel):
    outcome: str
    action: str | None = None
    details: str | None = None
    hash: int
    created: Time
    modified: Time
    due: Time | None = None
    done: Time | None = None
    archived: Time | None = None
    importance: Importance = Importance.LOW
    tags: list[Tag] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.done is None and self.archived is None

    def status(self, relative: datetime) -> TaskStatus:
        """Archived > done > past due > nearly due (within 24h) > none."""
        if self.archived is not None:
            return TaskStatus.ARCHIVED
        if self.done is not None:
            return TaskStatus.DONE
        if self.due is None:
            return TaskStatus.NO_STATUS
        if relative > self.due:
            return TaskStatus.PAST_DUE
        if self.due - relative < NEARLY_DUE:
            return TaskStatus.NEARLY_DUE
        return TaskStatus.NO_STATUS


class TasklistInfo(BaseModel):
    tags: list[Tag] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)


def canonical_order(tasks: list[Task]) -> list[Task]:
    """Due ascending with undated tasks last; ties reverse-alphabetical."""
    by_outcome = sorted(tasks, key=lambda t: t.outcome.lower(), reverse=True)
    return sorted(by_outcome, key=lambda t: (t.due is None, t.due or _EPOCH))


class Tasklist(Collection[TasklistInfo]):
    """A loaded tasklist collection."""

    kind = CollectionKind.TASKLIST
    info_model = TasklistInfo

    def setup(self) -> None:
        self._index_map: dict[int, int | None] | None = None

    # --- Ordering ---

    def sort_tasks(self) -> None:
        self.info.tasks = list(reversed(canonical_order(self.info.tasks)))
        self._index_map = None

    def index_map(self) -> dict[int, int | None]:
        """Map task hash to its index; done and archived tasks map to ``None``."""
        if self._index_map is None or len(self._index_map) != len(self.info.tasks):
            mapping: dict[int, int | None] = {}
            counter = 0
            for task in canonical_order(self.info.tasks):
                if task.is_active:
                    mapping[task.hash] = counter
                    counter += 1
                else:
                    mapping[task.hash] = None
            self._index_map = mapping
        return self._index_map

    def index_of(self, task: Task) -> int | None:
        return self.index_map().get(task.hash)

    # --- Lookup ---

    def find_task_by_hash(self, value: int) -> Task | None:
        for task in self.info.tasks:
            if task.hash == value:
                return task
        return None

    def get_task_by_hash(self, value: int) -> Task:
        task = self.find_task_by_hash(value)
        if task is None:
            msg = f"No task /{hash_hex(value)} in tasklist '{self.name}'"
            raise NoSuchTask(msg, tasklist=self.name)
        return task

    def get_task_by_mini_hash(self, value: int, digits: int) -> Task:
        """Task whose hash starts with the *digits* hex digits of *value*."""
        if digits >= HASH_DIGITS:
            return self.get_task_by_hash(value)
        shift = 4 * (HASH_DIGITS - digits)
        matches = [t for t in self.info.tasks if t.hash >> shift == value]
        selector = f"/{value:0{digits}x}"
        if not matches:
            msg = f"No task matching {selector} in tasklist '{self.name}'"
            raise NoSuchTask(msg, tasklist=self.name)
        if len(matches) > 1:
            msg = f"{selector} matches {len(matches)} tasks; give more digits"
            raise AmbiguousSelection(msg, selector=selector)
        return matches[0]

    def get_task_by_index(self, index: int) -> Task:
        for value, position in self.index_map().items():
            if position == index:
                return self.get_task_by_hash(value)
        msg = f"No task t{index} in tasklist '{self.name}'"
        raise NoSuchTask(msg, tasklist=self.name, index=index)

    def get_task(self, outcome: str) -> Task:
        """Task by exact outcome."""
        matches = [t for t in self.info.tasks if t.outcome == outcome]
        if not matches:
            msg = f"No task '{outcome}' in tasklist '{self.name}'"
            raise NoSuchTask(msg, tasklist=self.name, outcome=outcome)
        if len(matches) > 1:
            msg = f"'{outcome}' names {len(matches)} tasks in '{self.name}'"
            raise AmbiguousSelection(msg, selector=outcome)
        return matches[0]

    # --- Mutation ---

    def new_task(
        self,
        outcome: str,
        now: datetime,
        *,
        action: str | None = None,
        details: str | None = None,
        due: datetime | None = None,
        importance: Importance = Importance.LOW,
        tags: list[Tag] | None = None,
    ) -> Task:
        task = Task(
            outcome=outcome,
            action=action,
            details=details,
            hash=task_hash(outcome, action),
            created=now,
            modified=now,
            due=due,
            importance=importance,
            tags=tags or [],
        )
        self.add_task(task)
        return task

    def add_task(self, task: Task) -> None:
        if self.find_task_by_hash(task.hash) is not None:
            msg = f"Task '{task.outcome}' already exists in tasklist '{self.name}'"
            raise DuplicateTask(msg, tasklist=self.name, outcome=task.outcome)
        self.info.tasks.append(task)
        self.sort_tasks()
        self.touch()

    def remove_task(self, task: Task) -> None:
        self.info.tasks = [t for t in self.info.tasks if t.hash != task.hash]
        self.sort_tasks()
        self.touch()

    def rename_task(
        self,
        task: Task,
        outcome: str,
        now: datetime,
        action: str | None = None,
    ) -> Task:
        """Change the outcome (and action), recomputing the hash."""
        new_action = action if action is not None else task.action
        new_hash = task_hash(outcome, new_action)
        existing = self.find_task_by_hash(new_hash)
        if existing is not None and existing is not task:
            msg = f"Task '{outcome}' already exists in tasklist '{self.name}'"
            raise DuplicateTask(msg, tasklist=self.name, outcome=outcome)
        task.outcome = outcome
        task.action = new_action
        task.hash = new_hash
        stamp(task, now)
        self.sort_tasks()
        self.touch()
        return task

    def set_done(self, task: Task, now: datetime) -> None:
        task.done = now
        self._changed(task, now)

    def set_undone(self, task: Task, now: datetime) -> None:
        task.done = None
        self._changed(task, now)

    def set_archived(self, task: Task, now: datetime) -> None:
        task.archived = now
        self._changed(task, now)

    def set_due(self, task: Task, due: datetime | None, now: datetime) -> None:
        task.due = due
        self._changed(task, now)

    def set_importance(self, task: Task, importance: Importance, now: datetime) -> None:
        task.importance = importance
        self._changed(task, now)

    def set_details(self, task: Task, details: str | None, now: datetime) -> None:
        task.details = details
        self._changed(task, now)

    def add_task_tags(self, task: Task, tags: list[Tag]) -> None:
        task.tags = merge_tags(task.tags, tags)
        self.touch()

    def remove_task_tags(self, task: Task, names: list[str]) -> None:
        task.tags = drop_tags(task.tags, names)
        self.touch()

    def _changed(self, task: Task, now: datetime) -> None:
        stamp(task, now)
        self.sort_tasks()
        self.touch()
