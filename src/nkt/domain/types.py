"""Collection kinds and record classification enums."""

from __future__ import annotations

from enum import StrEnum


class CollectionKind(StrEnum):
    """The three named, independently persisted collection kinds."""

    DIRECTORY = "directory"
    JOURNAL = "journal"
    TASKLIST = "tasklist"

    @property
    def field_name(self) -> str:
        """Name of the descriptor array in the root topology file."""
        return _FIELD_NAMES[self]


_FIELD_NAMES: dict[CollectionKind, str] = {
    CollectionKind.DIRECTORY: "directories",
    CollectionKind.JOURNAL: "journals",
    CollectionKind.TASKLIST: "tasklists",
}

# Fallback search order when a selection does not name a kind.
# Name collisions across kinds favour directories, then journals.
SEARCH_ORDER: tuple[CollectionKind, ...] = (
    CollectionKind.DIRECTORY,
    CollectionKind.JOURNAL,
    CollectionKind.TASKLIST,
)


class Importance(StrEnum):
    """Task importance levels."""

    LOW = "low"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(StrEnum):
    """Derived task status, in descending precedence."""

    ARCHIVED = "archived"
    DONE = "done"
    PAST_DUE = "past-due"
    NEARLY_DUE = "nearly-due"
    NO_STATUS = "no-status"


class DirectoryIndexPolicy(StrEnum):
    """How an index selector is treated inside an explicitly chosen directory."""

    REJECT = "reject"
    DATE = "date"
