"""Exception taxonomy shared by every layer.

Each exception carries a stable ``code`` which services copy into
:class:`~nkt.services.result.ServiceError` so the CLI (and scripts
reading ``--json``) can branch on it.

INVARIANT: integrity and ambiguity errors always propagate to the
caller. Only :class:`NoSuchItem` (and subclasses) may be swallowed, and
only by the fallback kind search of the selector engine.
"""

from __future__ import annotations

from typing import ClassVar


class NktError(Exception):
    """Base class for all nkt errors."""

    code: ClassVar[str] = "NKT_ERROR"

    def __init__(self, message: str = "", **detail: object) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.detail: dict[str, object] = dict(detail)


# --- Structural ----------------------------------------------------------


class NoSuchItem(NktError):
    """A lookup did not match anything."""

    code = "NO_SUCH_ITEM"


class NoSuchCollection(NoSuchItem):
    code = "NO_SUCH_COLLECTION"


class NoSuchDay(NoSuchItem):
    code = "NO_SUCH_DAY"


class NoSuchEntry(NoSuchItem):
    code = "NO_SUCH_ENTRY"


class NoSuchTask(NoSuchItem):
    code = "NO_SUCH_TASK"


class NoSuchNote(NoSuchItem):
    code = "NO_SUCH_NOTE"


class NoSuchChain(NoSuchItem):
    code = "NO_SUCH_CHAIN"


class NoSuchStack(NoSuchItem):
    code = "NO_SUCH_STACK"


class NoSuchFile(NoSuchItem):
    """A file outside the root (e.g. one being imported) does not exist."""

    code = "NO_SUCH_FILE"


# --- Integrity -----------------------------------------------------------


class DuplicateItem(NktError):
    """An insert would violate a uniqueness invariant."""

    code = "DUPLICATE_ITEM"


class DuplicateTask(DuplicateItem):
    code = "DUPLICATE_TASK"


class DuplicateNote(DuplicateItem):
    code = "DUPLICATE_NOTE"


# --- Selection -----------------------------------------------------------


class SelectionError(NktError):
    """A selection could not be resolved to exactly one item."""

    code = "SELECTION_ERROR"

    def __init__(self, message: str = "", *, selector: str | None = None, **detail: object) -> None:
        if selector is not None:
            detail["selector"] = selector
        super().__init__(message, **detail)
        self.selector = selector


class AmbiguousSelection(SelectionError):
    code = "AMBIGUOUS_SELECTION"


class InvalidSelection(SelectionError):
    code = "INVALID_SELECTION"


class IncompatibleSelection(InvalidSelection):
    """The selector cannot address anything in the chosen kind of collection."""

    code = "INCOMPATIBLE_SELECTION"


class UnknownSelection(SelectionError):
    code = "UNKNOWN_SELECTION"


# --- Environment ---------------------------------------------------------


class NeedsFilesystem(NktError):
    """Disk access was requested but no filesystem backend is attached."""

    code = "NEEDS_FILESYSTEM"


class TopologyParseError(NktError):
    """A topology or collection file could not be parsed."""

    code = "TOPOLOGY_PARSE_ERROR"


class RootNotInitialized(NktError):
    code = "ROOT_NOT_INITIALIZED"


# --- Referential / input -------------------------------------------------


class InvalidTag(NktError):
    """A tag has no matching tag descriptor."""

    code = "INVALID_TAG"


class TagNotLowercase(NktError):
    code = "TAG_NOT_LOWERCASE"


class UnknownImportance(NktError):
    code = "UNKNOWN_IMPORTANCE"


class InvalidTimelike(NktError):
    """A date or time-like string could not be parsed."""

    code = "INVALID_TIMELIKE"


class InvalidName(NktError):
    """A name cannot be stored safely (empty, path-like, or reserved)."""

    code = "INVALID_NAME"
