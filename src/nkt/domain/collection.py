"""Shared shape of a loaded collection.

A collection handle wraps the per-collection payload model (``info``)
together with the descriptor that locates it on disk. Handles are
created by the topology store, which installs an ``on_modified`` hook
so every persisted-state mutation marks the cache entry dirty.

INVARIANT: a handle method that changes ``info`` calls :meth:`touch`
before returning.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import PurePosixPath
from typing import ClassVar, Protocol

from pydantic import BaseModel

from nkt.domain.tags import Tag, drop_tags, merge_tags
from nkt.domain.time import Time
from nkt.domain.types import CollectionKind
from nkt.errors import NeedsFilesystem


class Storage(Protocol):
    """File access a collection needs; paths are relative to the root."""

    def read_text(self, path: str) -> str: ...

    def overwrite(self, path: str, content: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def make_dir(self, path: str) -> None: ...

    def move(self, src: str, dst: str) -> None: ...

    def remove(self, path: str) -> None: ...


class Descriptor(BaseModel):
    """Identifies one collection instance of one kind."""

    name: str
    path: str
    created: Time
    modified: Time

    @property
    def folder(self) -> str:
        """Directory holding the collection file and its companions."""
        return str(PurePosixPath(self.path).parent)


class Collection[InfoT: BaseModel]:
    """Base class for Journal, Directory and Tasklist handles."""

    kind: ClassVar[CollectionKind]
    info_model: ClassVar[type[BaseModel]]

    def __init__(
        self,
        descriptor: Descriptor,
        info: InfoT,
        *,
        storage: Storage | None = None,
        on_modified: Callable[[], None] | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.info = info
        self.storage = storage
        self.on_modified = on_modified
        self.setup()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def folder(self) -> str:
        return self.descriptor.folder

    def setup(self) -> None:
        """Initialise handle-only state; called at the end of __init__."""

    def touch(self) -> None:
        """Report a mutation to the owning store."""
        if self.on_modified is not None:
            self.on_modified()

    def serialize(self) -> str:
        return self.info.model_dump_json(indent=4)

    def write_companions(self) -> int:
        """Write files owned by the collection besides its own; returns count."""
        return 0

    def relocate(self, old_folder: str, new_folder: str) -> None:
        """Rewrite record paths after the collection folder moved."""

    def require_storage(self) -> Storage:
        if self.storage is None:
            msg = f"{self.kind} '{self.name}' has no filesystem attached"
            raise NeedsFilesystem(msg)
        return self.storage

    # --- Collection-level tags ---

    def add_tags(self, tags: list[Tag]) -> None:
        self.info.tags = merge_tags(self.info.tags, tags)  # type: ignore[attr-defined]
        self.touch()

    def remove_tags(self, names: list[str]) -> None:
        self.info.tags = drop_tags(self.info.tags, names)  # type: ignore[attr-defined]
        self.touch()


def stamp(record: BaseModel, now: datetime) -> None:
    """Set ``record.modified`` to *now*."""
    record.modified = now  # type: ignore[attr-defined]
