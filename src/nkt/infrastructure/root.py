"""Root: the topology store every service works against.

The Root owns the root-level topology (collection descriptors and
defaults), a cache of loaded collections with dirty flags, the tag,
chain and stack registries, and the filesystem handle.

INVARIANT: a cached collection is written to disk only through
:meth:`Root.write_changes`, and only while its dirty flag is set.
Collections set the flag themselves through the ``on_modified`` hook
installed by :meth:`Root._make_handle`.

The store is single-threaded. Two processes writing the same root
overwrite each other's files without detection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from nkt.domain.chains import ChainRegistry
from nkt.domain.collection import Collection, Descriptor
from nkt.domain.directory import Directory
from nkt.domain.journal import Journal
from nkt.domain.stacks import StackRegistry
from nkt.domain.tags import Tag, TagRegistry
from nkt.domain.tasklist import Tasklist
from nkt.domain.time import time_now
from nkt.domain.types import CollectionKind
from nkt.errors import (
    DuplicateItem,
    InvalidSelection,
    NeedsFilesystem,
    NoSuchCollection,
    RootNotInitialized,
    TopologyParseError,
)
from nkt.infrastructure.filesystem import FileSystem

logger = logging.getLogger(__name__)

ROOT_FILEPATH = "topology.json"
SCHEMA_VERSION = "0.3.0"


# ---------------------------------------------------------------------------
# Root topology model
# ---------------------------------------------------------------------------


class TextCompiler(BaseModel):
    name: str
    command: list[str] | None = None
    extensions: list[str] = Field(default_factory=list)


def _default_compilers() -> list[TextCompiler]:
    return [TextCompiler(name="markdown", extensions=[".md"])]


class TopologyInfo(BaseModel):
    """Contents of ``topology.json``."""

    model_config = {"populate_by_name": True}

    schema_version: str = Field(default=SCHEMA_VERSION, alias="_schema_version")

    editor: list[str] = Field(default_factory=lambda: ["vim"])
    pager: list[str] = Field(default_factory=lambda: ["less"])

    default_tasklist: str = "todo"
    default_directory: str = "notes"
    default_journal: str = "diary"

    chainpath: str = "chains.json"
    tagpath: str = "tags.json"
    stackpath: str = "stacks.json"

    text_compilers: list[TextCompiler] = Field(default_factory=_default_compilers)

    tasklists: list[Descriptor] = Field(default_factory=list)
    directories: list[Descriptor] = Field(default_factory=list)
    journals: list[Descriptor] = Field(default_factory=list)

    def serialize(self) -> str:
        return self.model_dump_json(indent=4, by_alias=True)


# ---------------------------------------------------------------------------
# Kind dispatch
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KindSpec:
    kind: CollectionKind
    handle: type[Collection[Any]]
    path_template: str
    default_attr: str

    @property
    def field_name(self) -> str:
        return self.kind.field_name

    def default_path(self, name: str) -> str:
        return self.path_template.format(name=name)


KIND_SPECS: dict[CollectionKind, KindSpec] = {
    CollectionKind.DIRECTORY: KindSpec(
        CollectionKind.DIRECTORY, Directory, "dir.{name}/topology.json", "default_directory"
    ),
    CollectionKind.JOURNAL: KindSpec(
        CollectionKind.JOURNAL, Journal, "journal.{name}/topology.json", "default_journal"
    ),
    CollectionKind.TASKLIST: KindSpec(
        CollectionKind.TASKLIST, Tasklist, "tasklists/{name}.json", "default_tasklist"
    ),
}


@dataclass
class CacheEntry:
    """A loaded collection plus its unsaved-changes flag."""

    modified: bool
    item: Collection[Any]


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class Root:
    """In-memory topology store backed (optionally) by a :class:`FileSystem`."""

    def __init__(
        self,
        fs: FileSystem | None = None,
        *,
        clock: Callable[[], datetime] = time_now,
    ) -> None:
        self.fs = fs
        self.clock = clock
        self.reset()

    def reset(self) -> None:
        """Forget all loaded state; the files on disk are untouched."""
        self.info = TopologyInfo()
        self._cache: dict[CollectionKind, dict[str, CacheEntry]] = {k: {} for k in CollectionKind}
        self._root_dirty = False
        self._tags: TagRegistry | None = None
        self._chains: ChainRegistry | None = None
        self._stacks: StackRegistry | None = None

    @classmethod
    def at(cls, path: Path, **kwargs: Any) -> Root:
        """A Root backed by the directory at *path*."""
        return cls(FileSystem(path), **kwargs)

    def __repr__(self) -> str:
        return f"Root(fs={self.fs!r})"

    def require_fs(self) -> FileSystem:
        if self.fs is None:
            msg = "This operation needs a filesystem-backed root"
            raise NeedsFilesystem(msg)
        return self.fs

    # --- Root topology ---

    def is_initialized(self) -> bool:
        return self.fs is not None and self.fs.exists(ROOT_FILEPATH)

    def load(self) -> None:
        """Read ``topology.json``. Collections are loaded lazily."""
        fs = self.require_fs()
        if not fs.exists(ROOT_FILEPATH):
            msg = f"No {ROOT_FILEPATH} in {fs.root}; run 'nkt init' first"
            raise RootNotInitialized(msg, root=str(fs.root))
        raw = fs.read_text(ROOT_FILEPATH)
        try:
            self.info = TopologyInfo.model_validate_json(raw)
        except ValidationError as exc:
            msg = f"Malformed {ROOT_FILEPATH}: {exc.error_count()} error(s)"
            raise TopologyParseError(msg, path=ROOT_FILEPATH) from exc
        logger.debug(
            "Loaded root: %d directories, %d journals, %d tasklists",
            len(self.info.directories),
            len(self.info.journals),
            len(self.info.tasklists),
        )

    def write_root(self) -> None:
        self.require_fs().overwrite(ROOT_FILEPATH, self.info.serialize())
        self._root_dirty = False

    # --- Descriptors ---

    def descriptors(self, kind: CollectionKind) -> list[Descriptor]:
        return getattr(self.info, kind.field_name)

    def get_descriptor(self, name: str, kind: CollectionKind) -> Descriptor | None:
        for descriptor in self.descriptors(kind):
            if descriptor.name == name:
                return descriptor
        return None

    def collection_names(self, kind: CollectionKind) -> list[str]:
        return [d.name for d in self.descriptors(kind)]

    def default_name(self, kind: CollectionKind) -> str:
        return getattr(self.info, KIND_SPECS[kind].default_attr)

    def new_path(self, name: str, kind: CollectionKind) -> str:
        return KIND_SPECS[kind].default_path(name)

    # --- Collections ---

    def _make_handle(self, descriptor: Descriptor, kind: CollectionKind, info: BaseModel) -> Collection[Any]:
        return KIND_SPECS[kind].handle(
            descriptor,
            info,
            storage=self.fs,
            on_modified=lambda: self.mark_modified(descriptor, kind),
        )

    def get_collection(self, name: str, kind: CollectionKind) -> Collection[Any] | None:
        """Cached collection, else read from disk; ``None`` if no such descriptor."""
        entry = self._cache[kind].get(name)
        if entry is not None:
            return entry.item
        descriptor = self.get_descriptor(name, kind)
        if descriptor is None:
            return None
        fs = self.require_fs()
        raw = fs.read_text(descriptor.path)
        try:
            info = KIND_SPECS[kind].handle.info_model.model_validate_json(raw)
        except ValidationError as exc:
            msg = f"Malformed {kind} file {descriptor.path}"
            raise TopologyParseError(msg, path=descriptor.path) from exc
        handle = self._make_handle(descriptor, kind, info)
        self._cache[kind][name] = CacheEntry(modified=False, item=handle)
        logger.debug("Loaded %s '%s' from %s", kind, name, descriptor.path)
        return handle

    def require_collection(self, name: str, kind: CollectionKind) -> Collection[Any]:
        collection = self.get_collection(name, kind)
        if collection is None:
            msg = f"No {kind} named '{name}'"
            raise NoSuchCollection(msg, kind=str(kind), name=name)
        return collection

    def get_journal(self, name: str | None = None) -> Journal | None:
        return self.get_collection(name or self.info.default_journal, CollectionKind.JOURNAL)  # type: ignore[return-value]

    def get_directory(self, name: str | None = None) -> Directory | None:
        return self.get_collection(name or self.info.default_directory, CollectionKind.DIRECTORY)  # type: ignore[return-value]

    def get_tasklist(self, name: str | None = None) -> Tasklist | None:
        return self.get_collection(name or self.info.default_tasklist, CollectionKind.TASKLIST)  # type: ignore[return-value]

    def add_new_collection(self, name: str, kind: CollectionKind) -> Collection[Any]:
        """Create an empty collection, its descriptor and (with a backend) its file."""
        if self.get_descriptor(name, kind) is not None:
            msg = f"A {kind} named '{name}' already exists"
            raise DuplicateItem(msg, kind=str(kind), name=name)
        now = self.clock()
        descriptor = Descriptor(name=name, path=self.new_path(name, kind), created=now, modified=now)
        self.descriptors(kind).append(descriptor)
        handle = self._make_handle(descriptor, kind, KIND_SPECS[kind].handle.info_model())
        self._cache[kind][name] = CacheEntry(modified=True, item=handle)
        self._root_dirty = True
        if self.fs is not None:
            self.fs.make_dir(descriptor.folder)
            self.fs.overwrite(descriptor.path, handle.serialize())
        logger.debug("Added %s '%s' at %s", kind, name, descriptor.path)
        return handle

    def read_adoptable(self, name: str, kind: CollectionKind, source: Path) -> BaseModel:
        """Validate an outside collection file for :meth:`adopt_collection`.

        Only single-file kinds (tasklists) can be adopted.
        """
        if kind is not CollectionKind.TASKLIST:
            msg = f"A {kind} cannot be imported from a single file"
            raise InvalidSelection(msg, kind=str(kind))
        if self.get_descriptor(name, kind) is not None:
            msg = f"A {kind} named '{name}' already exists"
            raise DuplicateItem(msg, kind=str(kind), name=name)
        try:
            return KIND_SPECS[kind].handle.info_model.model_validate_json(source.read_text(encoding="utf-8"))
        except ValidationError as exc:
            msg = f"Malformed {kind} file {source}"
            raise TopologyParseError(msg, path=str(source)) from exc

    def adopt_collection(
        self,
        name: str,
        kind: CollectionKind,
        source: Path,
        info: BaseModel,
        *,
        move: bool = False,
    ) -> Collection[Any]:
        """Copy (or move) a validated collection file into place and register it."""
        fs = self.require_fs()
        now = self.clock()
        descriptor = Descriptor(name=name, path=self.new_path(name, kind), created=now, modified=now)
        fs.bring_in(source, descriptor.path, move=move)
        self.descriptors(kind).append(descriptor)
        handle = self._make_handle(descriptor, kind, info)
        self._cache[kind][name] = CacheEntry(modified=False, item=handle)
        self._root_dirty = True
        logger.debug("Adopted %s '%s' from %s", kind, name, source)
        return handle

    def remove_collection(self, name: str, kind: CollectionKind) -> Descriptor:
        """Drop the descriptor, the cache entry and the collection's files."""
        descriptor = self.get_descriptor(name, kind)
        if descriptor is None:
            msg = f"No {kind} named '{name}'"
            raise NoSuchCollection(msg, kind=str(kind), name=name)
        setattr(
            self.info,
            kind.field_name,
            [d for d in self.descriptors(kind) if d.name != name],
        )
        self._cache[kind].pop(name, None)
        self._root_dirty = True
        if self.fs is not None:
            if kind is CollectionKind.TASKLIST:
                self.fs.remove(descriptor.path)
            else:
                self.fs.remove_dir(descriptor.folder)
        logger.debug("Removed %s '%s'", kind, name)
        return descriptor

    def rename_collection(self, name: str, new_name: str, kind: CollectionKind) -> Collection[Any]:
        """Rename a collection, moving its files and rewriting record paths."""
        if self.get_descriptor(new_name, kind) is not None:
            msg = f"A {kind} named '{new_name}' already exists"
            raise DuplicateItem(msg, kind=str(kind), name=new_name)
        collection = self.require_collection(name, kind)
        descriptor = collection.descriptor
        old_folder = descriptor.folder
        new_path = self.new_path(new_name, kind)

        if self.fs is not None:
            if kind is CollectionKind.TASKLIST:
                self.fs.move(descriptor.path, new_path)
            else:
                self.fs.move(old_folder, str(Path(new_path).parent))

        entry = self._cache[kind].pop(name)
        descriptor.name = new_name
        descriptor.path = new_path
        self._cache[kind][new_name] = entry
        if self.default_name(kind) == name:
            setattr(self.info, KIND_SPECS[kind].default_attr, new_name)
        collection.relocate(old_folder, descriptor.folder)
        self.mark_modified(descriptor, kind)
        self._root_dirty = True
        return collection

    # --- Dirty tracking ---

    def mark_modified(self, descriptor: Descriptor, kind: CollectionKind) -> None:
        entry = self._cache[kind].get(descriptor.name)
        if entry is not None:
            entry.modified = True

    def is_modified(self, name: str, kind: CollectionKind) -> bool:
        entry = self._cache[kind].get(name)
        return entry is not None and entry.modified

    def write_changes(self) -> int:
        """Flush every dirty collection; returns how many were written.

        The root topology is rewritten when anything was flushed, since
        descriptor ``modified`` stamps change. An ``OSError`` aborts the
        flush; files already written stay written.
        """
        dirty = [entry for kind in CollectionKind for entry in self._cache[kind].values() if entry.modified]
        if not dirty and not self._root_dirty:
            return 0
        fs = self.require_fs()
        now = self.clock()
        for entry in dirty:
            collection = entry.item
            collection.descriptor.modified = now
            fs.overwrite(collection.descriptor.path, collection.serialize())
            collection.write_companions()
            entry.modified = False
            logger.debug("Wrote %s '%s'", collection.kind, collection.name)
        self.write_root()
        return len(dirty)

    # --- Registries ---

    def _read_registry[M: BaseModel](self, path: str, model: type[M]) -> M:
        if self.fs is None or not self.fs.exists(path):
            return model()
        raw = self.fs.read_text(path)
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            msg = f"Malformed {path}"
            raise TopologyParseError(msg, path=path) from exc

    def tags(self) -> TagRegistry:
        if self._tags is None:
            self._tags = self._read_registry(self.info.tagpath, TagRegistry)
        return self._tags

    def chains(self) -> ChainRegistry:
        if self._chains is None:
            self._chains = self._read_registry(self.info.chainpath, ChainRegistry)
        return self._chains

    def stacks(self) -> StackRegistry:
        if self._stacks is None:
            self._stacks = self._read_registry(self.info.stackpath, StackRegistry)
        return self._stacks

    def write_tags(self) -> None:
        self.require_fs().overwrite(self.info.tagpath, self.tags().serialize())

    def write_chains(self) -> None:
        self.require_fs().overwrite(self.info.chainpath, self.chains().serialize())

    def write_stacks(self) -> None:
        self.require_fs().overwrite(self.info.stackpath, self.stacks().serialize())

    def validate_tags(self, tags: list[Tag]) -> None:
        """Raise :class:`~nkt.errors.InvalidTag` unless every tag is registered."""
        self.tags().validate(tags)

    # --- Initialisation ---

    def add_initial_collections(self) -> None:
        """Default directory, journal (with a companion directory) and tasklist."""
        self.add_new_collection(self.info.default_directory, CollectionKind.DIRECTORY)
        self.add_new_collection(self.info.default_journal, CollectionKind.JOURNAL)
        self.add_new_collection(self.info.default_journal, CollectionKind.DIRECTORY)
        self.add_new_collection(self.info.default_tasklist, CollectionKind.TASKLIST)
        self._tags = TagRegistry()
        self._chains = ChainRegistry()
        self._stacks = StackRegistry()

    def create_filesystem(self) -> None:
        """Write the root, registries and every cached collection.

        Overwrites existing files; only for initialisation.
        """
        fs = self.require_fs()
        self.write_root()
        self.write_tags()
        self.write_chains()
        self.write_stacks()
        for kind in CollectionKind:
            for entry in self._cache[kind].values():
                descriptor = entry.item.descriptor
                fs.make_dir(descriptor.folder)
                fs.overwrite(descriptor.path, entry.item.serialize())
                entry.item.write_companions()
                entry.modified = False
