"""Directory collections: named notes stored as files."""

from __future__ import annotations

from datetime import datetime
from pathlib import PurePosixPath

from pydantic import BaseModel, Field

from nkt.domain.collection import Collection, stamp
from nkt.domain.tags import Tag, drop_tags, merge_tags
from nkt.domain.time import Time
from nkt.domain.types import CollectionKind
from nkt.errors import DuplicateNote, InvalidName, NoSuchNote

DEFAULT_EXTENSION = "md"


class Note(BaseModel):
    name: str
    path: str
    created: Time
    modified: Time
    tags: list[Tag] = Field(default_factory=list)

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".") or DEFAULT_EXTENSION


class DirectoryInfo(BaseModel):
    notes: list[Note] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)


class Directory(Collection[DirectoryInfo]):
    """A loaded directory collection. Note names are unique within it."""

    kind = CollectionKind.DIRECTORY
    info_model = DirectoryInfo

    def find_note(self, name: str) -> Note | None:
        for note in self.info.notes:
            if note.name == name:
                return note
        return None

    def get_note(self, name: str) -> Note:
        note = self.find_note(name)
        if note is None:
            msg = f"No note '{name}' in directory '{self.name}'"
            raise NoSuchNote(msg, directory=self.name, note=name)
        return note

    def new_path(self, name: str, ext: str = DEFAULT_EXTENSION) -> str:
        return f"{self.folder}/{name}.{ext.lstrip('.')}"

    def _assert_free(self, name: str) -> None:
        if self.find_note(name) is not None:
            msg = f"Note '{name}' already exists in directory '{self.name}'"
            raise DuplicateNote(msg, directory=self.name, note=name)

    def _assert_valid(self, name: str, ext: str) -> None:
        if not name.strip() or name in {".", ".."} or any(sep in name + ext for sep in ("/", "\\")):
            msg = f"Invalid note name '{name}'"
            raise InvalidName(msg, directory=self.name, note=name)
        if self.new_path(name, ext) == self.descriptor.path:
            msg = f"Note path '{self.descriptor.path}' is the directory file"
            raise InvalidName(msg, directory=self.name, note=name)

    def check_new_name(self, name: str, ext: str = DEFAULT_EXTENSION) -> None:
        """Raise unless a note *name* with *ext* could be added here."""
        self._assert_valid(name, ext)
        self._assert_free(name)

    def add_new_note(self, name: str, now: datetime, ext: str = DEFAULT_EXTENSION) -> Note:
        """Register a new note; the file is created on first write."""
        self.check_new_name(name, ext)
        note = Note(name=name, path=self.new_path(name, ext), created=now, modified=now)
        self.info.notes.append(note)
        self.touch()
        return note

    def add_note(self, note: Note) -> None:
        self._assert_free(note.name)
        self.info.notes.append(note)
        self.touch()

    def remove_note(self, note: Note, *, delete_file: bool = True) -> None:
        self.info.notes = [n for n in self.info.notes if n.name != note.name]
        if delete_file and self.storage is not None and self.storage.exists(note.path):
            self.storage.remove(note.path)
        self.touch()

    def rename_note(self, note: Note, new_name: str, now: datetime) -> Note:
        """Rename *note* in place, moving its file first."""
        if new_name == note.name:
            return note
        self.check_new_name(new_name, note.extension)
        new_path = self.new_path(new_name, note.extension)
        if self.storage is not None and self.storage.exists(note.path):
            self.storage.move(note.path, new_path)
        note.name = new_name
        note.path = new_path
        stamp(note, now)
        self.touch()
        return note

    def move_note_to(
        self,
        note: Note,
        target: Directory,
        now: datetime,
        new_name: str | None = None,
    ) -> Note:
        """Move *note* (optionally renamed) into the *target* directory."""
        name = new_name or note.name
        if target is self and name == note.name:
            return note
        target.check_new_name(name, note.extension)
        new_path = target.new_path(name, note.extension)
        if self.storage is not None and self.storage.exists(note.path):
            self.storage.move(note.path, new_path)
        self.remove_note(note, delete_file=False)
        moved = note.model_copy(update={"name": name, "path": new_path, "modified": now})
        target.add_note(moved)
        return moved

    def read_note(self, note: Note) -> str:
        storage = self.require_storage()
        if not storage.exists(note.path):
            return ""
        return storage.read_text(note.path)

    def write_note(self, note: Note, content: str, now: datetime) -> None:
        self.require_storage().overwrite(note.path, content)
        stamp(note, now)
        self.touch()

    def add_note_tags(self, note: Note, tags: list[Tag]) -> None:
        note.tags = merge_tags(note.tags, tags)
        self.touch()

    def remove_note_tags(self, note: Note, names: list[str]) -> None:
        note.tags = drop_tags(note.tags, names)
        self.touch()

    def relocate(self, old_folder: str, new_folder: str) -> None:
        for note in self.info.notes:
            if note.path.startswith(f"{old_folder}/"):
                note.path = new_folder + note.path[len(old_folder) :]
        self.touch()
