"""Journal collections: date-keyed days holding timestamped entries.

The journal file lists the days; each day's entries live in their own
``DAY.json`` file next to it. Entries are read into a staging map on
first access and written back by :meth:`Journal.write_days`.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from pydantic import BaseModel, Field

from nkt.domain.collection import Collection, stamp
from nkt.domain.tags import Tag, drop_tags, merge_tags
from nkt.domain.time import Time, TimeZone, format_date, shift_back
from nkt.domain.types import CollectionKind
from nkt.errors import NoSuchDay, NoSuchEntry

logger = logging.getLogger(__name__)


class Entry(BaseModel):
    """One journal entry; identified within its day by ``created``."""

    text: str
    created: Time
    modified: Time
    tags: list[Tag] = Field(default_factory=list)


class Day(BaseModel):
    name: str
    path: str
    created: Time
    modified: Time
    tags: list[Tag] = Field(default_factory=list)


class DayEntries(BaseModel):
    """Contents of a ``DAY.json`` file."""

    entries: list[Entry] = Field(default_factory=list)


class JournalInfo(BaseModel):
    tags: list[Tag] = Field(default_factory=list)
    days: list[Day] = Field(default_factory=list)


class Journal(Collection[JournalInfo]):
    """A loaded journal collection."""

    kind = CollectionKind.JOURNAL
    info_model = JournalInfo

    def setup(self) -> None:
        self._staged: dict[str, list[Entry]] = {}
        self._dirty_days: set[str] = set()

    # --- Days ---

    def find_day(self, name: str) -> Day | None:
        for day in self.info.days:
            if day.name == name:
                return day
        return None

    def get_day(self, name: str) -> Day:
        day = self.find_day(name)
        if day is None:
            msg = f"No day '{name}' in journal '{self.name}'"
            raise NoSuchDay(msg, journal=self.name, day=name)
        return day

    def get_day_by_date(self, value: date) -> Day:
        return self.get_day(format_date(value))

    def get_day_offset(self, now: datetime, offset: int, tz: TimeZone) -> Day:
        """The day *offset* days before today (0 is today)."""
        try:
            value = shift_back(now, offset, tz)
        except (OverflowError, ValueError) as exc:
            msg = f"No day {offset} days back in journal '{self.name}'"
            raise NoSuchDay(msg, journal=self.name, offset=offset) from exc
        return self.get_day_by_date(value)

    def day_path(self, name: str) -> str:
        return f"{self.folder}/{name}.json"

    def new_day(self, name: str, now: datetime) -> Day:
        day = Day(name=name, path=self.day_path(name), created=now, modified=now)
        self.info.days.append(day)
        self._staged[name] = []
        self._dirty_days.add(name)
        self.touch()
        return day

    def get_or_create_day(self, name: str, now: datetime) -> Day:
        return self.find_day(name) or self.new_day(name, now)

    def remove_day(self, day: Day) -> None:
        """Drop *day* and delete its entry file."""
        self.info.days = [d for d in self.info.days if d.name != day.name]
        self._staged.pop(day.name, None)
        self._dirty_days.discard(day.name)
        if self.storage is not None and self.storage.exists(day.path):
            self.storage.remove(day.path)
        self.touch()

    def sorted_days(self) -> list[Day]:
        return sorted(self.info.days, key=lambda d: d.name)

    # --- Entries ---

    def get_entries(self, day: Day) -> list[Entry]:
        """Entries of *day*, loaded into the staging map on first access."""
        staged = self._staged.get(day.name)
        if staged is not None:
            return staged
        entries: list[Entry] = []
        if self.storage is not None and self.storage.exists(day.path):
            raw = self.storage.read_text(day.path)
            entries = DayEntries.model_validate_json(raw).entries
            logger.debug("Loaded %d entries for %s/%s", len(entries), self.name, day.name)
        self._staged[day.name] = entries
        return entries

    def add_entry(self, entry: Entry, tz: TimeZone) -> Day:
        """Append *entry* to the day of its creation time in *tz*."""
        name = tz.format_date(entry.created)
        day = self.get_or_create_day(name, entry.created)
        self.get_entries(day).append(entry)
        stamp(day, entry.created)
        self._dirty_days.add(name)
        self.touch()
        return day

    def get_entry_at(self, day: Day, at: str, tz: TimeZone) -> Entry:
        """The entry of *day* created at local time ``HH:MM:SS``."""
        for entry in self.get_entries(day):
            if tz.format_time(entry.created) == at:
                return entry
        msg = f"No entry at {at} on {day.name}"
        raise NoSuchEntry(msg, journal=self.name, day=day.name, time=at)

    def remove_entry(self, day: Day, entry: Entry, now: datetime) -> None:
        entries = self.get_entries(day)
        self._staged[day.name] = [e for e in entries if e.created != entry.created]
        stamp(day, now)
        self._dirty_days.add(day.name)
        self.touch()

    def edit_entry_text(self, day: Day, entry: Entry, text: str, now: datetime) -> None:
        entry.text = text
        stamp(entry, now)
        stamp(day, now)
        self._dirty_days.add(day.name)
        self.touch()

    def add_entry_tags(self, day: Day, entry: Entry, tags: list[Tag]) -> None:
        entry.tags = merge_tags(entry.tags, tags)
        self._dirty_days.add(day.name)
        self.touch()

    def remove_entry_tags(self, day: Day, entry: Entry, names: list[str]) -> None:
        entry.tags = drop_tags(entry.tags, names)
        self._dirty_days.add(day.name)
        self.touch()

    def add_day_tags(self, day: Day, tags: list[Tag]) -> None:
        day.tags = merge_tags(day.tags, tags)
        self.touch()

    def remove_day_tags(self, day: Day, names: list[str]) -> None:
        day.tags = drop_tags(day.tags, names)
        self.touch()

    # --- Persistence ---

    def write_days(self) -> int:
        """Overwrite every modified staged day file; returns the count."""
        storage = self.require_storage()
        written = 0
        for name in sorted(self._dirty_days):
            day = self.find_day(name)
            if day is None:
                continue
            content = DayEntries(entries=self._staged.get(name, [])).model_dump_json(indent=4)
            storage.overwrite(day.path, content)
            written += 1
        self._dirty_days.clear()
        return written

    def write_companions(self) -> int:
        return self.write_days()

    def relocate(self, old_folder: str, new_folder: str) -> None:
        for day in self.info.days:
            if day.path.startswith(f"{old_folder}/"):
                day.path = new_folder + day.path[len(old_folder) :]
        self.touch()
