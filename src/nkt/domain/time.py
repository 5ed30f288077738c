"""Timestamps, timezones and colloquial date parsing.

Timestamps are timezone-aware :class:`~datetime.datetime` values in UTC
with millisecond precision. On disk they are written as ISO-8601 strings
with an explicit offset; older files stored integer milliseconds since
the epoch, which readers still accept.

Nothing in this module reads a global timezone: every local conversion
takes an explicit :class:`TimeZone`.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Annotated, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BeforeValidator, PlainSerializer

from nkt.errors import InvalidTimelike

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
DATETIME_FORMAT = f"{DATE_FORMAT} {TIME_FORMAT}"


# ---------------------------------------------------------------------------
# Timestamp conversion
# ---------------------------------------------------------------------------


def time_now() -> datetime:
    """Current UTC time truncated to milliseconds."""
    now = datetime.now(UTC)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def from_millis(ms: int) -> datetime:
    """Convert integer milliseconds since the epoch to a UTC datetime."""
    return datetime.fromtimestamp(ms / 1000, tz=UTC).replace(
        microsecond=(ms % 1000) * 1000,
    )


def to_millis(value: datetime) -> int:
    """Convert a datetime to integer milliseconds since the epoch."""
    delta = value.astimezone(UTC) - datetime(1970, 1, 1, tzinfo=UTC)
    return delta // timedelta(milliseconds=1)


def parse_timestamp(value: Any) -> datetime:
    """Read a stored timestamp (integer ms, ISO string, or datetime).

    Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        msg = f"Not a timestamp: {value!r}"
        raise ValueError(msg)
    elif isinstance(value, int):
        return from_millis(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return from_millis(int(text))
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            msg = f"Not a timestamp: {value!r}"
            raise ValueError(msg) from exc
    else:
        msg = f"Not a timestamp: {value!r}"
        raise ValueError(msg)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp for disk: ISO-8601, UTC, explicit offset."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds")


Time = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]
"""Pydantic field type for every persisted timestamp."""


# ---------------------------------------------------------------------------
# TimeZone
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeZone:
    """An explicit timezone used for all local-time formatting."""

    tz: tzinfo
    name: str

    @classmethod
    def utc(cls) -> TimeZone:
        return cls(tz=UTC, name="UTC")

    @classmethod
    def local(cls) -> TimeZone:
        """The system's local timezone."""
        local = datetime.now().astimezone().tzinfo or UTC
        return cls(tz=local, name=local.tzname(None) or "local")

    @classmethod
    def from_name(cls, name: str | None) -> TimeZone:
        """Build from an IANA name; ``None`` means the system timezone."""
        if not name:
            return cls.local()
        if name.upper() == "UTC":
            return cls.utc()
        try:
            return cls(tz=ZoneInfo(name), name=name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown timezone: {name!r}"
            raise InvalidTimelike(msg) from exc

    def make_local(self, value: datetime) -> datetime:
        """Convert a UTC timestamp to this timezone."""
        return value.astimezone(self.tz)

    def make_utc(self, value: datetime) -> datetime:
        """Interpret *value* as local (if naive) and convert to UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=self.tz)
        return value.astimezone(UTC)

    def local_date(self, value: datetime) -> date:
        return self.make_local(value).date()

    def format_date(self, value: datetime) -> str:
        """Local ``YYYY-MM-DD`` for *value*; the journal day name."""
        return self.make_local(value).strftime(DATE_FORMAT)

    def format_time(self, value: datetime) -> str:
        """Local ``HH:MM:SS`` for *value*; the journal entry key."""
        return self.make_local(value).strftime(TIME_FORMAT)

    def format_datetime(self, value: datetime) -> str:
        return self.make_local(value).strftime(DATETIME_FORMAT)

    def format_display(self, value: datetime) -> str:
        """Human display form, e.g. ``2024-01-07 10:00:00 CET (GMT+1)``."""
        local = self.make_local(value)
        offset = local.utcoffset() or timedelta(0)
        hours = int(offset.total_seconds() // 3600)
        sign = "+" if hours >= 0 else "-"
        label = local.tzname() or self.name
        return f"{local.strftime(DATETIME_FORMAT)} {label} (GMT{sign}{abs(hours)})"

    def start_of_day(self, day: date) -> datetime:
        """UTC instant of local midnight on *day*."""
        return self.make_utc(datetime.combine(day, time(0, 0, 0)))

    def end_of_day(self, day: date) -> datetime:
        """UTC instant of local 23:59:59 on *day*."""
        return self.make_utc(datetime.combine(day, time(23, 59, 59)))


# ---------------------------------------------------------------------------
# Date/time strings
# ---------------------------------------------------------------------------


def is_date(text: str) -> bool:
    """Is *text* shaped like ``YYYY-MM-DD``?"""
    return _DATE_PATTERN.match(text) is not None


def is_time(text: str) -> bool:
    """Is *text* shaped like ``HH:MM[:SS]``?"""
    return _TIME_PATTERN.match(text) is not None


def to_date(text: str) -> date:
    """Parse ``YYYY-MM-DD``."""
    if not is_date(text):
        msg = f"Not a date (YYYY-MM-DD): {text!r}"
        raise InvalidTimelike(msg)
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as exc:
        msg = f"Invalid date: {text!r}"
        raise InvalidTimelike(msg) from exc


def to_time_of_day(text: str) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS``."""
    if not is_time(text):
        msg = f"Not a time (HH:MM:SS): {text!r}"
        raise InvalidTimelike(msg)
    parts = [int(p) for p in text.split(":")]
    while len(parts) < 3:
        parts.append(0)
    try:
        return time(parts[0], parts[1], parts[2])
    except ValueError as exc:
        msg = f"Invalid time: {text!r}"
        raise InvalidTimelike(msg) from exc


def format_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def shift_back(now: datetime, days: int, tz: TimeZone) -> date:
    """Local date *days* before the local date of *now*."""
    return tz.local_date(now) - timedelta(days=days)


# ---------------------------------------------------------------------------
# Colloquial parsing ("tomorrow evening", "next week", "monday 18:00")
# ---------------------------------------------------------------------------

DEFAULT_TIME_OF_DAY = time(13, 0, 0)

TIME_OF_DAY: dict[str, time] = {
    "morning": time(8, 0, 0),
    "lunch": time(13, 0, 0),
    "eod": time(17, 0, 0),
    "end-of-day": time(17, 0, 0),
    "evening": time(19, 0, 0),
    "night": time(23, 0, 0),
}

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_SUBSTITUTIONS: dict[str, str] = {"tonight": "today evening"}


def days_until_weekday(today: date, name: str) -> int | None:
    """Days from *today* until the next *name* weekday (1..7).

    The same weekday as today is a week away. Returns ``None`` when
    *name* is not a weekday.
    """
    key = name.lower()
    if key not in WEEKDAYS:
        return None
    selected = WEEKDAYS.index(key)
    current = today.weekday()
    if selected <= current:
        selected += 7
    return selected - current


def time_of_day(token: str | None) -> time:
    """Resolve an optional time token; unknown words fall back to 13:00."""
    if token is None:
        return DEFAULT_TIME_OF_DAY
    if is_time(token):
        return to_time_of_day(token)
    return TIME_OF_DAY.get(token.lower(), DEFAULT_TIME_OF_DAY)


def parse_timelike(relative: datetime, text: str, tz: TimeZone) -> datetime:
    """Parse a date-like phrase relative to *relative*; returns UTC.

    Accepted forms: ``today``, ``tomorrow``, ``soon`` (3-5 days),
    ``next week`` (next Monday), weekday names, and ``YYYY-MM-DD``,
    each optionally followed by ``HH:MM[:SS]`` or a named time of day
    (``morning``, ``lunch``, ``eod``, ``end-of-day``, ``evening``,
    ``night``).
    """
    phrase = _SUBSTITUTIONS.get(text.strip().lower(), text.strip())
    tokens = phrase.split()
    if not tokens:
        msg = "Empty date"
        raise InvalidTimelike(msg)
    if len(tokens) > 2 and not (tokens[0].lower() == "next" and len(tokens) == 3):
        msg = f"Too many words in date: {text!r}"
        raise InvalidTimelike(msg)

    today = tz.local_date(relative)
    head = tokens[0].lower()
    rest = tokens[1:]

    if head == "soon":
        offset = random.Random(to_millis(relative)).randint(3, 5)
        return _combine(today + timedelta(days=offset), DEFAULT_TIME_OF_DAY, tz)

    if head == "next":
        if not rest or rest[0].lower() != "week":
            msg = f"Cannot parse date: {text!r}"
            raise InvalidTimelike(msg)
        shift = days_until_weekday(today, "monday")
        assert shift is not None
        tail = rest[1] if len(rest) > 1 else None
        return _combine(today + timedelta(days=shift), time_of_day(tail), tz)

    tail = rest[0] if rest else None
    if head == "today":
        day = today
    elif head == "tomorrow":
        day = today + timedelta(days=1)
    elif is_date(head):
        day = to_date(head)
    else:
        shift = days_until_weekday(today, head)
        if shift is None:
            msg = f"Cannot parse date: {text!r}"
            raise InvalidTimelike(msg)
        day = today + timedelta(days=shift)

    return _combine(day, time_of_day(tail), tz)


def _combine(day: date, at: time, tz: TimeZone) -> datetime:
    return tz.make_utc(datetime.combine(day, at))
