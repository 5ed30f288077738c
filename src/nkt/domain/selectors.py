"""Lexical classification of selection strings.

Priority: all digits is an index; one letter followed by digits is a
qualified index; ``/`` followed by hex digits is a (mini) hash;
``YYYY-MM-DD`` is a date; anything else is a name.

Examples:
    >>> parse_selector("t4")
    QualifiedIndexSelector(qualifier='t', index=4)
    >>> parse_selector("/1a2b")
    HashSelector(value=6699, digits=4)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from nkt.domain.time import is_date, to_date
from nkt.domain.types import CollectionKind

_QUALIFIED = re.compile(r"^([A-Za-z])([0-9]+)$")
_HASH = re.compile(r"^/([0-9a-fA-F]{1,16})$")

QUALIFIERS: dict[str, CollectionKind] = {
    "t": CollectionKind.TASKLIST,
    "j": CollectionKind.JOURNAL,
    "d": CollectionKind.JOURNAL,
}


@dataclass(frozen=True)
class IndexSelector:
    index: int


@dataclass(frozen=True)
class QualifiedIndexSelector:
    qualifier: str
    index: int

    @property
    def kind(self) -> CollectionKind | None:
        """Kind named by the qualifier; ``None`` for unknown letters."""
        return QUALIFIERS.get(self.qualifier.lower())


@dataclass(frozen=True)
class HashSelector:
    value: int
    digits: int


@dataclass(frozen=True)
class DateSelector:
    value: date


@dataclass(frozen=True)
class NameSelector:
    name: str


type Selector = IndexSelector | QualifiedIndexSelector | HashSelector | DateSelector | NameSelector


def parse_selector(text: str) -> Selector:
    """Classify *text*; never fails except on an impossible calendar date."""
    if text.isascii() and text.isdigit():
        return IndexSelector(int(text))
    if match := _QUALIFIED.match(text):
        return QualifiedIndexSelector(match.group(1), int(match.group(2)))
    if match := _HASH.match(text):
        digits = match.group(1)
        return HashSelector(int(digits, 16), len(digits))
    if is_date(text):
        return DateSelector(to_date(text))
    return NameSelector(text)


def selector_text(selector: Selector) -> str:
    """Render a selector back to the string form it was parsed from."""
    match selector:
        case IndexSelector(index=index):
            return str(index)
        case QualifiedIndexSelector(qualifier=qualifier, index=index):
            return f"{qualifier}{index}"
        case HashSelector(value=value, digits=digits):
            return f"/{value:0{digits}x}"
        case DateSelector(value=value):
            return value.isoformat()
        case NameSelector(name=name):
            return name
