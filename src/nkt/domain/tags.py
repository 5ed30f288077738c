"""Tag domain logic: descriptors, the tag registry and inline ``@tag`` parsing.

INVARIANT: a tag may only be attached to an item once a descriptor with
the same name exists in the registry. Callers validate before mutating.
"""

from __future__ import annotations

import random
import re
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from nkt.domain.time import Time
from nkt.errors import DuplicateItem, InvalidTag, TagNotLowercase

_TAG_CHAR = re.compile(r"[a-z.\-]")
_TAG_NAME = re.compile(r"[a-z.\-]+")


class Color(BaseModel):
    """RGB display color of a tag."""

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


def random_color(rng: random.Random | None = None) -> Color:
    rng = rng or random.Random()
    return Color(r=rng.randrange(256), g=rng.randrange(256), b=rng.randrange(256))


class Tag(BaseModel):
    """A tag attached to an item. Equality for tag lists is by name."""

    name: str
    added: Time


class TagDescriptor(BaseModel):
    """Registry entry that makes a tag name valid."""

    name: str
    created: Time
    color: Color = Field(default_factory=random_color)

    def describes(self, tag: Tag) -> bool:
        return self.name == tag.name


class TagRegistry(BaseModel):
    """The flat list of known tags, persisted as ``tags.json``."""

    tags: list[TagDescriptor] = Field(default_factory=list)

    def add(self, descriptor: TagDescriptor) -> None:
        """Register a new tag; raise :class:`DuplicateItem` if the name exists."""
        if self.get(descriptor.name) is not None:
            msg = f"Tag '{descriptor.name}' already exists"
            raise DuplicateItem(msg, name=descriptor.name)
        self.tags.append(descriptor)

    def get(self, name: str) -> TagDescriptor | None:
        for descriptor in self.tags:
            if descriptor.name == name:
                return descriptor
        return None

    def remove(self, name: str) -> TagDescriptor:
        descriptor = self.get(name)
        if descriptor is None:
            msg = f"@{name} is not a known tag"
            raise InvalidTag(msg, name=name)
        self.tags.remove(descriptor)
        return descriptor

    def is_valid(self, tag: Tag) -> bool:
        return any(d.describes(tag) for d in self.tags)

    def find_invalid(self, tags: Iterable[Tag]) -> Tag | None:
        """Return the first tag without a descriptor, or ``None``."""
        for tag in tags:
            if not self.is_valid(tag):
                return tag
        return None

    def validate(self, tags: Iterable[Tag]) -> None:
        """Raise :class:`InvalidTag` if any tag is unknown."""
        invalid = self.find_invalid(tags)
        if invalid is not None:
            msg = f"@{invalid.name} is not a known tag"
            raise InvalidTag(msg, name=invalid.name)

    def serialize(self) -> str:
        return self.model_dump_json(indent=4)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _scan_name(text: str, start: int) -> int:
    """Index one past the last tag character from *start*."""
    end = start
    while end < len(text):
        char = text[end]
        if char.isupper():
            msg = f"Tags must be lowercase: {text!r}"
            raise TagNotLowercase(msg)
        if not _TAG_CHAR.match(char):
            break
        end += 1
    return end


def tag_name_from_string(text: str) -> str | None:
    """Name of the tag if *text* starts with ``@``, else ``None``.

    Examples:
        >>> tag_name_from_string("@kebab-case rest")
        'kebab-case'
        >>> tag_name_from_string("hello") is None
        True
    """
    if not text.startswith("@"):
        return None
    return text[1 : _scan_name(text, 1)]


def parse_inline_names(text: str) -> list[str]:
    """All ``@tag`` names in *text*, in order, without validation."""
    names: list[str] = []
    index = 0
    while True:
        index = text.find("@", index)
        if index < 0:
            return names
        end = _scan_name(text, index + 1)
        if end > index + 1:
            names.append(text[index + 1 : end])
        index = end if end > index else index + 1


def parse_inline_tags(text: str, now: datetime) -> list[Tag]:
    """Inline tags (``"hello @world"``) as :class:`Tag` records added at *now*."""
    return [Tag(name=name, added=now) for name in parse_inline_names(text)]


def make_tags(names: Iterable[str], now: datetime) -> list[Tag]:
    """Tags from plain or ``@``-prefixed names."""
    tags: list[Tag] = []
    for raw in names:
        name = tag_name_from_string(raw) if raw.startswith("@") else raw
        if not name:
            msg = f"Not a tag: {raw!r}"
            raise InvalidTag(msg, name=raw)
        if any(c.isupper() for c in name):
            msg = f"Tags must be lowercase: {raw!r}"
            raise TagNotLowercase(msg)
        if not _TAG_NAME.fullmatch(name):
            msg = f"Not a tag: {raw!r}"
            raise InvalidTag(msg, name=raw)
        tags.append(Tag(name=name, added=now))
    return tags


def merge_tags(existing: list[Tag], new: Iterable[Tag]) -> list[Tag]:
    """Append tags whose names are not yet present."""
    names = {t.name for t in existing}
    merged = list(existing)
    for tag in new:
        if tag.name not in names:
            merged.append(tag)
            names.add(tag.name)
    return merged


def drop_tags(existing: list[Tag], names: Iterable[str]) -> list[Tag]:
    drop = set(names)
    return [t for t in existing if t.name not in drop]
