"""Tests for lexical selector classification."""

from __future__ import annotations

import doctest
from datetime import date

import pytest

from nkt.domain import selectors
from nkt.domain.selectors import (
    DateSelector,
    HashSelector,
    IndexSelector,
    NameSelector,
    QualifiedIndexSelector,
    parse_selector,
    selector_text,
)
from nkt.domain.types import CollectionKind
from nkt.errors import InvalidTimelike


class TestParseSelector:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("123", IndexSelector(123)),
            ("0", IndexSelector(0)),
            ("t4", QualifiedIndexSelector("t", 4)),
            ("2024-01-07", DateSelector(date(2024, 1, 7))),
            ("/1a2b", HashSelector(0x1A2B, 4)),
            ("/ABCDEF0123456789", HashSelector(0xABCDEF0123456789, 16)),
            ("hello", NameSelector("hello")),
            ("t4x", NameSelector("t4x")),
            ("/xyz", NameSelector("/xyz")),
            ("water the plants", NameSelector("water the plants")),
            ("\u00b2", NameSelector("\u00b2")),
            ("t\u0663", NameSelector("t\u0663")),
        ],
    )
    def test_classification(self, text: str, expected: object) -> None:
        assert parse_selector(text) == expected

    def test_impossible_date(self) -> None:
        with pytest.raises(InvalidTimelike):
            parse_selector("2024-13-01")

    @pytest.mark.parametrize("text", ["12", "t4", "/01a2", "2024-01-07", "hello"])
    def test_selector_text_inverts_parse(self, text: str) -> None:
        assert selector_text(parse_selector(text)) == text


class TestQualifiers:
    def test_known_qualifiers(self) -> None:
        assert QualifiedIndexSelector("t", 1).kind is CollectionKind.TASKLIST
        assert QualifiedIndexSelector("j", 1).kind is CollectionKind.JOURNAL
        assert QualifiedIndexSelector("d", 1).kind is CollectionKind.JOURNAL
        assert QualifiedIndexSelector("T", 1).kind is CollectionKind.TASKLIST

    def test_unknown_qualifier(self) -> None:
        assert QualifiedIndexSelector("x", 1).kind is None


def test_module_examples() -> None:
    assert doctest.testmod(selectors).failed == 0
