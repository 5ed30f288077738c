"""Tests for chain streaks and stack ordering."""

from __future__ import annotations

from datetime import timedelta

import pytest

from nkt.domain.chains import Chain, ChainRegistry, complete, is_complete_today, streak
from nkt.domain.stacks import ItemDescriptor, StackRegistry, peek, pop_at, push
from nkt.domain.time import TimeZone
from nkt.domain.types import CollectionKind
from nkt.errors import DuplicateItem, NoSuchChain, NoSuchItem, NoSuchStack
from tests.conftest import FIXED_NOW

UTC_TZ = TimeZone.utc()


def _chain(name: str = "run", alias: str | None = None) -> Chain:
    return Chain(name=name, alias=alias, created=FIXED_NOW)


def _ref(name: str, parent: str = "notes", kind: CollectionKind = CollectionKind.DIRECTORY) -> ItemDescriptor:
    return ItemDescriptor(collection=kind, parent=parent, name=name, added=FIXED_NOW)


class TestChainRegistry:
    def test_lookup_by_alias(self) -> None:
        registry = ChainRegistry()
        chain = _chain("running", alias="run")
        registry.add_chain(chain)
        assert registry.get_chain("run") is chain
        assert registry.get_chain("running") is chain

    @pytest.mark.parametrize(("name", "alias"), [("running", None), ("run", None), ("jog", "running")])
    def test_handles_unique_across_names_and_aliases(self, name: str, alias: str | None) -> None:
        registry = ChainRegistry()
        registry.add_chain(_chain("running", alias="run"))
        with pytest.raises(DuplicateItem):
            registry.add_chain(_chain(name, alias=alias))

    def test_missing(self) -> None:
        with pytest.raises(NoSuchChain):
            ChainRegistry().get_chain("nope")


class TestStreak:
    def test_consecutive_days_ending_today(self) -> None:
        chain = _chain()
        for back in (2, 1, 0):
            complete(chain, FIXED_NOW - timedelta(days=back))
        assert streak(chain, FIXED_NOW, UTC_TZ) == 3
        assert is_complete_today(chain, FIXED_NOW, UTC_TZ)

    def test_open_today_counts_from_yesterday(self) -> None:
        chain = _chain()
        for back in (2, 1):
            complete(chain, FIXED_NOW - timedelta(days=back))
        assert streak(chain, FIXED_NOW, UTC_TZ) == 2
        assert not is_complete_today(chain, FIXED_NOW, UTC_TZ)

    def test_gap_breaks_streak(self) -> None:
        chain = _chain()
        complete(chain, FIXED_NOW - timedelta(days=3))
        assert streak(chain, FIXED_NOW, UTC_TZ) == 0

    def test_never_completed(self) -> None:
        assert not is_complete_today(_chain(), FIXED_NOW, UTC_TZ)


class TestStacks:
    def test_push_to_head_by_default(self) -> None:
        stack = StackRegistry().add_stack("reading", FIXED_NOW)
        push(stack, _ref("a"), FIXED_NOW)
        push(stack, _ref("b"), FIXED_NOW)
        assert [i.name for i in peek(stack)] == ["b", "a"]

    def test_push_position_clamped(self) -> None:
        stack = StackRegistry().add_stack("reading", FIXED_NOW)
        push(stack, _ref("a"), FIXED_NOW)
        push(stack, _ref("b"), FIXED_NOW, position=99)
        assert [i.name for i in peek(stack)] == ["a", "b"]

    def test_pop_keeps_remaining_order(self) -> None:
        stack = StackRegistry().add_stack("reading", FIXED_NOW)
        for name in ("c", "b", "a"):
            push(stack, _ref(name), FIXED_NOW)
        assert pop_at(stack, FIXED_NOW, 1).name == "b"
        assert [i.name for i in peek(stack)] == ["a", "c"]

    def test_pop_out_of_range(self) -> None:
        stack = StackRegistry().add_stack("reading", FIXED_NOW)
        with pytest.raises(NoSuchItem):
            pop_at(stack, FIXED_NOW)

    def test_duplicate_and_missing_stacks(self) -> None:
        registry = StackRegistry()
        registry.add_stack("reading", FIXED_NOW)
        with pytest.raises(DuplicateItem):
            registry.add_stack("reading", FIXED_NOW)
        with pytest.raises(NoSuchStack):
            registry.get_stack("writing")

    def test_rename_references(self) -> None:
        registry = StackRegistry()
        stack = registry.add_stack("reading", FIXED_NOW)
        push(stack, _ref("hello"), FIXED_NOW)
        push(stack, _ref("hello", parent="other"), FIXED_NOW)
        count = registry.rename_references(CollectionKind.DIRECTORY, "notes", "hello", "goodbye")
        assert count == 1
        assert sorted(i.name for i in stack.items) == ["goodbye", "hello"]

    def test_rename_parent(self) -> None:
        registry = StackRegistry()
        stack = registry.add_stack("reading", FIXED_NOW)
        push(stack, _ref("hello"), FIXED_NOW)
        push(stack, _ref("hello", kind=CollectionKind.JOURNAL), FIXED_NOW)
        assert registry.rename_parent(CollectionKind.DIRECTORY, "notes", "docs") == 1
        assert {i.parent for i in stack.items} == {"docs", "notes"}
