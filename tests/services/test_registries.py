"""Tests for ChainService and StackService."""

from __future__ import annotations

from nkt.infrastructure.root import Root
from nkt.services.create import CreateService
from nkt.services.registries import ChainService, StackService
from nkt.services.resolve import Selection
from tests.conftest import FakeClock, add_note, add_task, make_service, reload


class TestChains:
    def test_complete_builds_streak(self, root: Root, clock: FakeClock) -> None:
        make_service(CreateService, root).new_chain("running", alias="run")
        chains = make_service(ChainService, root)
        assert chains.complete("run").data == {"name": "running", "streak": 1}
        clock.advance(days=1)
        assert chains.complete("running").data["streak"] == 2
        assert len(reload(root).chains().get_chain("run").completed) == 2

    def test_second_completion_same_day_warns(self, root: Root) -> None:
        make_service(CreateService, root).new_chain("running")
        chains = make_service(ChainService, root)
        chains.complete("running")
        result = chains.complete("running")
        assert result.ok
        assert result.warnings
        assert len(root.chains().get_chain("running").completed) == 1

    def test_unknown_chain(self, root: Root) -> None:
        assert make_service(ChainService, root).complete("nope").error.code == "NO_SUCH_CHAIN"

    def test_list_hides_inactive(self, root: Root) -> None:
        create = make_service(CreateService, root)
        create.new_chain("running")
        create.new_chain("reading")
        root.chains().get_chain("reading").active = False
        chains = make_service(ChainService, root)
        assert [c["name"] for c in chains.list_chains().data["chains"]] == ["running"]
        assert len(chains.list_chains(include_inactive=True).data["chains"]) == 2


class TestStacks:
    def test_push_peek_pop(self, root: Root) -> None:
        add_note(root, "hello")
        add_task(root, "water plants")
        make_service(CreateService, root).new_stack("next")
        stacks = make_service(StackService, root)

        assert stacks.push("next", Selection.parse("hello")).data["size"] == 1
        assert stacks.push("next", Selection.parse("t0"), message="today").data["kind"] == "tasklist"

        items = stacks.peek("next").data["items"]
        assert [(i["index"], i["name"]) for i in items] == [(0, "water plants"), (1, "hello")]
        assert items[0]["message"] == "today"

        popped = stacks.pop("next")
        assert popped.data["name"] == "water plants"
        assert [i.name for i in reload(root).stacks().get_stack("next").items] == ["hello"]

    def test_push_at_position(self, root: Root) -> None:
        add_note(root, "a")
        add_note(root, "b")
        make_service(CreateService, root).new_stack("next")
        stacks = make_service(StackService, root)
        stacks.push("next", Selection.parse("a"))
        stacks.push("next", Selection.parse("b"), position=5)
        assert [i["name"] for i in stacks.peek("next").data["items"]] == ["a", "b"]

    def test_push_unresolvable(self, root: Root) -> None:
        make_service(CreateService, root).new_stack("next")
        result = make_service(StackService, root).push("next", Selection.parse("nothing"))
        assert result.error.code == "NO_SUCH_ITEM"

    def test_pop_empty(self, root: Root) -> None:
        make_service(CreateService, root).new_stack("next")
        assert make_service(StackService, root).pop("next").error.code == "NO_SUCH_ITEM"

    def test_unknown_stack(self, root: Root) -> None:
        assert make_service(StackService, root).peek("nope").error.code == "NO_SUCH_STACK"
