"""ChainService and StackService: the root-level chain and stack registries."""

from __future__ import annotations

from nkt.domain.chains import complete, is_complete_today, streak
from nkt.domain.items import item_kind, item_name
from nkt.domain.stacks import ItemDescriptor, peek, pop_at, push
from nkt.errors import NktError
from nkt.services.base import BaseService
from nkt.services.resolve import Selection
from nkt.services.result import ServiceResult
from nkt.services.telemetry import traced


def _item_payload(item: ItemDescriptor, index: int) -> dict[str, object]:
    return {
        "index": index,
        "kind": str(item.collection),
        "collection": item.parent,
        "name": item.name,
        "message": item.message,
    }


class ChainService(BaseService):
    """List and complete habit chains."""

    @traced
    def list_chains(self, *, include_inactive: bool = False) -> ServiceResult:
        op = "list_chains"
        try:
            now = self._clock()
            chains = [c for c in self._root.chains().chains if c.active or include_inactive]
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "chains": [
                    {
                        "name": c.name,
                        "alias": c.alias,
                        "streak": streak(c, now, self._tz),
                        "complete_today": is_complete_today(c, now, self._tz),
                        "completions": len(c.completed),
                    }
                    for c in chains
                ]
            },
        )

    @traced
    def complete(self, name: str) -> ServiceResult:
        """Mark a chain (by name or alias) complete for today."""
        op = "complete_chain"
        warnings: list[str] = []
        try:
            now = self._clock()
            chain = self._root.chains().get_chain(name)
            if is_complete_today(chain, now, self._tz):
                warnings.append(f"Chain '{chain.name}' is already complete today")
            else:
                complete(chain, now)
                self._root.write_chains()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": chain.name, "streak": streak(chain, now, self._tz)},
            warnings=warnings,
        )


class StackService(BaseService):
    """Push, pop and peek at stacks of item references."""

    @traced
    def push(
        self,
        stack_name: str,
        selection: Selection,
        *,
        message: str | None = None,
        position: int = 0,
    ) -> ServiceResult:
        op = "push"
        try:
            now = self._clock()
            stack = self._root.stacks().get_stack(stack_name)
            item = self._resolve(selection, now)
            reference = ItemDescriptor(
                collection=item_kind(item),
                parent=item.collection.name,
                name=item_name(item),
                message=message,
                added=now,
            )
            push(stack, reference, now, position)
            self._root.write_stacks()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"stack": stack.name, "size": len(stack.items), **_item_payload(reference, position)},
        )

    @traced
    def pop(self, stack_name: str, index: int = 0) -> ServiceResult:
        op = "pop"
        try:
            now = self._clock()
            stack = self._root.stacks().get_stack(stack_name)
            item = pop_at(stack, now, index)
            self._root.write_stacks()
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"stack": stack.name, "size": len(stack.items), **_item_payload(item, index)},
        )

    @traced
    def peek(self, stack_name: str) -> ServiceResult:
        op = "peek"
        try:
            stack = self._root.stacks().get_stack(stack_name)
        except NktError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "stack": stack.name,
                "items": [_item_payload(item, i) for i, item in enumerate(peek(stack))],
            },
        )
