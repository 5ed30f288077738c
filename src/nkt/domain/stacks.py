"""Stacks: ordered lists of references to items, stored in ``stacks.json``.

An item reference names the collection kind, the collection and the
item; the head of a stack is index 0.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from nkt.domain.time import Time
from nkt.domain.types import CollectionKind
from nkt.errors import DuplicateItem, NoSuchItem, NoSuchStack


class ItemDescriptor(BaseModel):
    collection: CollectionKind
    parent: str
    name: str
    message: str | None = None
    added: Time


class Stack(BaseModel):
    name: str
    items: list[ItemDescriptor] = Field(default_factory=list)
    created: Time
    modified: Time


class StackRegistry(BaseModel):
    stacks: list[Stack] = Field(default_factory=list)

    def find_stack(self, name: str) -> Stack | None:
        for stack in self.stacks:
            if stack.name == name:
                return stack
        return None

    def get_stack(self, name: str) -> Stack:
        stack = self.find_stack(name)
        if stack is None:
            msg = f"No stack named '{name}'"
            raise NoSuchStack(msg, name=name)
        return stack

    def add_stack(self, name: str, now: datetime) -> Stack:
        if self.find_stack(name) is not None:
            msg = f"Stack '{name}' already exists"
            raise DuplicateItem(msg, name=name)
        stack = Stack(name=name, created=now, modified=now)
        self.stacks.append(stack)
        return stack

    def rename_references(
        self,
        kind: CollectionKind,
        parent: str,
        old: str,
        new: str,
        *,
        new_parent: str | None = None,
    ) -> int:
        """Point references to a renamed or moved item at its new name."""
        count = 0
        for stack in self.stacks:
            for item in stack.items:
                if item.collection == kind and item.parent == parent and item.name == old:
                    item.name = new
                    if new_parent is not None:
                        item.parent = new_parent
                    count += 1
        return count

    def rename_parent(self, kind: CollectionKind, old: str, new: str) -> int:
        """Point references into a renamed collection at its new name."""
        count = 0
        for stack in self.stacks:
            for item in stack.items:
                if item.collection == kind and item.parent == old:
                    item.parent = new
                    count += 1
        return count

    def serialize(self) -> str:
        return self.model_dump_json(indent=4)


def push(stack: Stack, item: ItemDescriptor, now: datetime, position: int = 0) -> None:
    """Insert *item* at *position*; positions past the end append."""
    stack.items.insert(max(0, min(position, len(stack.items))), item)
    stack.modified = now


def pop_at(stack: Stack, now: datetime, index: int = 0) -> ItemDescriptor:
    """Remove and return the item at *index*; the rest keep their order."""
    if not 0 <= index < len(stack.items):
        msg = f"Stack '{stack.name}' has no item at {index}"
        raise NoSuchItem(msg, stack=stack.name, index=index)
    item = stack.items.pop(index)
    stack.modified = now
    return item


def peek(stack: Stack) -> list[ItemDescriptor]:
    """Items from head to tail."""
    return list(stack.items)
