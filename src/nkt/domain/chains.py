"""Chains: habit-streak trackers, stored together in ``chains.json``.

INVARIANT: every name and alias is unique across all chains, so a chain
can be looked up by either.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from nkt.domain.tags import Tag
from nkt.domain.time import Time, TimeZone
from nkt.errors import DuplicateItem, NoSuchChain


class Chain(BaseModel):
    name: str
    alias: str | None = None
    details: str | None = None
    active: bool = True
    created: Time
    completed: list[Time] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)

    def handles(self) -> set[str]:
        return {self.name} | ({self.alias} if self.alias else set())


class ChainRegistry(BaseModel):
    chains: list[Chain] = Field(default_factory=list)

    def find_chain(self, name: str) -> Chain | None:
        """Chain whose name or alias is *name*."""
        for chain in self.chains:
            if name in chain.handles():
                return chain
        return None

    def get_chain(self, name: str) -> Chain:
        chain = self.find_chain(name)
        if chain is None:
            msg = f"No chain named '{name}'"
            raise NoSuchChain(msg, name=name)
        return chain

    def add_chain(self, chain: Chain) -> None:
        """Add *chain*; names and aliases may not clash either way round."""
        for handle in chain.handles():
            if self.find_chain(handle) is not None:
                msg = f"Chain name or alias '{handle}' already in use"
                raise DuplicateItem(msg, name=handle)
        self.chains.append(chain)

    def serialize(self) -> str:
        return self.model_dump_json(indent=4)


def completed_days(chain: Chain, tz: TimeZone) -> set[date]:
    return {tz.local_date(t) for t in chain.completed}


def is_complete_today(chain: Chain, now: datetime, tz: TimeZone) -> bool:
    """Was the latest completion on today's local date?"""
    if not chain.completed:
        return False
    return tz.local_date(max(chain.completed)) == tz.local_date(now)


def complete(chain: Chain, now: datetime) -> None:
    chain.completed.append(now)


def streak(chain: Chain, now: datetime, tz: TimeZone) -> int:
    """Consecutive completed days ending today (or yesterday if today is open)."""
    days = completed_days(chain, tz)
    cursor = tz.local_date(now)
    if cursor not in days:
        cursor -= timedelta(days=1)
    count = 0
    while cursor in days:
        count += 1
        cursor -= timedelta(days=1)
    return count
