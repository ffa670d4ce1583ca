"""Selection, sorting and pagination over stored entities.

Everything here is pure: functions take lists of model objects and return new
lists. Sorts are stable, so ties keep store insertion order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from .models import Agent, Task

T = TypeVar("T")

Predicate = Callable[[Any], bool]


@dataclass
class Page(Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int
    limit: int
    offset: int
    has_more: bool

    def pagination(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "has_more": self.has_more,
        }


def select(items: Iterable[T], predicates: Sequence[Predicate] = ()) -> list[T]:
    """Keep the items matching every predicate, in input order."""
    return [item for item in items if all(p(item) for p in predicates)]


def sort_desc(items: Iterable[T], key: Callable[[T], Any]) -> list[T]:
    return sorted(items, key=key, reverse=True)


def sort_asc(items: Iterable[T], key: Callable[[T], Any]) -> list[T]:
    return sorted(items, key=key)


def paginate(items: Sequence[T], limit: int, offset: int = 0) -> Page[T]:
    total = len(items)
    window = list(items[offset : offset + limit])
    return Page(items=window, total=total, limit=limit, offset=offset, has_more=offset + limit < total)


def take(items: Sequence[T], limit: int | None) -> list[T]:
    """First ``limit`` items, or all of them when ``limit`` is falsy."""
    if not limit:
        return list(items)
    return list(items[:limit])


# =============================================================================
# PREDICATES
# =============================================================================


def status_is(status: Enum | str) -> Predicate:
    value = status.value if isinstance(status, Enum) else status
    return lambda entity: entity.status.value == value


def _offers(agent: Agent, term: str) -> bool:
    needle = term.lower()
    return any(cap.category == term or needle in cap.name.lower() for cap in agent.capabilities)


def has_capability(wanted: Iterable[str]) -> Predicate:
    """Agent offers any of ``wanted``, by exact category or name substring."""
    terms = list(wanted)
    return lambda agent: any(_offers(agent, term) for term in terms)


def has_all_capabilities(wanted: Iterable[str]) -> Predicate:
    terms = list(wanted)
    return lambda agent: all(_offers(agent, term) for term in terms)


def min_reputation(score: int) -> Predicate:
    return lambda agent: agent.reputation.score >= score


def max_price(bound: int) -> Predicate:
    """Agent has at least one capability priced at or below ``bound`` wei."""
    return lambda agent: any(cap.price <= bound for cap in agent.capabilities)


def reward_between(minimum: int | None = None, maximum: int | None = None) -> Predicate:
    def predicate(task: Task) -> bool:
        reward = int(task.reward)
        if minimum is not None and reward < minimum:
            return False
        if maximum is not None and reward > maximum:
            return False
        return True

    return predicate


def requires_any_capability(wanted: Iterable[str]) -> Predicate:
    terms = set(wanted)
    return lambda task: any(cap in terms for cap in task.required_capabilities)


def text_search(query: str) -> Predicate:
    """Case-insensitive substring match over agent name, description and capabilities."""
    needle = query.lower()

    def predicate(agent: Agent) -> bool:
        if needle in agent.name.lower() or needle in agent.description.lower():
            return True
        return any(needle in cap.name.lower() or needle in cap.description.lower() for cap in agent.capabilities)

    return predicate


def wallet_involved(wallet: str) -> Predicate:
    """Entity has an ``involves(wallet)`` relation to ``wallet``."""
    return lambda entity: entity.involves(wallet)


# =============================================================================
# AGENT SORT KEYS
# =============================================================================

AGENT_SORT_FIELDS = ["reputation", "price", "tasks_completed", "earnings"]


def sort_agents(agents: Iterable[Agent], sort_by: str) -> list[Agent]:
    """Order agents for discovery.

    ``price`` is ascending by cheapest capability with capability-less agents
    last; every other key is descending.
    """
    if sort_by == "price":
        return sort_asc(agents, key=lambda a: (a.min_price() is None, a.min_price() or 0))
    if sort_by == "tasks_completed":
        return sort_desc(agents, key=lambda a: a.reputation.total_tasks)
    if sort_by == "earnings":
        return sort_desc(agents, key=lambda a: int(a.reputation.total_earnings))
    return sort_desc(agents, key=lambda a: a.reputation.score)


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."
