"""Live JSON snapshots of the economy, served as MCP resources."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .core.economics import format_tokens
from .core.lifecycle import close_proposal_if_ended
from .core.query import sort_desc
from .storage.state import EconomyState, get_state


@dataclass(frozen=True)
class ResourceSpec:
    uri: str
    name: str
    description: str
    build: Callable[[EconomyState], Any]
    mime_type: str = "application/json"


def _agents(state: EconomyState) -> dict[str, Any]:
    agents = sort_desc(state.agents.list(), key=lambda a: a.reputation.score)
    return {
        "count": len(agents),
        "agents": [
            {
                "agent_id": a.agent_id,
                "name": a.name,
                "status": a.status.value,
                "reputation": a.reputation.score,
                "capabilities": [c.category for c in a.capabilities],
            }
            for a in agents
        ],
    }


def _tasks(state: EconomyState) -> dict[str, Any]:
    tasks = sort_desc(state.tasks.list(), key=lambda t: int(t.reward))
    return {
        "count": len(tasks),
        "open": sum(1 for t in tasks if t.status.value == "open"),
        "tasks": [
            {
                "task_id": t.task_id,
                "title": t.title,
                "status": t.status.value,
                "reward": t.reward,
                "required_capabilities": t.required_capabilities,
                "assigned_agents": len(t.assigned_agents),
                "max_agents": t.max_agents,
            }
            for t in tasks
        ],
    }


def _proposals(state: EconomyState) -> dict[str, Any]:
    now = state.now()
    proposals = state.proposals.list()
    for proposal in proposals:
        if close_proposal_if_ended(proposal, now):
            state.proposals.save(proposal)
    proposals = sort_desc(proposals, key=lambda p: p.created_at)
    return {
        "count": len(proposals),
        "proposals": [
            {
                "proposal_id": p.proposal_id,
                "title": p.title,
                "category": p.category,
                "status": p.status.value,
                "votes": p.current_votes.to_dict(),
                "voting_end": p.voting_end,
            }
            for p in proposals
        ],
    }


def _stats(state: EconomyState) -> dict[str, Any]:
    agents = state.agents.list()
    escrows = state.escrows.list()
    locked = sum(int(e.amount) for e in escrows if e.status.value == "funded")
    return {
        "agents": len(agents),
        "active_agents": sum(1 for a in agents if a.is_active),
        "tasks": len(state.tasks),
        "escrows": len(escrows),
        "value_locked": str(locked),
        "value_locked_formatted": format_tokens(locked, "ETH"),
        "attestations": len(state.attestations),
        "proposals": len(state.proposals),
        "collaborations": len(state.collaborations),
        "messages": len(state.messages),
    }


RESOURCES = [
    ResourceSpec(
        uri="agentdao://registry/agents",
        name="Agent Registry",
        description="All registered agents, highest reputation first",
        build=_agents,
    ),
    ResourceSpec(
        uri="agentdao://marketplace/tasks",
        name="Task Marketplace",
        description="All marketplace tasks, highest reward first",
        build=_tasks,
    ),
    ResourceSpec(
        uri="agentdao://governance/proposals",
        name="Governance Proposals",
        description="All governance proposals with current vote totals",
        build=_proposals,
    ),
    ResourceSpec(
        uri="agentdao://stats/network",
        name="Network Statistics",
        description="Entity counts and value locked in escrow",
        build=_stats,
    ),
]

_BY_URI = {r.uri: r for r in RESOURCES}


def read_resource_json(uri: str, state: EconomyState | None = None) -> str:
    """Render the resource at ``uri`` as a JSON document.

    Raises:
        ValueError: If no resource is registered under ``uri``
    """
    resource = _BY_URI.get(uri)
    if resource is None:
        raise ValueError(f"Unknown resource: {uri}")
    return json.dumps(resource.build(state or get_state()), indent=2, default=str)
