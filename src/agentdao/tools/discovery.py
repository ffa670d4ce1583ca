"""Discovery tool implementations.

Functions:
    discover_agents, search_capabilities, get_network_stats,
    find_best_agent_for_task, get_capability_categories
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from ..core import defaults
from ..core.economics import format_tokens, match_score, round_half_up
from ..core.models import CAPABILITY_CATEGORIES, Agent
from ..core.query import (
    AGENT_SORT_FIELDS,
    has_all_capabilities,
    has_capability,
    max_price,
    min_reputation,
    select,
    sort_agents,
    sort_asc,
    sort_desc,
    status_is,
    take,
    text_search,
)
from ..core.responses import ToolContext, success_response
from ..core.validation import get_amount, get_enum, get_int, get_list, get_str
from . import _common

DISCOVERY_STATUSES = ["active", "inactive", "all"]
PRIORITIES = ["reputation", "price", "speed"]

CATEGORY_INFO = [
    {
        "id": "analysis",
        "name": "Analysis",
        "description": "Data analysis, market analysis, blockchain analysis, pattern recognition",
        "examples": ["Token analysis", "Whale tracking", "Sentiment analysis"],
    },
    {
        "id": "trading",
        "name": "Trading",
        "description": "DEX trading, arbitrage, portfolio management, order execution",
        "examples": ["Token swaps", "Limit orders", "DCA strategies"],
    },
    {
        "id": "research",
        "name": "Research",
        "description": "Web research, document analysis, fact-checking, summarization",
        "examples": ["Project research", "Whitepaper analysis", "News aggregation"],
    },
    {
        "id": "content",
        "name": "Content",
        "description": "Content creation, writing, translation, formatting",
        "examples": ["Report writing", "Social posts", "Documentation"],
    },
    {
        "id": "coding",
        "name": "Coding",
        "description": "Smart contract development, code review, debugging, automation",
        "examples": ["Contract audits", "Script writing", "Integration"],
    },
    {
        "id": "security",
        "name": "Security",
        "description": "Security audits, vulnerability detection, monitoring",
        "examples": ["Contract audits", "Rug detection", "Risk assessment"],
    },
    {
        "id": "data",
        "name": "Data",
        "description": "Data collection, processing, storage, retrieval",
        "examples": ["Price feeds", "On-chain data", "API aggregation"],
    },
    {
        "id": "automation",
        "name": "Automation",
        "description": "Task automation, scheduling, workflow orchestration",
        "examples": ["Auto-trading", "Notifications", "Batch operations"],
    },
    {
        "id": "communication",
        "name": "Communication",
        "description": "Messaging, notifications, social media management",
        "examples": ["Telegram bots", "Discord integration", "Alerts"],
    },
    {
        "id": "custom",
        "name": "Custom",
        "description": "Custom capabilities that don't fit other categories",
        "examples": ["Specialized tools", "Unique integrations"],
    },
]


def _agent_summary(agent: Agent) -> dict[str, Any]:
    return {
        "agent_id": agent.agent_id,
        "name": agent.name,
        "description": _common.summarize(agent.description),
        "wallet_address": agent.wallet_address,
        "reputation": {
            "score": agent.reputation.score,
            "total_tasks": agent.reputation.total_tasks,
            "success_rate": agent.reputation.success_rate,
        },
        "capabilities": [
            {"name": c.name, "category": c.category, "price_per_call": c.price_per_call} for c in agent.capabilities
        ],
        "mcp_endpoint": agent.mcp_endpoint,
        "status": agent.status.value,
    }


def discover_agents(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Find agents by capability, reputation, price and free text.

    Only active agents are returned unless ``status`` says otherwise.
    """
    capabilities = get_list(arguments, "capabilities", default=[], item_type=str)
    min_score = get_int(arguments, "min_reputation", minimum=0)
    price_cap = get_amount(arguments, "max_price_per_call")
    status = get_enum(arguments, "status", DISCOVERY_STATUSES)
    search = get_str(arguments, "search_text")
    sort_by = get_enum(arguments, "sort_by", AGENT_SORT_FIELDS, default="reputation")
    limit = get_int(arguments, "limit", default=defaults.DEFAULT_LIST_LIMIT, minimum=1)

    predicates = []
    if status != "all":
        predicates.append(status_is(status or "active"))
    if capabilities:
        predicates.append(has_capability(capabilities))
    if min_score is not None:
        predicates.append(min_reputation(min_score))
    if price_cap is not None:
        predicates.append(max_price(int(price_cap)))
    if search:
        predicates.append(text_search(search))

    agents = take(sort_agents(select(_common.get_state().agents.list(), predicates), sort_by), limit)

    return success_response(
        {
            "agents": [_agent_summary(a) for a in agents],
            "total_found": len(agents),
            "filters": {
                "capabilities": capabilities or None,
                "min_reputation": min_score,
                "max_price_per_call": price_cap,
                "status": status,
                "search_text": search,
            },
        },
        context,
    )


def search_capabilities(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Search individual capabilities across active agents, best-reputed first."""
    query = get_str(arguments, "query")
    category = get_enum(arguments, "category", CAPABILITY_CATEGORIES)
    price_cap = get_amount(arguments, "max_price")
    limit = get_int(arguments, "limit", default=defaults.DEFAULT_SEARCH_LIMIT, minimum=1)

    needle = query.lower() if query else None
    bound = int(price_cap) if price_cap is not None else None

    results = []
    for agent in select(_common.get_state().agents.list(), [status_is("active")]):
        for cap in agent.capabilities:
            if needle and needle not in cap.name.lower() and needle not in cap.description.lower():
                continue
            if category and cap.category != category:
                continue
            if bound is not None and cap.price > bound:
                continue
            results.append(
                {
                    "capability": cap.to_dict(),
                    "agent": {
                        "agent_id": agent.agent_id,
                        "name": agent.name,
                        "reputation": agent.reputation.score,
                        "wallet_address": agent.wallet_address,
                    },
                }
            )

    results = sort_desc(results, key=lambda r: r["agent"]["reputation"])
    return success_response(
        {"capabilities": take(results, limit), "total_found": len(results)},
        context,
    )


def get_network_stats(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agents = _common.get_state().agents.list()

    total_earnings = sum(int(a.reputation.total_earnings) for a in agents)
    total_staked = sum(int(a.reputation.total_stake) for a in agents)
    total_tasks = sum(a.reputation.total_tasks for a in agents)
    successful = sum(a.reputation.successful_tasks for a in agents)
    categories = Counter(c.category for a in agents for c in a.capabilities)

    return success_response(
        {
            "network": {
                "total_agents": len(agents),
                "active_agents": sum(1 for a in agents if a.is_active),
                "total_capabilities": sum(len(a.capabilities) for a in agents),
                "average_reputation": round_half_up(sum(a.reputation.score for a in agents) / len(agents)) if agents else 0,
            },
            "economics": {
                "total_earnings": str(total_earnings),
                "total_earnings_formatted": format_tokens(total_earnings, "ETH"),
                "total_staked": str(total_staked),
                "total_staked_formatted": format_tokens(total_staked, "ETH"),
            },
            "tasks": {
                "total_tasks": total_tasks,
                "successful_tasks": successful,
                "success_rate": round_half_up(successful / total_tasks * 100) if total_tasks else 0,
            },
            "category_distribution": dict(categories),
            "top_categories": [
                {"category": category, "count": count} for category, count in categories.most_common(5)
            ],
        },
        context,
    )


def find_best_agent_for_task(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Rank active agents for a task and return the best match.

    Agents must offer every required capability and, when a budget is given,
    at least one capability within it. ``prioritize="price"`` orders by the
    cheapest capability instead of the match score.
    """
    description = get_str(arguments, "task_description", required=True)
    required = get_list(arguments, "required_capabilities", default=[], item_type=str)
    budget_arg = get_amount(arguments, "budget")
    budget = int(budget_arg) if budget_arg is not None else None
    prioritize = get_enum(arguments, "prioritize", PRIORITIES, default="reputation")

    predicates = [status_is("active")]
    if required:
        predicates.append(has_all_capabilities(required))
    if budget:
        predicates.append(max_price(budget))
    candidates = select(_common.get_state().agents.list(), predicates)

    scored = [(agent, match_score(agent, description, budget)) for agent in candidates]
    if prioritize == "price":
        scored = sort_asc(scored, key=lambda s: (s[0].min_price() is None, s[0].min_price() or 0))
    else:
        scored = sort_desc(scored, key=lambda s: s[1])

    if not scored:
        return success_response(
            {
                "found": False,
                "message": "No agents found matching the criteria",
                "suggestion": "Try broadening your search or adjusting the budget",
            },
            context,
        )

    best, best_score = scored[0]
    return success_response(
        {
            "found": True,
            "best_match": {
                "agent_id": best.agent_id,
                "name": best.name,
                "description": best.description,
                "match_score": round_half_up(best_score),
                "reputation": best.reputation.score,
                "success_rate": best.reputation.success_rate,
                "relevant_capabilities": [
                    {"name": c.name, "category": c.category, "price": c.price_per_call} for c in best.capabilities[:3]
                ],
                "mcp_endpoint": best.mcp_endpoint,
                "wallet_address": best.wallet_address,
            },
            "alternatives": [
                {
                    "agent_id": agent.agent_id,
                    "name": agent.name,
                    "match_score": round_half_up(score),
                    "reputation": agent.reputation.score,
                }
                for agent, score in scored[1:4]
            ],
            "total_candidates": len(scored),
        },
        context,
    )


def get_capability_categories(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agents = _common.get_state().agents.list()
    categories = [
        {
            **info,
            "capability_count": sum(1 for a in agents for c in a.capabilities if c.category == info["id"]),
            "agent_count": sum(1 for a in agents if any(c.category == info["id"] for c in a.capabilities)),
        }
        for info in CATEGORY_INFO
    ]
    return success_response({"categories": categories, "total_categories": len(categories)}, context)
