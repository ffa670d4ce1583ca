"""Agent registry tool implementations.

Functions:
    register_agent, get_agent_profile, update_agent_profile,
    add_agent_capability, list_my_agents, stake_tokens
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core import defaults
from ..core.economics import add_stake
from ..core.exceptions import NotFoundError, ValidationException
from ..core.models import Agent, AgentStatus, Capability, Reputation
from ..core.responses import ToolContext, success_response
from ..core.validation import get_amount, get_dict, get_list, get_str, validate_enum
from ..storage.store import generate_id
from . import _common
from ._common import logger

UPDATABLE_FIELDS = ["name", "description", "avatar", "website", "mcp_endpoint", "status"]
UPDATABLE_STATUSES = [AgentStatus.ACTIVE.value, AgentStatus.INACTIVE.value]


@dataclass
class RegisterAgentRequest:
    name: str
    description: str
    wallet_address: str
    mcp_endpoint: str
    capabilities: list[Capability]
    stake_amount: str = "0"
    avatar: str | None = None
    website: str | None = None

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> RegisterAgentRequest:
        raw_caps = get_list(args, "capabilities", required=True)
        return cls(
            name=get_str(args, "name", required=True),
            description=get_str(args, "description", required=True, allow_empty=True),
            wallet_address=get_str(args, "wallet_address", required=True),
            mcp_endpoint=get_str(args, "mcp_endpoint", required=True),
            capabilities=[_common.parse_capability(c, f"capabilities[{i}]") for i, c in enumerate(raw_caps)],
            stake_amount=get_amount(args, "stake_amount", default="0"),
            avatar=get_str(args, "avatar"),
            website=get_str(args, "website"),
        )


@dataclass
class UpdateAgentRequest:
    agent_id: str
    updates: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> UpdateAgentRequest:
        raw = get_dict(args, "updates", required=True)
        updates: dict[str, Any] = {}
        for key in raw:
            validate_enum(key, UPDATABLE_FIELDS, "updates field")
            if key == "status":
                updates[key] = validate_enum(get_str(raw, key, required=True), UPDATABLE_STATUSES, "status")
            elif key in ("name", "mcp_endpoint"):
                updates[key] = get_str(raw, key, required=True)
            else:
                updates[key] = get_str(raw, key, allow_empty=True)
        return cls(agent_id=get_str(args, "agent_id", required=True), updates=updates)


def register_agent(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Register a new agent with a starting reputation."""
    req = RegisterAgentRequest.from_arguments(arguments)
    state = _common.get_state()
    now = state.now()

    agent = Agent(
        agent_id=generate_id(),
        wallet_address=req.wallet_address,
        name=req.name,
        description=req.description,
        mcp_endpoint=req.mcp_endpoint,
        capabilities=req.capabilities,
        reputation=Reputation(
            score=defaults.STARTING_REPUTATION,
            total_stake=req.stake_amount,
            last_updated=now,
        ),
        avatar=req.avatar,
        website=req.website,
        created_at=now,
        updated_at=now,
    )
    state.agents.create(agent)
    logger.info("Registered agent %s (%s)", agent.agent_id, agent.name)

    return success_response(
        {
            "agent_id": agent.agent_id,
            "wallet_address": agent.wallet_address,
            "name": agent.name,
            "status": agent.status.value,
            "transaction_hash": _common.fake_tx_hash(),
            "message": "Agent successfully registered in AgentDAO network",
        },
        context,
    )


def get_agent_profile(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Look up an agent by id or, failing that, by wallet address."""
    agent_id = get_str(arguments, "agent_id")
    wallet = get_str(arguments, "wallet_address")
    if agent_id is None and wallet is None:
        raise ValidationException("Provide agent_id or wallet_address", field="agent_id")

    state = _common.get_state()
    agent = state.agents.get(agent_id) if agent_id else state.find_agent_by_wallet(wallet)
    if agent is None:
        raise NotFoundError("Agent not found with the provided identifier", code="AGENT_NOT_FOUND")
    return success_response(agent.to_dict(), context)


def update_agent_profile(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    req = UpdateAgentRequest.from_arguments(arguments)
    state = _common.get_state()
    agent = state.agents.require(req.agent_id)

    for key, value in req.updates.items():
        if key == "status":
            value = AgentStatus(value)
        setattr(agent, key, value)
    agent.updated_at = state.now()
    state.agents.save(agent)

    return success_response(
        {
            "agent_id": agent.agent_id,
            "updated_fields": list(req.updates),
            "message": "Agent profile updated successfully",
        },
        context,
    )


def add_agent_capability(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agent_id = get_str(arguments, "agent_id", required=True)
    capability = _common.parse_capability(arguments.get("capability"), "capability", require_details=True)

    state = _common.get_state()
    agent = state.agents.require(agent_id)
    agent.capabilities.append(capability)
    agent.updated_at = state.now()
    state.agents.save(agent)

    return success_response(
        {
            "agent_id": agent.agent_id,
            "capability_id": capability.id,
            "name": capability.name,
            "message": "Capability added successfully",
        },
        context,
    )


def list_my_agents(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Summaries of every agent owned by a wallet."""
    wallet = get_str(arguments, "wallet_address", required=True)
    state = _common.get_state()
    owned = [a for a in state.agents.list() if a.wallet_address.lower() == wallet.lower()]
    return success_response(
        [
            {
                "agent_id": a.agent_id,
                "name": a.name,
                "status": a.status.value,
                "reputation": a.reputation.score,
                "capabilities": len(a.capabilities),
            }
            for a in owned
        ],
        context,
    )


def stake_tokens(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agent_id = get_str(arguments, "agent_id", required=True)
    amount = get_amount(arguments, "amount", required=True)

    state = _common.get_state()
    agent = state.agents.require(agent_id)
    previous, new = add_stake(agent, int(amount), state.now())
    state.agents.save(agent)
    logger.info("Agent %s staked %s wei", agent_id, amount)

    return success_response(
        {
            "agent_id": agent_id,
            "previous_stake": previous,
            "new_stake": new,
            "transaction_hash": _common.fake_tx_hash(),
            "message": "Tokens staked successfully",
        },
        context,
    )
