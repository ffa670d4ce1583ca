"""Reputation tool implementations.

Functions:
    submit_attestation, get_agent_reputation, get_attestation,
    list_agent_attestations, calculate_trust_score, get_reputation_leaderboard
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core import defaults
from ..core.economics import apply_attestation, round_half_up, trust_score
from ..core.exceptions import NotFoundError
from ..core.models import ATTESTATION_CATEGORIES, CAPABILITY_CATEGORIES, Attestation
from ..core.query import select, sort_desc, status_is, take
from ..core.responses import ToolContext, success_response
from ..core.validation import get_enum, get_int, get_str
from ..storage.store import generate_id
from . import _common
from ._common import logger

ATTESTATION_DIRECTIONS = ["received", "given", "both"]


@dataclass
class SubmitAttestationRequest:
    attestor_id: str
    subject_id: str
    rating: int
    category: str
    task_id: str | None = None
    comment: str | None = None

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> SubmitAttestationRequest:
        comment = get_str(args, "comment", allow_empty=True)
        return cls(
            attestor_id=get_str(args, "attestor_id", required=True),
            subject_id=get_str(args, "subject_id", required=True),
            rating=get_int(args, "rating", required=True, minimum=1, maximum=5),
            category=get_enum(args, "category", ATTESTATION_CATEGORIES, required=True),
            task_id=get_str(args, "task_id"),
            comment=comment[: defaults.MAX_COMMENT_LENGTH] if comment is not None else None,
        )


def submit_attestation(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Record a peer rating and shift the subject's reputation.

    The score moves by ``(rating - 3) * ATTESTATION_WEIGHT`` and stays within
    [0, 1000]. Subjects that are not registered agents only get the record.
    """
    req = SubmitAttestationRequest.from_arguments(arguments)
    state = _common.get_state()
    now = state.now()

    attestation_id = generate_id()
    attestation = Attestation(
        attestation_id=attestation_id,
        attestor=req.attestor_id,
        subject=req.subject_id,
        task_id=req.task_id,
        rating=req.rating,
        category=req.category,
        comment=req.comment,
        transaction_hash="0x" + attestation_id.encode().hex()[:64],
        block_number=_common.fake_block_number(now),
        timestamp=now,
        signature=_common.fake_signature(),
    )
    state.attestations.create(attestation)

    subject = state.agents.get(req.subject_id)
    new_score = None
    if subject is not None:
        new_score = apply_attestation(subject, req.rating, now)
        state.agents.save(subject)
        logger.info("Agent %s rated %d by %s, score now %d", subject.agent_id, req.rating, req.attestor_id, new_score)

    return success_response(
        {
            "attestation_id": attestation_id,
            "attestor": req.attestor_id,
            "subject": req.subject_id,
            "rating": req.rating,
            "category": req.category,
            "new_score": new_score,
            "transaction_hash": attestation.transaction_hash,
            "message": "Attestation submitted successfully on-chain",
        },
        context,
    )


def get_agent_reputation(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agent_id = get_str(arguments, "agent_id", required=True)
    state = _common.get_state()
    agent = state.agents.require(agent_id)

    received = sort_desc(
        (a for a in state.attestations.list() if a.subject == agent_id),
        key=lambda a: a.timestamp,
    )
    category_scores: dict[str, dict[str, Any]] = {}
    for a in received:
        entry = category_scores.setdefault(a.category, {"total": 0, "count": 0, "average": 0})
        entry["total"] += a.rating
        entry["count"] += 1
        entry["average"] = entry["total"] / entry["count"]

    rep = agent.reputation
    return success_response(
        {
            "agent_id": agent_id,
            "agent_name": agent.name,
            "overall_score": rep.score,
            "max_score": defaults.MAX_REPUTATION,
            "percentile": round_half_up(rep.score / defaults.MAX_REPUTATION * 100),
            "stats": {
                "total_tasks": rep.total_tasks,
                "successful_tasks": rep.successful_tasks,
                "success_rate": rep.success_rate,
                "total_earnings": rep.total_earnings,
                "total_stake": rep.total_stake,
                "attestation_count": len(received),
            },
            "category_scores": category_scores,
            "recent_attestations": [
                {
                    "attestation_id": a.attestation_id,
                    "rating": a.rating,
                    "category": a.category,
                    "comment": a.comment,
                    "timestamp": a.timestamp,
                }
                for a in received[: defaults.RECENT_ATTESTATIONS]
            ],
            "last_updated": rep.last_updated,
        },
        context,
    )


def get_attestation(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    attestation_id = get_str(arguments, "attestation_id", required=True)
    attestation = _common.get_state().attestations.require(attestation_id)
    return success_response(attestation.to_dict(), context)


def list_agent_attestations(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agent_id = get_str(arguments, "agent_id", required=True)
    direction = get_enum(arguments, "type", ATTESTATION_DIRECTIONS, default="both")
    category = get_str(arguments, "category")
    limit = get_int(arguments, "limit", minimum=1)

    def matches(a: Attestation) -> bool:
        if direction == "received":
            return a.subject == agent_id
        if direction == "given":
            return a.attestor == agent_id
        return a.subject == agent_id or a.attestor == agent_id

    predicates = [matches]
    if category:
        predicates.append(lambda a: a.category == category)

    attestations = sort_desc(select(_common.get_state().attestations.list(), predicates), key=lambda a: a.timestamp)
    return success_response([a.to_dict() for a in take(attestations, limit)], context)


def calculate_trust_score(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Trust between two agents from their mutual attestations and reputation."""
    agent_a_id = get_str(arguments, "agent_a", required=True)
    agent_b_id = get_str(arguments, "agent_b", required=True)

    state = _common.get_state()
    agent_a = state.agents.get(agent_a_id)
    agent_b = state.agents.get(agent_b_id)
    if agent_a is None or agent_b is None:
        raise NotFoundError("One or both agents not found", code="AGENT_NOT_FOUND")

    attestations = state.attestations.list()
    a_to_b = [a for a in attestations if a.attestor == agent_a_id and a.subject == agent_b_id]
    b_to_a = [a for a in attestations if a.attestor == agent_b_id and a.subject == agent_a_id]

    result = trust_score(agent_a, agent_b, a_to_b, b_to_a)
    return success_response(
        {
            "agent_a": {"id": agent_a_id, "name": agent_a.name, "reputation": agent_a.reputation.score},
            "agent_b": {"id": agent_b_id, "name": agent_b.name, "reputation": agent_b.reputation.score},
            **result,
        },
        context,
    )


def get_reputation_leaderboard(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    limit = get_int(arguments, "limit", default=defaults.DEFAULT_LEADERBOARD_LIMIT, minimum=1)
    category = get_enum(arguments, "category", CAPABILITY_CATEGORIES)

    predicates = [status_is("active")]
    if category:
        predicates.append(lambda a: any(c.category == category for c in a.capabilities))
    agents = sort_desc(select(_common.get_state().agents.list(), predicates), key=lambda a: a.reputation.score)

    return success_response(
        [
            {
                "rank": rank,
                "agent_id": a.agent_id,
                "name": a.name,
                "reputation_score": a.reputation.score,
                "total_tasks": a.reputation.total_tasks,
                "success_rate": a.reputation.success_rate,
                "attestations": a.reputation.attestations,
                "total_earnings": a.reputation.total_earnings,
                "top_capabilities": [c.name for c in a.capabilities[:3]],
            }
            for rank, a in enumerate(agents[:limit], start=1)
        ],
        context,
    )
