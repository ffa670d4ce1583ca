"""Cross-entity rules: reputation, payouts, voting power and scoring.

All wei arithmetic is done on Python ints; amounts are stored as decimal
strings on the models.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from . import defaults
from .models import Agent, Attestation, Escrow

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest int with halves going up, so 12.5 gives 13."""
    return math.floor(value + 0.5)


def clamp_score(score: int) -> int:
    return max(defaults.MIN_REPUTATION, min(defaults.MAX_REPUTATION, score))


def attestation_delta(rating: int) -> int:
    """Reputation change for one attestation: ``(rating - 3) * weight``."""
    return (rating - defaults.NEUTRAL_RATING) * defaults.ATTESTATION_WEIGHT


def apply_attestation(agent: Agent, rating: int, now: int) -> int:
    """Shift ``agent``'s score for a new attestation and return the new score."""
    rep = agent.reputation
    rep.score = clamp_score(rep.score + attestation_delta(rating))
    rep.attestations += 1
    rep.last_updated = now
    agent.updated_at = now
    return rep.score


def compute_payouts(escrow: Escrow) -> list[dict[str, Any]]:
    """Per-beneficiary payment ``amount * share // 100``.

    The rounding remainder is not distributed.
    """
    amount = int(escrow.amount)
    return [{"address": b.address, "share": b.share, "amount": str(amount * b.share // 100)} for b in escrow.beneficiaries]


def credit_payout(agent: Agent, amount: int, now: int) -> None:
    """Record a completed, paid task on an agent's reputation."""
    rep = agent.reputation
    rep.total_earnings = str(int(rep.total_earnings) + amount)
    rep.total_tasks += 1
    rep.successful_tasks += 1
    rep.last_updated = now
    agent.updated_at = now
    logger.debug("Credited %s wei to agent %s", amount, agent.agent_id)


def add_stake(agent: Agent, amount: int, now: int) -> tuple[str, str]:
    """Increase an agent's stake. Returns ``(previous, new)`` as wei strings."""
    previous = agent.reputation.total_stake
    agent.reputation.total_stake = str(int(previous) + amount)
    agent.reputation.last_updated = now
    agent.updated_at = now
    return previous, agent.reputation.total_stake


# =============================================================================
# GOVERNANCE
# =============================================================================


@dataclass
class VotingPower:
    base: int
    reputation_bonus: int
    stake_bonus: int

    @property
    def total(self) -> int:
        return self.base + self.reputation_bonus + self.stake_bonus


def voting_power(agent: Agent | None) -> VotingPower:
    """Voting weight of a wallet, from its agent record if one is registered."""
    if agent is None:
        return VotingPower(defaults.BASE_VOTING_POWER, 0, 0)
    return VotingPower(
        base=defaults.BASE_VOTING_POWER,
        reputation_bonus=agent.reputation.score * defaults.REPUTATION_POWER_UNIT,
        stake_bonus=int(agent.reputation.total_stake) // defaults.STAKE_POWER_DIVISOR,
    )


def format_tokens(wei: int | str, symbol: str = "DAO") -> str:
    """Render a wei amount as whole tokens with four decimals, rounding halves up."""
    units = (int(wei) * 10**4 * 2 + defaults.WEI_PER_TOKEN) // (defaults.WEI_PER_TOKEN * 2)
    whole, fraction = divmod(units, 10**4)
    return f"{whole}.{fraction:04d} {symbol}"


def vote_percentage(part: int, total: int) -> float:
    """Share of ``total`` as a percentage truncated to two decimals."""
    if total <= 0:
        return 0
    return (part * 10000 // total) / 100


# =============================================================================
# TRUST AND MATCHING
# =============================================================================


def trust_level(score: int) -> str:
    if score >= 80:
        return "High"
    if score >= 50:
        return "Medium"
    if score >= 20:
        return "Low"
    return "None"


def trust_score(
    agent_a: Agent,
    agent_b: Agent,
    a_to_b: Sequence[Attestation],
    b_to_a: Sequence[Attestation],
) -> dict[str, Any]:
    """Score how much two agents can trust each other, 0..100.

    Combines the count of direct attestations, a bonus when both sides have
    attested, combined reputation and the average rating between them.
    """
    direct = list(a_to_b) + list(b_to_a)
    mutual = bool(a_to_b) and bool(b_to_a)
    combined = agent_a.reputation.score + agent_b.reputation.score
    avg_rating = sum(a.rating for a in direct) / len(direct) if direct else 0

    score = len(direct) * 10
    score += 20 if mutual else 0
    score += round_half_up(combined / 20)
    score += round_half_up(avg_rating * 10)
    score = min(100, score)

    return {
        "trust_score": score,
        "trust_level": trust_level(score),
        "factors": {
            "direct_attestations": len(direct),
            "mutual_attestation": mutual,
            "average_rating": f"{avg_rating:.2f}",
            "combined_reputation": combined,
        },
        "recommendation": "Safe to collaborate" if score >= 50 else "Consider requesting additional verification",
    }


def match_score(agent: Agent, task_description: str, budget: int | None = None) -> float:
    """Rank an agent for a task description, 0..100.

    Reputation is worth up to 40 points, success rate 30, keyword matches
    against capabilities 5 each up to 20, and price fit up to 10 (a flat 5
    when no budget is given).
    """
    rep = agent.reputation
    score = rep.score / defaults.MAX_REPUTATION * 40
    if rep.total_tasks > 0:
        score += rep.successful_tasks / rep.total_tasks * 30

    keywords = [kw for kw in task_description.lower().split(" ") if kw]
    matching = [
        c for c in agent.capabilities if any(kw in c.name.lower() or kw in c.description.lower() for kw in keywords)
    ]
    score += min(len(matching) * 5, 20)

    if budget and agent.capabilities:
        avg_price = sum(c.price for c in agent.capabilities) / len(agent.capabilities)
        score += (1 - min(avg_price / budget, 1)) * 10
    elif not budget:
        score += 5
    return score
