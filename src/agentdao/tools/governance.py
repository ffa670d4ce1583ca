"""Governance tool implementations.

Functions:
    create_proposal, vote_on_proposal, get_proposal, list_proposals,
    execute_proposal, cancel_proposal, get_voting_power

Proposals close lazily: any handler that loads a proposal first settles it as
succeeded or defeated once its voting window has ended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core import defaults
from ..core.economics import format_tokens, vote_percentage, voting_power
from ..core.exceptions import ConflictError, InvalidStateError, UnauthorizedError, ValidationException
from ..core.lifecycle import PROPOSAL_TRANSITIONS, close_proposal_if_ended, require_status, require_transition
from ..core.models import (
    PROPOSAL_CATEGORIES,
    VOTE_CHOICES,
    Proposal,
    ProposalAction,
    ProposalStatus,
    Vote,
    same_wallet,
)
from ..core.query import select, sort_desc, status_is, take
from ..core.responses import ToolContext, success_response
from ..core.validation import get_enum, get_int, get_list, get_number, get_str
from ..storage.state import EconomyState
from ..storage.store import generate_id
from . import _common
from ._common import logger

DAY_MS = 24 * 60 * 60 * 1000
PROPOSAL_STATUSES = [s.value for s in ProposalStatus]


def _parse_actions(raw: list[Any]) -> list[ProposalAction]:
    actions = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationException(f"actions[{i}] must be an object", field="actions")
        actions.append(
            ProposalAction(
                target=get_str(item, "target", required=True),
                calldata=get_str(item, "calldata", default="0x"),
                value=get_str(item, "value", default="0"),
            )
        )
    return actions


@dataclass
class CreateProposalRequest:
    proposer_wallet: str
    title: str
    description: str
    category: str
    actions: list[ProposalAction] = field(default_factory=list)
    voting_duration_days: float = defaults.DEFAULT_VOTING_DAYS
    quorum_required: int = defaults.DEFAULT_QUORUM

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> CreateProposalRequest:
        return cls(
            proposer_wallet=get_str(args, "proposer_wallet", required=True),
            title=get_str(args, "title", required=True),
            description=get_str(args, "description", required=True, allow_empty=True),
            category=get_enum(args, "category", PROPOSAL_CATEGORIES, required=True),
            actions=_parse_actions(get_list(args, "actions", default=[])),
            # zero is a valid duration: the proposal closes on its next read
            voting_duration_days=get_number(
                args,
                "voting_duration_days",
                default=defaults.DEFAULT_VOTING_DAYS,
                minimum=0,
                maximum=defaults.MAX_VOTING_DAYS,
            ),
            quorum_required=get_int(args, "quorum_required", default=defaults.DEFAULT_QUORUM, minimum=0, maximum=100),
        )


def _load_proposal(state: EconomyState, proposal_id: str) -> Proposal:
    proposal = state.proposals.require(proposal_id)
    if close_proposal_if_ended(proposal, state.now()):
        state.proposals.save(proposal)
    return proposal


def _vote_totals(proposal: Proposal) -> dict[str, str]:
    return {choice: format_tokens(proposal.current_votes.get(choice)) for choice in VOTE_CHOICES}


def create_proposal(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    req = CreateProposalRequest.from_arguments(arguments)
    state = _common.get_state()
    now = state.now()

    proposal_id = generate_id()
    proposal = Proposal(
        proposal_id=proposal_id,
        proposer=req.proposer_wallet,
        title=req.title,
        description=req.description,
        category=req.category,
        actions=req.actions,
        voting_start=now,
        voting_end=now + int(req.voting_duration_days * DAY_MS),
        quorum_required=req.quorum_required,
        created_at=now,
    )
    state.proposals.create(proposal)
    state.open_ballot(proposal_id)
    logger.info("Proposal %s opened: %s", proposal_id, proposal.title)

    return success_response(
        {
            "proposal_id": proposal_id,
            "title": proposal.title,
            "category": proposal.category,
            "voting_start": _common.iso_timestamp(proposal.voting_start),
            "voting_end": _common.iso_timestamp(proposal.voting_end),
            "quorum_required": f"{proposal.quorum_required}%",
            "status": proposal.status.value,
            "transaction_hash": "0x" + proposal_id.encode().hex()[:64],
            "message": "Proposal created successfully. Voting is now open.",
        },
        context,
    )


def vote_on_proposal(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Cast a weighted vote, one per wallet per proposal.

    Weight is computed from the voter's agent record at the time of voting.
    """
    proposal_id = get_str(arguments, "proposal_id", required=True)
    voter = get_str(arguments, "voter_wallet", required=True)
    choice = get_enum(arguments, "vote", VOTE_CHOICES, required=True)
    reason = get_str(arguments, "reason", allow_empty=True)

    state = _common.get_state()
    proposal = state.proposals.require(proposal_id)
    if proposal.status != ProposalStatus.ACTIVE:
        raise InvalidStateError(f"Proposal is {proposal.status.value}, voting not allowed", code="VOTING_CLOSED")

    now = state.now()
    if close_proposal_if_ended(proposal, now):
        state.proposals.save(proposal)
        raise InvalidStateError("Voting period has ended", code="VOTING_ENDED")

    if state.has_voted(proposal_id, voter):
        raise ConflictError("This wallet has already voted on this proposal", code="ALREADY_VOTED")

    power = voting_power(state.find_agent_by_wallet(voter)).total
    state.record_vote(proposal_id, voter, Vote(vote=choice, weight=str(power), timestamp=now, reason=reason))
    proposal.current_votes.add(choice, power)
    state.proposals.save(proposal)
    logger.info("Wallet %s voted %s on %s with %s", voter, choice, proposal_id, format_tokens(power))

    return success_response(
        {
            "proposal_id": proposal_id,
            "vote": choice,
            "voting_power": str(power),
            "voting_power_formatted": format_tokens(power),
            "transaction_hash": _common.fake_tx_hash(),
            "current_totals": _vote_totals(proposal),
            "message": "Vote cast successfully",
        },
        context,
    )


def get_proposal(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    proposal_id = get_str(arguments, "proposal_id", required=True)
    state = _common.get_state()
    proposal = _load_proposal(state, proposal_id)

    votes = proposal.current_votes
    total = votes.total
    return success_response(
        {
            "proposal_id": proposal.proposal_id,
            "title": proposal.title,
            "description": proposal.description,
            "category": proposal.category,
            "proposer": proposal.proposer,
            "status": proposal.status.value,
            "voting": {
                "start": _common.iso_timestamp(proposal.voting_start),
                "end": _common.iso_timestamp(proposal.voting_end),
                "time_remaining": max(0, proposal.voting_end - state.now()),
                "quorum_required": proposal.quorum_required,
            },
            "results": {
                "for": {
                    "votes": votes.for_votes,
                    "formatted": format_tokens(votes.for_votes),
                    "percentage": vote_percentage(votes.get("for"), total),
                },
                "against": {
                    "votes": votes.against_votes,
                    "formatted": format_tokens(votes.against_votes),
                    "percentage": vote_percentage(votes.get("against"), total),
                },
                "abstain": {
                    "votes": votes.abstain_votes,
                    "formatted": format_tokens(votes.abstain_votes),
                },
                "total_voters": len(state.get_votes(proposal_id)),
            },
            "actions": [a.to_dict() for a in proposal.actions],
            "execution_tx": proposal.execution_tx,
            "created_at": proposal.created_at,
        },
        context,
    )


def list_proposals(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """List proposals newest first, closing any whose voting has ended."""
    status = get_enum(arguments, "status", PROPOSAL_STATUSES)
    category = get_str(arguments, "category")
    proposer = get_str(arguments, "proposer")
    limit = get_int(arguments, "limit", minimum=1)

    state = _common.get_state()
    now = state.now()
    proposals = state.proposals.list()
    for proposal in proposals:
        if close_proposal_if_ended(proposal, now):
            state.proposals.save(proposal)

    predicates = []
    if status:
        predicates.append(status_is(status))
    if category:
        predicates.append(lambda p: p.category == category)
    if proposer:
        predicates.append(lambda p: same_wallet(p.proposer, proposer))

    proposals = sort_desc(select(proposals, predicates), key=lambda p: p.created_at)
    return success_response(
        [
            {
                "proposal_id": p.proposal_id,
                "title": p.title,
                "category": p.category,
                "status": p.status.value,
                "proposer": p.proposer,
                "voting_end": _common.iso_timestamp(p.voting_end),
                "for_votes": format_tokens(p.current_votes.for_votes),
                "against_votes": format_tokens(p.current_votes.against_votes),
                "total_voters": len(state.get_votes(p.proposal_id)),
            }
            for p in take(proposals, limit)
        ],
        context,
    )


def execute_proposal(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    proposal_id = get_str(arguments, "proposal_id", required=True)
    get_str(arguments, "caller_wallet", required=True)

    state = _common.get_state()
    proposal = _load_proposal(state, proposal_id)
    require_transition("proposal", PROPOSAL_TRANSITIONS, proposal.status, ProposalStatus.EXECUTED)

    proposal.status = ProposalStatus.EXECUTED
    proposal.execution_tx = _common.fake_tx_hash()
    state.proposals.save(proposal)
    logger.info("Proposal %s executed with %d actions", proposal_id, len(proposal.actions))

    return success_response(
        {
            "proposal_id": proposal_id,
            "status": proposal.status.value,
            "execution_tx": proposal.execution_tx,
            "actions_executed": len(proposal.actions),
            "message": "Proposal executed successfully",
        },
        context,
    )


def cancel_proposal(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    proposal_id = get_str(arguments, "proposal_id", required=True)
    caller = get_str(arguments, "caller_wallet", required=True)
    reason = get_str(arguments, "reason", allow_empty=True)

    state = _common.get_state()
    proposal = _load_proposal(state, proposal_id)
    if not same_wallet(proposal.proposer, caller):
        raise UnauthorizedError("Only proposer can cancel")
    require_status(
        "proposal",
        proposal.status,
        [ProposalStatus.PENDING, ProposalStatus.ACTIVE],
        code="CANNOT_CANCEL",
    )

    proposal.status = ProposalStatus.CANCELLED
    state.proposals.save(proposal)

    return success_response(
        {
            "proposal_id": proposal_id,
            "status": proposal.status.value,
            "reason": reason,
            "message": "Proposal cancelled",
        },
        context,
    )


def get_voting_power(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    wallet = get_str(arguments, "wallet_address", required=True)
    agent = _common.get_state().find_agent_by_wallet(wallet)
    power = voting_power(agent)

    return success_response(
        {
            "wallet_address": wallet,
            "voting_power": str(power.total),
            "voting_power_formatted": format_tokens(power.total),
            "breakdown": {
                "base": format_tokens(power.base),
                "reputation_bonus": format_tokens(power.reputation_bonus),
                "stake_bonus": format_tokens(power.stake_bonus),
            },
            "agent_registered": agent is not None,
            "agent_name": agent.name if agent else None,
        },
        context,
    )
