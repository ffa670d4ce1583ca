"""Status transition tables and lazy time-based transitions.

Handlers check preconditions with ``require_status``/``require_transition``
before mutating an entity. Time-based moves (proposal close, message expiry)
happen only when an entity is read, never in the background.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum

from .exceptions import InvalidStateError
from .models import (
    CollaborationStatus,
    EscrowStatus,
    Message,
    MessageStatus,
    Proposal,
    ProposalStatus,
    StepStatus,
    TaskStatus,
)

logger = logging.getLogger(__name__)

TransitionTable = Mapping[Enum, frozenset]

TASK_TRANSITIONS: TransitionTable = {
    TaskStatus.OPEN: frozenset({TaskStatus.ASSIGNED, TaskStatus.COMPLETED, TaskStatus.CANCELLED, TaskStatus.DISPUTED}),
    TaskStatus.ASSIGNED: frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED, TaskStatus.DISPUTED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.DISPUTED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.VALIDATED, TaskStatus.DISPUTED}),
    TaskStatus.VALIDATED: frozenset({TaskStatus.PAID}),
    TaskStatus.PAID: frozenset(),
    TaskStatus.DISPUTED: frozenset(),
    TaskStatus.CANCELLED: frozenset(),
}

ESCROW_TRANSITIONS: TransitionTable = {
    EscrowStatus.FUNDED: frozenset({EscrowStatus.RELEASED, EscrowStatus.REFUNDED, EscrowStatus.DISPUTED}),
    EscrowStatus.RELEASED: frozenset(),
    EscrowStatus.REFUNDED: frozenset(),
    EscrowStatus.DISPUTED: frozenset(),
}

PROPOSAL_TRANSITIONS: TransitionTable = {
    ProposalStatus.PENDING: frozenset({ProposalStatus.ACTIVE, ProposalStatus.CANCELLED}),
    ProposalStatus.ACTIVE: frozenset({ProposalStatus.SUCCEEDED, ProposalStatus.DEFEATED, ProposalStatus.CANCELLED}),
    ProposalStatus.SUCCEEDED: frozenset({ProposalStatus.EXECUTED}),
    ProposalStatus.DEFEATED: frozenset(),
    ProposalStatus.EXECUTED: frozenset(),
    ProposalStatus.CANCELLED: frozenset(),
}

COLLABORATION_TRANSITIONS: TransitionTable = {
    CollaborationStatus.PROPOSED: frozenset({CollaborationStatus.ACCEPTED, CollaborationStatus.CANCELLED}),
    CollaborationStatus.ACCEPTED: frozenset({CollaborationStatus.IN_PROGRESS, CollaborationStatus.CANCELLED}),
    CollaborationStatus.IN_PROGRESS: frozenset({CollaborationStatus.COMPLETED, CollaborationStatus.FAILED}),
    CollaborationStatus.COMPLETED: frozenset(),
    CollaborationStatus.FAILED: frozenset(),
    CollaborationStatus.CANCELLED: frozenset(),
}

STEP_TRANSITIONS: TransitionTable = {
    StepStatus.PENDING: frozenset({StepStatus.RUNNING}),
    StepStatus.RUNNING: frozenset({StepStatus.COMPLETED, StepStatus.FAILED}),
    StepStatus.COMPLETED: frozenset(),
    StepStatus.FAILED: frozenset(),
}

MESSAGE_TRANSITIONS: TransitionTable = {
    MessageStatus.SENT: frozenset({MessageStatus.DELIVERED, MessageStatus.READ, MessageStatus.RESPONDED, MessageStatus.EXPIRED}),
    MessageStatus.DELIVERED: frozenset({MessageStatus.READ, MessageStatus.RESPONDED, MessageStatus.EXPIRED}),
    MessageStatus.READ: frozenset({MessageStatus.RESPONDED}),
    MessageStatus.RESPONDED: frozenset(),
    MessageStatus.EXPIRED: frozenset(),
}


def can_transition(table: TransitionTable, current: Enum, target: Enum) -> bool:
    return target in table.get(current, frozenset())


def require_transition(
    kind: str,
    table: TransitionTable,
    current: Enum,
    target: Enum,
    code: str = "INVALID_STATUS",
) -> None:
    """Raise ``InvalidStateError`` unless ``current -> target`` is allowed."""
    if not can_transition(table, current, target):
        raise InvalidStateError(
            f"{kind.capitalize()} cannot move from {current.value} to {target.value}",
            code=code,
        )


def require_status(kind: str, current: Enum, allowed: Iterable[Enum], code: str = "INVALID_STATUS") -> None:
    """Raise ``InvalidStateError`` unless ``current`` is one of ``allowed``."""
    allowed = list(allowed)
    if current not in allowed:
        expected = ", ".join(s.value for s in allowed)
        raise InvalidStateError(
            f"{kind.capitalize()} is {current.value}, expected {expected}",
            code=code,
        )


# =============================================================================
# LAZY TRANSITIONS
# =============================================================================


def close_proposal_if_ended(proposal: Proposal, now: int) -> bool:
    """Close an active proposal whose voting window has passed.

    Succeeds when for-votes strictly exceed against-votes. Returns True if the
    status changed.
    """
    if proposal.status != ProposalStatus.ACTIVE or now < proposal.voting_end:
        return False
    votes = proposal.current_votes
    if votes.get("for") > votes.get("against"):
        proposal.status = ProposalStatus.SUCCEEDED
    else:
        proposal.status = ProposalStatus.DEFEATED
    logger.debug("Proposal %s closed as %s", proposal.proposal_id, proposal.status.value)
    return True


def expire_message_if_due(message: Message, now: int) -> bool:
    """Mark an unread message expired once ``now`` is past ``expires_at``."""
    if message.expires_at is None or now <= message.expires_at:
        return False
    if not can_transition(MESSAGE_TRANSITIONS, message.status, MessageStatus.EXPIRED):
        return False
    message.status = MessageStatus.EXPIRED
    return True
