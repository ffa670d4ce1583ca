"""Process-wide economy state: every entity store plus side tables.

Tool handlers reach the state through ``get_state()``; tests swap it out with
``reset_state()``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from ..core import defaults
from ..core.models import (
    Agent,
    Attestation,
    Collaboration,
    Escrow,
    Message,
    Proposal,
    Submission,
    Task,
    Vote,
    same_wallet,
)
from .backend import BackendRegistry, StorageBackend
from .store import EntityStore

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    """Wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class EconomyState:
    """All stores of one economy, sharing a backend type and a clock."""

    def __init__(self, backend: str | None = None, clock: Clock | None = None) -> None:
        self.backend_name = backend or defaults.STORAGE_BACKEND
        self.clock: Clock = clock or system_clock

        self.agents: EntityStore[Agent] = EntityStore(Agent, self._backend("agent"))
        self.tasks: EntityStore[Task] = EntityStore(Task, self._backend("task"))
        self.submissions: EntityStore[Submission] = EntityStore(Submission, self._backend("submission"))
        self.escrows: EntityStore[Escrow] = EntityStore(Escrow, self._backend("escrow"))
        self.attestations: EntityStore[Attestation] = EntityStore(Attestation, self._backend("attestation"))
        self.proposals: EntityStore[Proposal] = EntityStore(Proposal, self._backend("proposal"))
        self.collaborations: EntityStore[Collaboration] = EntityStore(Collaboration, self._backend("collaboration"))
        self.messages: EntityStore[Message] = EntityStore(Message, self._backend("message"))

        # proposal_id -> {lower-cased wallet: vote}
        self.votes = self._backend("vote")
        # agent_id -> {"message_ids": [...]}
        self.inboxes = self._backend("inbox")

        logger.debug("Economy state created with %s backend", self.backend_name)

    def _backend(self, kind: str) -> StorageBackend:
        return BackendRegistry.create(self.backend_name, kind)

    def now(self) -> int:
        return self.clock()

    # -------------------------------------------------------------------------
    # Agents
    # -------------------------------------------------------------------------

    def find_agent_by_wallet(self, wallet: str | None) -> Agent | None:
        if not wallet:
            return None
        return self.agents.find(lambda a: same_wallet(a.wallet_address, wallet))

    def resolve_agent(self, agent_id: str | None = None, wallet: str | None = None) -> Agent | None:
        """Look up an agent by id first, then by wallet address."""
        agent = self.agents.get(agent_id) if agent_id else None
        if agent is None and wallet:
            agent = self.find_agent_by_wallet(wallet)
        return agent

    # -------------------------------------------------------------------------
    # Votes
    # -------------------------------------------------------------------------

    def open_ballot(self, proposal_id: str) -> None:
        self.votes.put(proposal_id, {})

    def get_votes(self, proposal_id: str) -> dict[str, Vote]:
        ballot = self.votes.get(proposal_id) or {}
        return {wallet: Vote.from_dict(v) for wallet, v in ballot.items()}

    def has_voted(self, proposal_id: str, wallet: str) -> bool:
        return wallet.lower() in (self.votes.get(proposal_id) or {})

    def record_vote(self, proposal_id: str, wallet: str, vote: Vote) -> None:
        ballot: dict[str, Any] = self.votes.get(proposal_id) or {}
        ballot[wallet.lower()] = vote.to_dict()
        self.votes.put(proposal_id, ballot)

    # -------------------------------------------------------------------------
    # Inboxes
    # -------------------------------------------------------------------------

    def deliver(self, agent_id: str, message_id: str) -> None:
        inbox = self.inboxes.get(agent_id) or {"message_ids": []}
        inbox["message_ids"].append(message_id)
        self.inboxes.put(agent_id, inbox)

    def inbox(self, agent_id: str) -> list[Message]:
        inbox = self.inboxes.get(agent_id) or {"message_ids": []}
        messages = (self.messages.get(mid) for mid in inbox["message_ids"])
        return [m for m in messages if m is not None]


_state: EconomyState | None = None


def get_state() -> EconomyState:
    """Get the global economy state, creating it on first use."""
    global _state
    if _state is None:
        _state = EconomyState()
    return _state


def reset_state(state: EconomyState | None = None) -> EconomyState:
    """Replace the global economy state (fresh one by default)."""
    global _state
    _state = state if state is not None else EconomyState()
    return _state
