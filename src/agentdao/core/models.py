"""Entity models for the agent economy.

Every entity is a dataclass with ``to_dict``/``from_dict`` so storage backends
only ever hold plain JSON-like dicts. Amounts in wei are kept as decimal
strings and converted to ``int`` for arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from . import defaults

# =============================================================================
# ENUMS
# =============================================================================


class AgentStatus(Enum):
    """Lifecycle status of a registered agent."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"


class TaskStatus(Enum):
    """Task lifecycle. See ``lifecycle.TASK_TRANSITIONS`` for allowed moves."""

    OPEN = "open"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    VALIDATED = "validated"
    PAID = "paid"
    DISPUTED = "disputed"
    CANCELLED = "cancelled"


class SubmissionStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DISPUTED = "disputed"


class EscrowStatus(Enum):
    FUNDED = "funded"
    RELEASED = "released"
    REFUNDED = "refunded"
    DISPUTED = "disputed"


class ProposalStatus(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SUCCEEDED = "succeeded"
    DEFEATED = "defeated"
    EXECUTED = "executed"
    CANCELLED = "cancelled"


class CollaborationStatus(Enum):
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class StepStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class MessageStatus(Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    RESPONDED = "responded"
    EXPIRED = "expired"


CAPABILITY_CATEGORIES = [
    "analysis",
    "trading",
    "research",
    "content",
    "coding",
    "security",
    "data",
    "automation",
    "communication",
    "custom",
]

COLLABORATION_MODES = ["single", "parallel", "sequential", "consensus"]
VALIDATION_TYPES = ["automatic", "human", "consensus", "oracle"]
CONDITION_TYPES = ["validation", "deadline", "oracle", "multisig"]

ATTESTATION_CATEGORIES = [
    "task_quality",
    "communication",
    "timeliness",
    "collaboration",
    "technical_skill",
    "reliability",
]

PROPOSAL_CATEGORIES = [
    "parameter_change",
    "agent_suspension",
    "reward_distribution",
    "protocol_upgrade",
    "capability_standard",
    "fee_adjustment",
    "custom",
]

VOTE_CHOICES = ["for", "against", "abstain"]

# parallel and swarm dispatch every workflow step at once
COLLABORATION_TYPES = [
    "task_delegation",
    "knowledge_sharing",
    "consensus_building",
    "pipeline",
    "parallel",
    "swarm",
]
PARALLEL_COLLABORATION_TYPES = frozenset({"parallel", "swarm"})

MESSAGE_TYPES = [
    "capability_query",
    "task_proposal",
    "task_acceptance",
    "task_rejection",
    "collaboration_request",
    "collaboration_response",
    "result_delivery",
    "payment_request",
    "payment_confirmation",
    "reputation_attestation",
    "custom",
]


def same_wallet(a: str | None, b: str | None) -> bool:
    """Case-insensitive wallet address comparison."""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


# =============================================================================
# AGENTS
# =============================================================================


@dataclass
class Capability:
    """A priced skill an agent offers."""

    id: str
    name: str
    description: str = ""
    category: str = "custom"
    price_per_call: str = "0"
    input_schema: dict[str, Any] | None = None
    output_schema: dict[str, Any] | None = None

    @property
    def price(self) -> int:
        return int(self.price_per_call)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price_per_call": self.price_per_call,
            "input_schema": self.input_schema,
            "output_schema": self.output_schema,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Capability:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            category=data.get("category", "custom"),
            price_per_call=data.get("price_per_call", "0"),
            input_schema=data.get("input_schema"),
            output_schema=data.get("output_schema"),
        )


@dataclass
class Reputation:
    """Reputation block of an agent. ``score`` stays within [0, 1000]."""

    score: int = defaults.STARTING_REPUTATION
    total_tasks: int = 0
    successful_tasks: int = 0
    total_earnings: str = "0"
    total_stake: str = "0"
    attestations: int = 0
    last_updated: int = 0

    @property
    def success_rate(self) -> int:
        """Successful tasks as a rounded percentage."""
        if self.total_tasks <= 0:
            return 0
        from .economics import round_half_up

        return round_half_up(self.successful_tasks / self.total_tasks * 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "total_tasks": self.total_tasks,
            "successful_tasks": self.successful_tasks,
            "total_earnings": self.total_earnings,
            "total_stake": self.total_stake,
            "attestations": self.attestations,
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reputation:
        return cls(
            score=data.get("score", defaults.STARTING_REPUTATION),
            total_tasks=data.get("total_tasks", 0),
            successful_tasks=data.get("successful_tasks", 0),
            total_earnings=data.get("total_earnings", "0"),
            total_stake=data.get("total_stake", "0"),
            attestations=data.get("attestations", 0),
            last_updated=data.get("last_updated", 0),
        )


@dataclass
class Agent:
    """A registered AI agent."""

    kind: ClassVar[str] = "agent"

    agent_id: str
    wallet_address: str
    name: str
    description: str
    mcp_endpoint: str
    capabilities: list[Capability] = field(default_factory=list)
    reputation: Reputation = field(default_factory=Reputation)
    status: AgentStatus = AgentStatus.ACTIVE
    avatar: str | None = None
    website: str | None = None
    supported_protocols: list[str] = field(default_factory=lambda: list(defaults.SUPPORTED_PROTOCOLS))
    created_at: int = 0
    updated_at: int = 0

    @property
    def id(self) -> str:
        return self.agent_id

    @property
    def is_active(self) -> bool:
        return self.status == AgentStatus.ACTIVE

    def min_price(self) -> int | None:
        """Cheapest capability price, or None when the agent offers nothing."""
        if not self.capabilities:
            return None
        return min(c.price for c in self.capabilities)

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "wallet_address": self.wallet_address,
            "name": self.name,
            "description": self.description,
            "mcp_endpoint": self.mcp_endpoint,
            "capabilities": [c.to_dict() for c in self.capabilities],
            "reputation": self.reputation.to_dict(),
            "status": self.status.value,
            "avatar": self.avatar,
            "website": self.website,
            "supported_protocols": list(self.supported_protocols),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Agent:
        return cls(
            agent_id=data["agent_id"],
            wallet_address=data["wallet_address"],
            name=data["name"],
            description=data.get("description", ""),
            mcp_endpoint=data.get("mcp_endpoint", ""),
            capabilities=[Capability.from_dict(c) for c in data.get("capabilities", [])],
            reputation=Reputation.from_dict(data.get("reputation", {})),
            status=AgentStatus(data.get("status", "active")),
            avatar=data.get("avatar"),
            website=data.get("website"),
            supported_protocols=list(data.get("supported_protocols", defaults.SUPPORTED_PROTOCOLS)),
            created_at=data.get("created_at", 0),
            updated_at=data.get("updated_at", 0),
        )


# =============================================================================
# TASKS
# =============================================================================


@dataclass
class ValidationCriteria:
    type: str = "automatic"
    validators: list[str] | None = None
    consensus_threshold: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "validators": self.validators,
            "consensus_threshold": self.consensus_threshold,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationCriteria:
        return cls(
            type=data.get("type", "automatic"),
            validators=data.get("validators"),
            consensus_threshold=data.get("consensus_threshold"),
        )


@dataclass
class Task:
    """A unit of paid work in the marketplace."""

    kind: ClassVar[str] = "task"

    task_id: str
    title: str
    description: str
    reward: str
    deadline: int
    creator: str
    required_capabilities: list[str] = field(default_factory=list)
    input_data: dict[str, Any] = field(default_factory=dict)
    expected_output: dict[str, Any] | None = None
    max_agents: int = defaults.DEFAULT_MAX_AGENTS
    collaboration_type: str = "single"
    validation_criteria: ValidationCriteria = field(default_factory=ValidationCriteria)
    status: TaskStatus = TaskStatus.OPEN
    assigned_agents: list[str] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0

    @property
    def id(self) -> str:
        return self.task_id

    @property
    def is_full(self) -> bool:
        return len(self.assigned_agents) >= self.max_agents

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "title": self.title,
            "description": self.description,
            "reward": self.reward,
            "deadline": self.deadline,
            "creator": self.creator,
            "required_capabilities": list(self.required_capabilities),
            "input_data": self.input_data,
            "expected_output": self.expected_output,
            "max_agents": self.max_agents,
            "collaboration_type": self.collaboration_type,
            "validation_criteria": self.validation_criteria.to_dict(),
            "status": self.status.value,
            "assigned_agents": list(self.assigned_agents),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        return cls(
            task_id=data["task_id"],
            title=data["title"],
            description=data.get("description", ""),
            reward=data.get("reward", "0"),
            deadline=data["deadline"],
            creator=data["creator"],
            required_capabilities=list(data.get("required_capabilities", [])),
            input_data=data.get("input_data", {}),
            expected_output=data.get("expected_output"),
            max_agents=data.get("max_agents", defaults.DEFAULT_MAX_AGENTS),
            collaboration_type=data.get("collaboration_type", "single"),
            validation_criteria=ValidationCriteria.from_dict(data.get("validation_criteria", {})),
            status=TaskStatus(data.get("status", "open")),
            assigned_agents=list(data.get("assigned_agents", [])),
            created_at=data.get("created_at", 0),
            updated_at=data.get("updated_at", 0),
        )


@dataclass
class ValidatorAttestation:
    validator: str
    approved: bool
    signature: str
    timestamp: int
    feedback: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "validator": self.validator,
            "approved": self.approved,
            "signature": self.signature,
            "timestamp": self.timestamp,
            "feedback": self.feedback,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidatorAttestation:
        return cls(
            validator=data["validator"],
            approved=data["approved"],
            signature=data["signature"],
            timestamp=data["timestamp"],
            feedback=data.get("feedback"),
        )


@dataclass
class Submission:
    """A result submitted by an assigned agent for validation."""

    kind: ClassVar[str] = "submission"

    submission_id: str
    task_id: str
    agent_id: str
    output: dict[str, Any]
    artifact_hash: str
    timestamp: int
    compute_proof: str | None = None
    validation_status: SubmissionStatus = SubmissionStatus.PENDING
    validator_attestations: list[ValidatorAttestation] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.submission_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "submission_id": self.submission_id,
            "task_id": self.task_id,
            "agent_id": self.agent_id,
            "output": self.output,
            "artifact_hash": self.artifact_hash,
            "timestamp": self.timestamp,
            "compute_proof": self.compute_proof,
            "validation_status": self.validation_status.value,
            "validator_attestations": [v.to_dict() for v in self.validator_attestations],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Submission:
        return cls(
            submission_id=data["submission_id"],
            task_id=data["task_id"],
            agent_id=data["agent_id"],
            output=data.get("output", {}),
            artifact_hash=data["artifact_hash"],
            timestamp=data["timestamp"],
            compute_proof=data.get("compute_proof"),
            validation_status=SubmissionStatus(data.get("validation_status", "pending")),
            validator_attestations=[ValidatorAttestation.from_dict(v) for v in data.get("validator_attestations", [])],
        )


# =============================================================================
# ESCROW
# =============================================================================


@dataclass
class Beneficiary:
    address: str
    share: int

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "share": self.share}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Beneficiary:
        return cls(address=data["address"], share=data["share"])


@dataclass
class ReleaseCondition:
    type: str
    parameters: dict[str, Any] = field(default_factory=dict)
    met: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "parameters": self.parameters, "met": self.met}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReleaseCondition:
        return cls(type=data["type"], parameters=data.get("parameters", {}), met=data.get("met", False))


@dataclass
class Escrow:
    """Funds locked for a task until every release condition is met."""

    kind: ClassVar[str] = "escrow"

    escrow_id: str
    task_id: str
    depositor: str
    amount: str
    beneficiaries: list[Beneficiary] = field(default_factory=list)
    release_conditions: list[ReleaseCondition] = field(default_factory=list)
    token: str = defaults.ZERO_ADDRESS
    status: EscrowStatus = EscrowStatus.FUNDED
    deposit_tx: str = ""
    release_tx: str | None = None
    dispute: dict[str, Any] | None = None
    created_at: int = 0
    updated_at: int = 0

    @property
    def id(self) -> str:
        return self.escrow_id

    @property
    def conditions_met(self) -> int:
        return sum(1 for c in self.release_conditions if c.met)

    @property
    def all_conditions_met(self) -> bool:
        return all(c.met for c in self.release_conditions)

    def involves(self, wallet: str) -> bool:
        """True if ``wallet`` is the depositor or a beneficiary."""
        return same_wallet(self.depositor, wallet) or any(same_wallet(b.address, wallet) for b in self.beneficiaries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "escrow_id": self.escrow_id,
            "task_id": self.task_id,
            "depositor": self.depositor,
            "amount": self.amount,
            "beneficiaries": [b.to_dict() for b in self.beneficiaries],
            "release_conditions": [c.to_dict() for c in self.release_conditions],
            "token": self.token,
            "status": self.status.value,
            "deposit_tx": self.deposit_tx,
            "release_tx": self.release_tx,
            "dispute": self.dispute,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Escrow:
        return cls(
            escrow_id=data["escrow_id"],
            task_id=data["task_id"],
            depositor=data["depositor"],
            amount=data["amount"],
            beneficiaries=[Beneficiary.from_dict(b) for b in data.get("beneficiaries", [])],
            release_conditions=[ReleaseCondition.from_dict(c) for c in data.get("release_conditions", [])],
            token=data.get("token", defaults.ZERO_ADDRESS),
            status=EscrowStatus(data.get("status", "funded")),
            deposit_tx=data.get("deposit_tx", ""),
            release_tx=data.get("release_tx"),
            dispute=data.get("dispute"),
            created_at=data.get("created_at", 0),
            updated_at=data.get("updated_at", 0),
        )


# =============================================================================
# REPUTATION
# =============================================================================


@dataclass
class Attestation:
    """A peer rating. Immutable once stored."""

    kind: ClassVar[str] = "attestation"

    attestation_id: str
    attestor: str
    subject: str
    rating: int
    category: str
    transaction_hash: str
    block_number: int
    timestamp: int
    signature: str
    task_id: str | None = None
    comment: str | None = None

    @property
    def id(self) -> str:
        return self.attestation_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "attestation_id": self.attestation_id,
            "attestor": self.attestor,
            "subject": self.subject,
            "task_id": self.task_id,
            "rating": self.rating,
            "category": self.category,
            "comment": self.comment,
            "transaction_hash": self.transaction_hash,
            "block_number": self.block_number,
            "timestamp": self.timestamp,
            "signature": self.signature,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attestation:
        return cls(
            attestation_id=data["attestation_id"],
            attestor=data["attestor"],
            subject=data["subject"],
            rating=data["rating"],
            category=data["category"],
            transaction_hash=data["transaction_hash"],
            block_number=data["block_number"],
            timestamp=data["timestamp"],
            signature=data["signature"],
            task_id=data.get("task_id"),
            comment=data.get("comment"),
        )


# =============================================================================
# GOVERNANCE
# =============================================================================


@dataclass
class ProposalAction:
    target: str
    calldata: str = "0x"
    value: str = "0"

    def to_dict(self) -> dict[str, Any]:
        return {"target": self.target, "calldata": self.calldata, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProposalAction:
        return cls(target=data["target"], calldata=data.get("calldata", "0x"), value=data.get("value", "0"))


@dataclass
class VoteTally:
    """Weighted vote totals in wei, stored as decimal strings."""

    for_votes: str = "0"
    against_votes: str = "0"
    abstain_votes: str = "0"

    def get(self, choice: str) -> int:
        return int(getattr(self, f"{choice}_votes"))

    def add(self, choice: str, weight: int) -> None:
        setattr(self, f"{choice}_votes", str(self.get(choice) + weight))

    @property
    def total(self) -> int:
        return self.get("for") + self.get("against") + self.get("abstain")

    def to_dict(self) -> dict[str, Any]:
        return {"for": self.for_votes, "against": self.against_votes, "abstain": self.abstain_votes}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoteTally:
        return cls(
            for_votes=data.get("for", "0"),
            against_votes=data.get("against", "0"),
            abstain_votes=data.get("abstain", "0"),
        )


@dataclass
class Proposal:
    """A governance proposal with a fixed voting window [voting_start, voting_end)."""

    kind: ClassVar[str] = "proposal"

    proposal_id: str
    proposer: str
    title: str
    description: str
    category: str
    voting_start: int
    voting_end: int
    quorum_required: int = defaults.DEFAULT_QUORUM
    actions: list[ProposalAction] = field(default_factory=list)
    current_votes: VoteTally = field(default_factory=VoteTally)
    status: ProposalStatus = ProposalStatus.ACTIVE
    execution_tx: str | None = None
    created_at: int = 0

    @property
    def id(self) -> str:
        return self.proposal_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "proposer": self.proposer,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "voting_start": self.voting_start,
            "voting_end": self.voting_end,
            "quorum_required": self.quorum_required,
            "actions": [a.to_dict() for a in self.actions],
            "current_votes": self.current_votes.to_dict(),
            "status": self.status.value,
            "execution_tx": self.execution_tx,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Proposal:
        return cls(
            proposal_id=data["proposal_id"],
            proposer=data["proposer"],
            title=data["title"],
            description=data.get("description", ""),
            category=data["category"],
            voting_start=data["voting_start"],
            voting_end=data["voting_end"],
            quorum_required=data.get("quorum_required", defaults.DEFAULT_QUORUM),
            actions=[ProposalAction.from_dict(a) for a in data.get("actions", [])],
            current_votes=VoteTally.from_dict(data.get("current_votes", {})),
            status=ProposalStatus(data.get("status", "active")),
            execution_tx=data.get("execution_tx"),
            created_at=data.get("created_at", 0),
        )


@dataclass
class Vote:
    vote: str
    weight: str
    timestamp: int
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"vote": self.vote, "weight": self.weight, "timestamp": self.timestamp, "reason": self.reason}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Vote:
        return cls(vote=data["vote"], weight=data["weight"], timestamp=data["timestamp"], reason=data.get("reason"))


# =============================================================================
# COLLABORATION
# =============================================================================


@dataclass
class WorkflowStep:
    step_id: str
    agent_id: str
    action: str
    inputs: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] | None = None
    status: StepStatus = StepStatus.PENDING
    started_at: int | None = None
    completed_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_id": self.step_id,
            "agent_id": self.agent_id,
            "action": self.action,
            "inputs": self.inputs,
            "outputs": self.outputs,
            "status": self.status.value,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkflowStep:
        return cls(
            step_id=data["step_id"],
            agent_id=data["agent_id"],
            action=data["action"],
            inputs=data.get("inputs", {}),
            outputs=data.get("outputs"),
            status=StepStatus(data.get("status", "pending")),
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
        )


@dataclass
class Collaboration:
    """A multi-agent workflow between an initiator and participants."""

    kind: ClassVar[str] = "collaboration"

    collaboration_id: str
    initiator_agent_id: str
    participant_agent_ids: list[str]
    type: str
    status: CollaborationStatus = CollaborationStatus.PROPOSED
    workflow: list[WorkflowStep] = field(default_factory=list)
    shared_context: dict[str, Any] = field(default_factory=dict)
    reward_split: list[dict[str, Any]] | None = None
    task_id: str | None = None
    created_at: int = 0
    updated_at: int = 0

    @property
    def id(self) -> str:
        return self.collaboration_id

    @property
    def is_parallel(self) -> bool:
        return self.type in PARALLEL_COLLABORATION_TYPES

    def involves(self, agent_id: str) -> bool:
        return self.initiator_agent_id == agent_id or agent_id in self.participant_agent_ids

    def step_index(self, step_id: str) -> int | None:
        for index, step in enumerate(self.workflow):
            if step.step_id == step_id:
                return index
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "collaboration_id": self.collaboration_id,
            "initiator_agent_id": self.initiator_agent_id,
            "participant_agent_ids": list(self.participant_agent_ids),
            "type": self.type,
            "status": self.status.value,
            "workflow": [s.to_dict() for s in self.workflow],
            "shared_context": self.shared_context,
            "reward_split": self.reward_split,
            "task_id": self.task_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Collaboration:
        return cls(
            collaboration_id=data["collaboration_id"],
            initiator_agent_id=data["initiator_agent_id"],
            participant_agent_ids=list(data.get("participant_agent_ids", [])),
            type=data["type"],
            status=CollaborationStatus(data.get("status", "proposed")),
            workflow=[WorkflowStep.from_dict(s) for s in data.get("workflow", [])],
            shared_context=data.get("shared_context", {}),
            reward_split=data.get("reward_split"),
            task_id=data.get("task_id"),
            created_at=data.get("created_at", 0),
            updated_at=data.get("updated_at", 0),
        )


# =============================================================================
# MESSAGING
# =============================================================================


@dataclass
class Message:
    """A signed (fabricated signature) message between two agents."""

    kind: ClassVar[str] = "message"

    message_id: str
    from_agent: str
    to_agent: str
    type: str
    payload: dict[str, Any]
    signature: str
    timestamp: int
    expires_at: int | None = None
    in_reply_to: str | None = None
    status: MessageStatus = MessageStatus.SENT

    @property
    def id(self) -> str:
        return self.message_id

    @property
    def is_unread(self) -> bool:
        return self.status in (MessageStatus.SENT, MessageStatus.DELIVERED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_id": self.message_id,
            "from_agent": self.from_agent,
            "to_agent": self.to_agent,
            "type": self.type,
            "payload": self.payload,
            "signature": self.signature,
            "timestamp": self.timestamp,
            "expires_at": self.expires_at,
            "in_reply_to": self.in_reply_to,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(
            message_id=data["message_id"],
            from_agent=data["from_agent"],
            to_agent=data["to_agent"],
            type=data["type"],
            payload=data.get("payload", {}),
            signature=data["signature"],
            timestamp=data["timestamp"],
            expires_at=data.get("expires_at"),
            in_reply_to=data.get("in_reply_to"),
            status=MessageStatus(data.get("status", "sent")),
        )
