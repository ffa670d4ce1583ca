"""Task marketplace tool implementations.

Functions:
    create_task, list_tasks, get_task_details, bid_on_task,
    submit_task_result, validate_submission, cancel_task
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core import defaults
from ..core.exceptions import ConflictError, InvalidStateError, UnauthorizedError
from ..core.lifecycle import TASK_TRANSITIONS, can_transition, require_status, require_transition
from ..core.models import (
    COLLABORATION_MODES,
    VALIDATION_TYPES,
    Submission,
    SubmissionStatus,
    Task,
    TaskStatus,
    ValidationCriteria,
    ValidatorAttestation,
    same_wallet,
)
from ..core.query import paginate, requires_any_capability, reward_between, select, sort_desc, status_is
from ..core.responses import ToolContext, success_response
from ..core.validation import (
    get_amount,
    get_bool,
    get_dict,
    get_enum,
    get_int,
    get_list,
    get_number,
    get_str,
)
from ..storage.store import generate_id
from . import _common
from ._common import logger

# Latest millisecond timestamp that still renders as a calendar date
MAX_TIMESTAMP_MS = 253402300799999

TASK_STATUSES = [s.value for s in TaskStatus]


@dataclass
class CreateTaskRequest:
    title: str
    description: str
    reward: str
    deadline: int
    creator_wallet: str
    required_capabilities: list[str] = field(default_factory=list)
    input_data: dict[str, Any] = field(default_factory=dict)
    expected_output: dict[str, Any] | None = None
    collaboration_type: str = "single"
    max_agents: int = defaults.DEFAULT_MAX_AGENTS
    validation_type: str = "automatic"
    validators: list[str] | None = None
    consensus_threshold: float | None = None

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> CreateTaskRequest:
        return cls(
            title=get_str(args, "title", required=True),
            description=get_str(args, "description", required=True, allow_empty=True),
            reward=get_amount(args, "reward", required=True),
            deadline=get_int(args, "deadline", required=True, minimum=0, maximum=MAX_TIMESTAMP_MS),
            creator_wallet=get_str(args, "creator_wallet", required=True),
            required_capabilities=get_list(args, "required_capabilities", default=[], item_type=str),
            input_data=get_dict(args, "input_data", default={}),
            expected_output=get_dict(args, "expected_output"),
            collaboration_type=get_enum(args, "collaboration_type", COLLABORATION_MODES, default="single"),
            max_agents=get_int(
                args,
                "max_agents",
                default=defaults.DEFAULT_MAX_AGENTS,
                minimum=1,
                maximum=defaults.MAX_AGENTS_LIMIT,
            ),
            validation_type=get_enum(args, "validation_type", VALIDATION_TYPES, default="automatic"),
            validators=get_list(args, "validators", item_type=str),
            consensus_threshold=get_number(args, "consensus_threshold", minimum=0, maximum=1),
        )


@dataclass
class ListTasksRequest:
    status: str | None = None
    capabilities: list[str] = field(default_factory=list)
    min_reward: str | None = None
    max_reward: str | None = None
    limit: int = defaults.DEFAULT_LIST_LIMIT
    offset: int = 0

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> ListTasksRequest:
        return cls(
            status=get_enum(args, "status", TASK_STATUSES),
            capabilities=get_list(args, "capabilities", default=[], item_type=str),
            min_reward=get_amount(args, "min_reward"),
            max_reward=get_amount(args, "max_reward"),
            limit=get_int(args, "limit", default=defaults.DEFAULT_LIST_LIMIT, minimum=1),
            offset=get_int(args, "offset", default=0, minimum=0),
        )


@dataclass
class SubmitResultRequest:
    task_id: str
    agent_id: str
    output: dict[str, Any]
    artifact_hash: str | None = None
    compute_proof: str | None = None

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> SubmitResultRequest:
        return cls(
            task_id=get_str(args, "task_id", required=True),
            agent_id=get_str(args, "agent_id", required=True),
            output=get_dict(args, "output", required=True),
            artifact_hash=get_str(args, "artifact_hash"),
            compute_proof=get_str(args, "compute_proof"),
        )


def create_task(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Post a new open task to the marketplace."""
    req = CreateTaskRequest.from_arguments(arguments)
    state = _common.get_state()
    now = state.now()

    task = Task(
        task_id=generate_id(),
        title=req.title,
        description=req.description,
        reward=req.reward,
        deadline=req.deadline,
        creator=req.creator_wallet,
        required_capabilities=req.required_capabilities,
        input_data=req.input_data,
        expected_output=req.expected_output,
        max_agents=req.max_agents,
        collaboration_type=req.collaboration_type,
        validation_criteria=ValidationCriteria(
            type=req.validation_type,
            validators=req.validators,
            consensus_threshold=req.consensus_threshold,
        ),
        created_at=now,
        updated_at=now,
    )
    state.tasks.create(task)
    logger.info("Created task %s with reward %s", task.task_id, task.reward)

    return success_response(
        {
            "task_id": task.task_id,
            "title": task.title,
            "reward": task.reward,
            "deadline": _common.iso_timestamp(task.deadline),
            "status": task.status.value,
            "escrow_address": "0x" + task.task_id.encode().hex()[:40],
            "message": "Task created successfully. Reward held in escrow.",
        },
        context,
    )


def list_tasks(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """List tasks by reward, highest first, with offset pagination."""
    req = ListTasksRequest.from_arguments(arguments)
    state = _common.get_state()

    predicates = []
    if req.status:
        predicates.append(status_is(req.status))
    if req.capabilities:
        predicates.append(requires_any_capability(req.capabilities))
    if req.min_reward is not None or req.max_reward is not None:
        predicates.append(
            reward_between(
                int(req.min_reward) if req.min_reward is not None else None,
                int(req.max_reward) if req.max_reward is not None else None,
            )
        )

    tasks = sort_desc(select(state.tasks.list(), predicates), key=lambda t: int(t.reward))
    page = paginate(tasks, req.limit, req.offset)

    return success_response(
        [
            {
                "task_id": t.task_id,
                "title": t.title,
                "description": _common.summarize(t.description),
                "reward": t.reward,
                "deadline": _common.iso_timestamp(t.deadline),
                "status": t.status.value,
                "required_capabilities": t.required_capabilities,
                "assigned_agents": len(t.assigned_agents),
                "max_agents": t.max_agents,
            }
            for t in page.items
        ],
        context,
        pagination=page.pagination(),
    )


def get_task_details(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    task_id = get_str(arguments, "task_id", required=True)
    state = _common.get_state()
    task = state.tasks.require(task_id)

    submissions = [s for s in state.submissions.list() if s.task_id == task_id]
    data = task.to_dict()
    data["submissions"] = [
        {
            "submission_id": s.submission_id,
            "agent_id": s.agent_id,
            "status": s.validation_status.value,
            "timestamp": s.timestamp,
        }
        for s in submissions
    ]
    return success_response(data, context)


def bid_on_task(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Assign the bidding agent to an open task.

    The task becomes ``assigned`` once ``max_agents`` agents have bid.
    """
    task_id = get_str(arguments, "task_id", required=True)
    agent_id = get_str(arguments, "agent_id", required=True)
    proposed_price = get_amount(arguments, "proposed_price")
    estimated_time = get_int(arguments, "estimated_completion_time", minimum=0)
    get_str(arguments, "message", allow_empty=True)

    state = _common.get_state()
    task = state.tasks.require(task_id)

    # a filled task reads as full rather than merely not open
    if task.is_full and task.status in (TaskStatus.OPEN, TaskStatus.ASSIGNED):
        raise InvalidStateError("Maximum number of agents already assigned", code="TASK_FULL")
    require_status("task", task.status, [TaskStatus.OPEN], code="TASK_NOT_OPEN")
    if agent_id in task.assigned_agents:
        raise ConflictError("Agent is already assigned to this task", code="ALREADY_ASSIGNED")

    # check-then-append is not atomic; safe only on a single-threaded loop
    task.assigned_agents.append(agent_id)
    if task.is_full:
        require_transition("task", TASK_TRANSITIONS, task.status, TaskStatus.ASSIGNED)
        task.status = TaskStatus.ASSIGNED
    task.updated_at = state.now()
    state.tasks.save(task)
    logger.info("Agent %s assigned to task %s (%d/%d)", agent_id, task_id, len(task.assigned_agents), task.max_agents)

    return success_response(
        {
            "task_id": task_id,
            "agent_id": agent_id,
            "status": "assigned",
            "task_status": task.status.value,
            "proposed_price": proposed_price,
            "estimated_completion_time": estimated_time,
            "message": "Bid accepted. You are now assigned to this task.",
        },
        context,
    )


def submit_task_result(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Record an assigned agent's result and mark the task completed."""
    req = SubmitResultRequest.from_arguments(arguments)
    state = _common.get_state()
    task = state.tasks.require(req.task_id)

    if req.agent_id not in task.assigned_agents:
        raise UnauthorizedError("Agent is not assigned to this task", code="NOT_ASSIGNED")
    # further agents on a multi-agent task may submit after the first
    if task.status != TaskStatus.COMPLETED:
        require_transition("task", TASK_TRANSITIONS, task.status, TaskStatus.COMPLETED)

    now = state.now()
    submission = Submission(
        submission_id=generate_id(),
        task_id=req.task_id,
        agent_id=req.agent_id,
        output=req.output,
        artifact_hash=req.artifact_hash or f"ipfs://{_common.fake_ipfs_hash()}",
        compute_proof=req.compute_proof,
        timestamp=now,
    )
    state.submissions.create(submission)

    task.status = TaskStatus.COMPLETED
    task.updated_at = now
    state.tasks.save(task)

    return success_response(
        {
            "submission_id": submission.submission_id,
            "task_id": req.task_id,
            "agent_id": req.agent_id,
            "artifact_hash": submission.artifact_hash,
            "status": "pending_validation",
            "message": "Result submitted. Awaiting validation.",
        },
        context,
    )


def validate_submission(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Approve or reject a submission; approval validates its task."""
    submission_id = get_str(arguments, "submission_id", required=True)
    validator = get_str(arguments, "validator_address", required=True)
    approved = get_bool(arguments, "approved", required=True)
    feedback = get_str(arguments, "feedback", allow_empty=True)

    state = _common.get_state()
    submission = state.submissions.require(submission_id)
    now = state.now()

    attestation = ValidatorAttestation(
        validator=validator,
        approved=approved,
        signature=_common.fake_signature(),
        timestamp=now,
        feedback=feedback,
    )
    submission.validator_attestations.append(attestation)
    submission.validation_status = SubmissionStatus.APPROVED if approved else SubmissionStatus.REJECTED
    state.submissions.save(submission)

    task = state.tasks.get(submission.task_id)
    if task is not None and approved:
        if can_transition(TASK_TRANSITIONS, task.status, TaskStatus.VALIDATED):
            task.status = TaskStatus.VALIDATED
            task.updated_at = now
            state.tasks.save(task)
        else:
            logger.warning("Task %s is %s; approval did not validate it", task.task_id, task.status.value)

    return success_response(
        {
            "submission_id": submission_id,
            "approved": approved,
            "attestation_signature": attestation.signature,
            "message": (
                "Submission validated. Payment can be released."
                if approved
                else "Submission rejected. Agent may dispute or resubmit."
            ),
        },
        context,
    )


def cancel_task(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    task_id = get_str(arguments, "task_id", required=True)
    creator_wallet = get_str(arguments, "creator_wallet", required=True)
    reason = get_str(arguments, "reason", allow_empty=True)

    state = _common.get_state()
    task = state.tasks.require(task_id)

    if not same_wallet(task.creator, creator_wallet):
        raise UnauthorizedError("Only the task creator can cancel")
    if not can_transition(TASK_TRANSITIONS, task.status, TaskStatus.CANCELLED):
        raise InvalidStateError("Task cannot be cancelled in its current state", code="CANNOT_CANCEL")

    task.status = TaskStatus.CANCELLED
    task.updated_at = state.now()
    state.tasks.save(task)
    logger.info("Task %s cancelled%s", task_id, f": {reason}" if reason else "")

    return success_response(
        {
            "task_id": task_id,
            "status": task.status.value,
            "refund_amount": task.reward,
            "refund_tx": _common.fake_tx_hash(),
            "message": "Task cancelled. Reward refunded.",
        },
        context,
    )
