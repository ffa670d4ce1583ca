"""Multi-agent collaboration tool implementations.

Functions:
    propose_collaboration, respond_to_collaboration, start_workflow,
    complete_workflow_step, get_collaboration_status,
    list_agent_collaborations, delegate_subtask

Sequential workflows run one step at a time and hand each step's outputs to
the next step as ``previous_step_outputs``. ``parallel`` and ``swarm``
collaborations start every step together and finish when all have completed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core import defaults
from ..core.economics import round_half_up
from ..core.exceptions import InvalidStateError, MembershipError, NotFoundError, UnauthorizedError, ValidationException
from ..core.lifecycle import COLLABORATION_TRANSITIONS, STEP_TRANSITIONS, require_transition
from ..core.models import (
    COLLABORATION_TYPES,
    Collaboration,
    CollaborationStatus,
    StepStatus,
    WorkflowStep,
)
from ..core.query import select, status_is
from ..core.responses import ToolContext, success_response
from ..core.validation import get_bool, get_dict, get_enum, get_int, get_list, get_number, get_str
from ..storage.store import generate_id
from . import _common
from ._common import logger

COLLABORATION_STATUSES = [s.value for s in CollaborationStatus]


def _parse_workflow(raw: list[Any], members: set[str]) -> list[WorkflowStep]:
    steps = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationException(f"workflow[{i}] must be an object", field="workflow")
        agent_id = get_str(item, "agent_id", required=True)
        if agent_id not in members:
            raise ValidationException(f"workflow[{i}] agent {agent_id} is not part of the collaboration", field="workflow")
        steps.append(
            WorkflowStep(
                step_id=generate_id(),
                agent_id=agent_id,
                action=get_str(item, "action", required=True),
                inputs=get_dict(item, "inputs", default={}),
            )
        )
    return steps


def _parse_reward_split(raw: list[Any] | None) -> list[dict[str, Any]] | None:
    if raw is None:
        return None
    split = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationException(f"reward_split[{i}] must be an object", field="reward_split")
        split.append(
            {
                "agent_id": get_str(item, "agent_id", required=True),
                "percentage": get_number(item, "percentage", required=True, minimum=0, maximum=100),
            }
        )
    return split


@dataclass
class ProposeCollaborationRequest:
    initiator_agent_id: str
    participant_agent_ids: list[str]
    type: str
    workflow: list[WorkflowStep] = field(default_factory=list)
    shared_context: dict[str, Any] = field(default_factory=dict)
    reward_split: list[dict[str, Any]] | None = None
    task_id: str | None = None

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> ProposeCollaborationRequest:
        initiator = get_str(args, "initiator_agent_id", required=True)
        participants = get_list(args, "participant_agent_ids", required=True, item_type=str)
        if not participants:
            raise ValidationException("participant_agent_ids must not be empty", field="participant_agent_ids")
        members = {initiator, *participants}
        return cls(
            initiator_agent_id=initiator,
            participant_agent_ids=participants,
            type=get_enum(args, "type", COLLABORATION_TYPES, required=True),
            workflow=_parse_workflow(get_list(args, "workflow", default=[]), members),
            shared_context=get_dict(args, "shared_context", default={}),
            reward_split=_parse_reward_split(get_list(args, "reward_split")),
            task_id=get_str(args, "task_id"),
        )


def _start_step(step: WorkflowStep, now: int) -> None:
    require_transition("workflow step", STEP_TRANSITIONS, step.status, StepStatus.RUNNING)
    step.status = StepStatus.RUNNING
    step.started_at = now


def _finish(collab: Collaboration) -> None:
    require_transition("collaboration", COLLABORATION_TRANSITIONS, collab.status, CollaborationStatus.COMPLETED)
    collab.status = CollaborationStatus.COMPLETED


def propose_collaboration(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    req = ProposeCollaborationRequest.from_arguments(arguments)
    state = _common.get_state()
    now = state.now()

    collab = Collaboration(
        collaboration_id=generate_id(),
        initiator_agent_id=req.initiator_agent_id,
        participant_agent_ids=req.participant_agent_ids,
        type=req.type,
        workflow=req.workflow,
        shared_context=req.shared_context,
        reward_split=req.reward_split,
        task_id=req.task_id,
        created_at=now,
        updated_at=now,
    )
    state.collaborations.create(collab)
    logger.info("Collaboration %s proposed by %s", collab.collaboration_id, collab.initiator_agent_id)

    return success_response(
        {
            "collaboration_id": collab.collaboration_id,
            "type": collab.type,
            "participants": len(collab.participant_agent_ids) + 1,
            "workflow_steps": len(collab.workflow),
            "status": collab.status.value,
            "message": "Collaboration proposed. Waiting for participant acceptance.",
        },
        context,
    )


def respond_to_collaboration(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Accept or reject a proposed collaboration as one of its participants."""
    collaboration_id = get_str(arguments, "collaboration_id", required=True)
    agent_id = get_str(arguments, "agent_id", required=True)
    accept = get_bool(arguments, "accept", required=True)
    get_str(arguments, "message", allow_empty=True)

    state = _common.get_state()
    collab = state.collaborations.require(collaboration_id)
    if agent_id not in collab.participant_agent_ids:
        raise MembershipError("Agent is not a participant in this collaboration")

    if accept:
        # later participants accepting an already accepted proposal is a no-op
        if collab.status != CollaborationStatus.ACCEPTED:
            require_transition("collaboration", COLLABORATION_TRANSITIONS, collab.status, CollaborationStatus.ACCEPTED)
            collab.status = CollaborationStatus.ACCEPTED
        message = "Collaboration accepted. Ready to start workflow."
    else:
        require_transition("collaboration", COLLABORATION_TRANSITIONS, collab.status, CollaborationStatus.CANCELLED)
        collab.status = CollaborationStatus.CANCELLED
        message = "Collaboration rejected."

    collab.updated_at = state.now()
    state.collaborations.save(collab)

    return success_response(
        {"collaboration_id": collaboration_id, "status": collab.status.value, "message": message},
        context,
    )


def start_workflow(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    collaboration_id = get_str(arguments, "collaboration_id", required=True)
    agent_id = get_str(arguments, "agent_id", required=True)

    state = _common.get_state()
    collab = state.collaborations.require(collaboration_id)
    if collab.initiator_agent_id != agent_id:
        raise UnauthorizedError("Only the initiator can start the workflow", code="NOT_INITIATOR")
    if collab.status != CollaborationStatus.ACCEPTED:
        raise InvalidStateError("Collaboration must be accepted before starting", code="NOT_ACCEPTED")

    now = state.now()
    collab.status = CollaborationStatus.IN_PROGRESS
    started = collab.workflow if collab.is_parallel else collab.workflow[:1]
    for step in started:
        _start_step(step, now)
    collab.updated_at = now
    state.collaborations.save(collab)

    first = started[0] if started else None
    return success_response(
        {
            "collaboration_id": collaboration_id,
            "status": collab.status.value,
            "current_step": first.step_id if first else None,
            "current_agent": first.agent_id if first else None,
            "running_steps": [s.step_id for s in started],
            "message": (
                "Workflow started. All steps are now running."
                if collab.is_parallel
                else "Workflow started. First step is now running."
            ),
        },
        context,
    )


def complete_workflow_step(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Record a step's outputs and advance the workflow."""
    collaboration_id = get_str(arguments, "collaboration_id", required=True)
    step_id = get_str(arguments, "step_id", required=True)
    agent_id = get_str(arguments, "agent_id", required=True)
    outputs = get_dict(arguments, "outputs", required=True)
    context_update = get_dict(arguments, "update_shared_context")

    state = _common.get_state()
    collab = state.collaborations.require(collaboration_id)
    index = collab.step_index(step_id)
    if index is None:
        raise NotFoundError("Workflow step not found", code="STEP_NOT_FOUND")
    step = collab.workflow[index]
    if step.agent_id != agent_id:
        raise UnauthorizedError("Only the assigned agent can complete this step", code="NOT_STEP_OWNER")
    if collab.status != CollaborationStatus.IN_PROGRESS:
        raise InvalidStateError(f"Collaboration is {collab.status.value}, not in progress")
    if step.status != StepStatus.RUNNING:
        raise InvalidStateError(f"Workflow step is {step.status.value}, not running", code="STEP_NOT_RUNNING")

    now = state.now()
    step.status = StepStatus.COMPLETED
    step.outputs = outputs
    step.completed_at = now
    if context_update:
        collab.shared_context.update(context_update)

    next_step = None
    if collab.is_parallel:
        if all(s.status == StepStatus.COMPLETED for s in collab.workflow):
            _finish(collab)
    elif index + 1 < len(collab.workflow):
        next_step = collab.workflow[index + 1]
        _start_step(next_step, now)
        next_step.inputs = {**next_step.inputs, "previous_step_outputs": outputs}
    else:
        _finish(collab)

    collab.updated_at = now
    state.collaborations.save(collab)
    if collab.status == CollaborationStatus.COMPLETED:
        logger.info("Collaboration %s completed", collaboration_id)

    if next_step is not None:
        message = "Step completed. Next step started."
    elif collab.status == CollaborationStatus.COMPLETED:
        message = "Workflow completed successfully!"
    else:
        message = "Step completed. Waiting for remaining steps."

    return success_response(
        {
            "collaboration_id": collaboration_id,
            "completed_step": step_id,
            "collaboration_status": collab.status.value,
            "next_step": next_step.step_id if next_step else None,
            "next_agent": next_step.agent_id if next_step else None,
            "message": message,
        },
        context,
    )


def get_collaboration_status(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    collaboration_id = get_str(arguments, "collaboration_id", required=True)
    collab = _common.get_state().collaborations.require(collaboration_id)

    completed = sum(1 for s in collab.workflow if s.status == StepStatus.COMPLETED)
    total = len(collab.workflow)
    current = next((s for s in collab.workflow if s.status == StepStatus.RUNNING), None)

    return success_response(
        {
            "collaboration_id": collab.collaboration_id,
            "type": collab.type,
            "status": collab.status.value,
            "initiator": collab.initiator_agent_id,
            "participants": collab.participant_agent_ids,
            "task_id": collab.task_id,
            "progress": {
                "completed_steps": completed,
                "total_steps": total,
                "percentage": round_half_up(completed / total * 100) if total else 0,
            },
            "current_step": (
                {
                    "step_id": current.step_id,
                    "agent_id": current.agent_id,
                    "action": current.action,
                    "started_at": current.started_at,
                }
                if current
                else None
            ),
            "workflow": [s.to_dict() for s in collab.workflow],
            "shared_context": collab.shared_context,
            "reward_split": collab.reward_split,
            "created_at": collab.created_at,
            "updated_at": collab.updated_at,
        },
        context,
    )


def list_agent_collaborations(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agent_id = get_str(arguments, "agent_id", required=True)
    status = get_enum(arguments, "status", COLLABORATION_STATUSES)

    predicates = [lambda c: c.involves(agent_id)]
    if status:
        predicates.append(status_is(status))
    collabs = select(_common.get_state().collaborations.list(), predicates)

    return success_response(
        [
            {
                "collaboration_id": c.collaboration_id,
                "type": c.type,
                "status": c.status.value,
                "role": "initiator" if c.initiator_agent_id == agent_id else "participant",
                "participant_count": len(c.participant_agent_ids) + 1,
                "task_id": c.task_id,
                "created_at": c.created_at,
            }
            for c in collabs
        ],
        context,
    )


def delegate_subtask(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Propose a one-step delegation collaboration to another agent."""
    delegator = get_str(arguments, "delegator_agent_id", required=True)
    delegatee = get_str(arguments, "delegatee_agent_id", required=True)
    description = get_str(arguments, "subtask_description", required=True)
    inputs = get_dict(arguments, "subtask_inputs", default={})
    task_id = get_str(arguments, "task_id")
    reward_share = get_int(
        arguments,
        "reward_share",
        default=defaults.DEFAULT_DELEGATION_SHARE,
        minimum=0,
        maximum=100,
    )

    state = _common.get_state()
    now = state.now()
    collab = Collaboration(
        collaboration_id=generate_id(),
        initiator_agent_id=delegator,
        participant_agent_ids=[delegatee],
        type="task_delegation",
        workflow=[WorkflowStep(step_id=generate_id(), agent_id=delegatee, action=description, inputs=inputs)],
        shared_context={"delegator": delegator, "reward_share": reward_share},
        task_id=task_id,
        created_at=now,
        updated_at=now,
    )
    state.collaborations.create(collab)

    return success_response(
        {
            "collaboration_id": collab.collaboration_id,
            "delegator": delegator,
            "delegatee": delegatee,
            "subtask": description,
            "reward_share": reward_share,
            "status": collab.status.value,
            "message": "Subtask delegation proposed. Waiting for acceptance.",
        },
        context,
    )
