"""Escrow tool implementations.

Functions:
    create_escrow, get_escrow_status, update_release_condition,
    release_escrow, refund_escrow, dispute_escrow, list_escrows
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core import defaults
from ..core.economics import compute_payouts, credit_payout, round_half_up
from ..core.exceptions import InvalidStateError, NotFoundError, UnauthorizedError, ValidationException
from ..core.lifecycle import ESCROW_TRANSITIONS, TASK_TRANSITIONS, can_transition, require_transition
from ..core.models import (
    CONDITION_TYPES,
    Beneficiary,
    Escrow,
    EscrowStatus,
    ReleaseCondition,
    TaskStatus,
    same_wallet,
)
from ..core.query import select, sort_desc, status_is, take, wallet_involved
from ..core.responses import ToolContext, success_response
from ..core.validation import get_amount, get_bool, get_dict, get_enum, get_int, get_list, get_str
from ..storage.store import generate_id
from . import _common
from ._common import logger

ESCROW_STATUSES = [s.value for s in EscrowStatus]


def _parse_beneficiaries(raw: list[Any]) -> list[Beneficiary]:
    if not raw:
        raise ValidationException("beneficiaries must not be empty", field="beneficiaries")
    beneficiaries = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationException(f"beneficiaries[{i}] must be an object", field="beneficiaries")
        beneficiaries.append(
            Beneficiary(
                address=get_str(item, "address", required=True),
                share=get_int(item, "share", required=True, minimum=0, maximum=100),
            )
        )
    total = sum(b.share for b in beneficiaries)
    if total != 100:
        raise ValidationException(f"Beneficiary shares must sum to 100, got {total}", field="beneficiaries")
    return beneficiaries


def _parse_conditions(raw: list[Any] | None) -> list[ReleaseCondition]:
    if not raw:
        return [ReleaseCondition(type="validation")]
    conditions = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationException(f"release_conditions[{i}] must be an object", field="release_conditions")
        conditions.append(
            ReleaseCondition(
                type=get_enum(item, "type", CONDITION_TYPES, required=True),
                parameters=get_dict(item, "parameters", default={}),
            )
        )
    return conditions


@dataclass
class CreateEscrowRequest:
    task_id: str
    depositor_wallet: str
    amount: str
    beneficiaries: list[Beneficiary]
    release_conditions: list[ReleaseCondition] = field(default_factory=list)
    token: str = defaults.ZERO_ADDRESS

    @classmethod
    def from_arguments(cls, args: dict[str, Any]) -> CreateEscrowRequest:
        return cls(
            task_id=get_str(args, "task_id", required=True),
            depositor_wallet=get_str(args, "depositor_wallet", required=True),
            amount=get_amount(args, "amount", required=True),
            beneficiaries=_parse_beneficiaries(get_list(args, "beneficiaries", required=True)),
            release_conditions=_parse_conditions(get_list(args, "release_conditions")),
            token=get_str(args, "token", default=defaults.ZERO_ADDRESS),
        )


def create_escrow(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Lock funds for a task. Every release condition starts unmet."""
    req = CreateEscrowRequest.from_arguments(arguments)
    state = _common.get_state()
    now = state.now()

    escrow_id = generate_id()
    escrow = Escrow(
        escrow_id=escrow_id,
        task_id=req.task_id,
        depositor=req.depositor_wallet,
        amount=req.amount,
        beneficiaries=req.beneficiaries,
        release_conditions=req.release_conditions,
        token=req.token,
        deposit_tx="0x" + escrow_id.encode().hex()[:64],
        created_at=now,
        updated_at=now,
    )
    state.escrows.create(escrow)
    logger.info("Escrow %s funded with %s wei for task %s", escrow_id, escrow.amount, escrow.task_id)

    return success_response(
        {
            "escrow_id": escrow_id,
            "task_id": escrow.task_id,
            "amount": escrow.amount,
            "beneficiaries": len(escrow.beneficiaries),
            "deposit_tx": escrow.deposit_tx,
            "escrow_address": "0x" + escrow_id.encode().hex()[:40],
            "status": escrow.status.value,
            "message": "Escrow created and funded successfully",
        },
        context,
    )


def get_escrow_status(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Look up an escrow by id, or the first escrow for a task."""
    escrow_id = get_str(arguments, "escrow_id")
    task_id = get_str(arguments, "task_id")
    if escrow_id is None and task_id is None:
        raise ValidationException("Provide escrow_id or task_id", field="escrow_id")

    state = _common.get_state()
    if escrow_id:
        escrow = state.escrows.get(escrow_id)
    else:
        escrow = state.escrows.find(lambda e: e.task_id == task_id)
    if escrow is None:
        raise NotFoundError("Escrow not found", code="ESCROW_NOT_FOUND")

    met = escrow.conditions_met
    total = len(escrow.release_conditions)
    return success_response(
        {
            "escrow_id": escrow.escrow_id,
            "task_id": escrow.task_id,
            "status": escrow.status.value,
            "amount": escrow.amount,
            "token": escrow.token,
            "depositor": escrow.depositor,
            "beneficiaries": [b.to_dict() for b in escrow.beneficiaries],
            "release_progress": {
                "conditions_met": met,
                "total_conditions": total,
                "percentage": round_half_up(met / total * 100) if total else 0,
            },
            "conditions": [c.to_dict() for c in escrow.release_conditions],
            "deposit_tx": escrow.deposit_tx,
            "release_tx": escrow.release_tx,
            "dispute": escrow.dispute,
            "created_at": escrow.created_at,
            "updated_at": escrow.updated_at,
        },
        context,
    )


def update_release_condition(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    escrow_id = get_str(arguments, "escrow_id", required=True)
    index = get_int(arguments, "condition_index", required=True)
    met = get_bool(arguments, "met", required=True)
    validator = get_str(arguments, "validator_wallet", required=True)
    proof = get_str(arguments, "proof")

    state = _common.get_state()
    escrow = state.escrows.require(escrow_id)
    if index < 0 or index >= len(escrow.release_conditions):
        raise ValidationException("Condition index out of range", field="condition_index", code="INVALID_CONDITION_INDEX")

    condition = escrow.release_conditions[index]
    condition.met = met
    if proof:
        condition.parameters["proof"] = proof
    escrow.updated_at = state.now()
    state.escrows.save(escrow)
    logger.debug("Escrow %s condition %d set to %s by %s", escrow_id, index, met, validator)

    all_met = escrow.all_conditions_met
    return success_response(
        {
            "escrow_id": escrow_id,
            "condition_index": index,
            "condition_met": met,
            "all_conditions_met": all_met,
            "message": (
                "All conditions met! Funds can now be released."
                if all_met
                else "Condition updated. Waiting for remaining conditions."
            ),
        },
        context,
    )


def release_escrow(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Pay out beneficiaries once every release condition is met.

    Credits each beneficiary that matches a registered agent's wallet and moves
    a validated task to paid. Fails without side effects otherwise.
    """
    escrow_id = get_str(arguments, "escrow_id", required=True)
    get_str(arguments, "caller_wallet", required=True)

    state = _common.get_state()
    escrow = state.escrows.require(escrow_id)
    if escrow.status != EscrowStatus.FUNDED:
        raise InvalidStateError(f"Escrow is {escrow.status.value}, cannot release")
    if not escrow.all_conditions_met:
        raise InvalidStateError("Not all release conditions have been met", code="CONDITIONS_NOT_MET")

    now = state.now()
    payments = compute_payouts(escrow)

    require_transition("escrow", ESCROW_TRANSITIONS, escrow.status, EscrowStatus.RELEASED)
    escrow.status = EscrowStatus.RELEASED
    escrow.release_tx = _common.fake_tx_hash()
    escrow.updated_at = now
    state.escrows.save(escrow)

    for payment in payments:
        agent = state.find_agent_by_wallet(payment["address"])
        if agent is not None:
            credit_payout(agent, int(payment["amount"]), now)
            state.agents.save(agent)

    task = state.tasks.get(escrow.task_id)
    if task is not None and can_transition(TASK_TRANSITIONS, task.status, TaskStatus.PAID):
        task.status = TaskStatus.PAID
        task.updated_at = now
        state.tasks.save(task)

    logger.info("Escrow %s released to %d beneficiaries", escrow_id, len(payments))
    return success_response(
        {
            "escrow_id": escrow_id,
            "status": escrow.status.value,
            "release_tx": escrow.release_tx,
            "payments": payments,
            "message": "Escrow released successfully. Funds distributed to beneficiaries.",
        },
        context,
    )


def refund_escrow(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Return funds to the depositor of a cancelled or overdue task."""
    escrow_id = get_str(arguments, "escrow_id", required=True)
    caller = get_str(arguments, "caller_wallet", required=True)
    reason = get_str(arguments, "reason", allow_empty=True)

    state = _common.get_state()
    escrow = state.escrows.require(escrow_id)
    if not same_wallet(escrow.depositor, caller):
        raise UnauthorizedError("Only depositor can request refund")
    if escrow.status != EscrowStatus.FUNDED:
        raise InvalidStateError(f"Escrow is {escrow.status.value}, cannot refund")

    now = state.now()
    task = state.tasks.get(escrow.task_id)
    refundable = task is not None and (task.status == TaskStatus.CANCELLED or now > task.deadline)
    if not refundable:
        raise InvalidStateError("Refund only allowed for cancelled tasks or after deadline", code="REFUND_NOT_ALLOWED")

    escrow.status = EscrowStatus.REFUNDED
    escrow.release_tx = _common.fake_tx_hash()
    escrow.updated_at = now
    state.escrows.save(escrow)

    return success_response(
        {
            "escrow_id": escrow_id,
            "status": escrow.status.value,
            "refund_tx": escrow.release_tx,
            "refund_amount": escrow.amount,
            "refund_to": escrow.depositor,
            "reason": reason,
            "message": "Escrow refunded successfully",
        },
        context,
    )


def dispute_escrow(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    escrow_id = get_str(arguments, "escrow_id", required=True)
    disputer = get_str(arguments, "disputer_wallet", required=True)
    reason = get_str(arguments, "reason", required=True)
    evidence = get_list(arguments, "evidence", default=[], item_type=str)

    state = _common.get_state()
    escrow = state.escrows.require(escrow_id)
    if not escrow.involves(disputer):
        raise UnauthorizedError("Only depositor or beneficiaries can raise disputes")
    require_transition("escrow", ESCROW_TRANSITIONS, escrow.status, EscrowStatus.DISPUTED)

    now = state.now()
    dispute = {
        "dispute_id": generate_id(),
        "disputed_by": disputer,
        "reason": reason,
        "evidence": evidence,
    }
    escrow.status = EscrowStatus.DISPUTED
    escrow.dispute = dispute
    escrow.updated_at = now
    state.escrows.save(escrow)

    task = state.tasks.get(escrow.task_id)
    if task is not None and can_transition(TASK_TRANSITIONS, task.status, TaskStatus.DISPUTED):
        task.status = TaskStatus.DISPUTED
        task.updated_at = now
        state.tasks.save(task)

    logger.warning("Escrow %s disputed by %s", escrow_id, disputer)
    return success_response(
        {
            "escrow_id": escrow_id,
            "status": escrow.status.value,
            **dispute,
            "message": "Dispute raised. Governance resolution process initiated.",
        },
        context,
    )


def list_escrows(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    wallet = get_str(arguments, "wallet_address")
    status = get_enum(arguments, "status", ESCROW_STATUSES)
    limit = get_int(arguments, "limit", minimum=1)

    state = _common.get_state()
    predicates = []
    if wallet:
        predicates.append(wallet_involved(wallet))
    if status:
        predicates.append(status_is(status))

    escrows = sort_desc(select(state.escrows.list(), predicates), key=lambda e: e.created_at)
    return success_response(
        [
            {
                "escrow_id": e.escrow_id,
                "task_id": e.task_id,
                "status": e.status.value,
                "amount": e.amount,
                "depositor": e.depositor,
                "beneficiary_count": len(e.beneficiaries),
                "created_at": e.created_at,
            }
            for e in take(escrows, limit)
        ],
        context,
    )
