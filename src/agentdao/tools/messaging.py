"""Agent-to-agent messaging tool implementations.

Functions:
    send_agent_message, get_inbox, get_message, reply_to_message,
    broadcast_message, query_agent_capability, get_conversation

Messages are delivered to a per-recipient inbox index. Expiry is evaluated
when a message is read, never in the background.
"""

from __future__ import annotations

from typing import Any

from ..core import defaults
from ..core.exceptions import InvalidStateError, NotFoundError, UnauthorizedError
from ..core.lifecycle import MESSAGE_TRANSITIONS, expire_message_if_due, require_transition
from ..core.models import MESSAGE_TYPES, Agent, Message, MessageStatus
from ..core.query import select, sort_asc, sort_desc, status_is, take
from ..core.responses import ToolContext, success_response
from ..core.validation import get_bool, get_dict, get_enum, get_int, get_list, get_str
from ..storage.state import EconomyState
from ..storage.store import generate_id
from . import _common
from ._common import logger

MESSAGE_STATUSES = [s.value for s in MessageStatus]

REPLY_TYPES = {
    "task_proposal": "task_acceptance",
    "collaboration_request": "collaboration_response",
}


def _iso_or_none(ms: int | None) -> str | None:
    return _common.iso_timestamp(ms) if ms is not None else None


def _require_sender(state: EconomyState, agent_id: str) -> Agent:
    agent = state.agents.get(agent_id)
    if agent is None:
        raise NotFoundError("Sender agent not found", code="SENDER_NOT_FOUND")
    return agent


def _require_recipient(state: EconomyState, agent_id: str) -> Agent:
    agent = state.agents.get(agent_id)
    if agent is None:
        raise NotFoundError("Recipient agent not found", code="RECIPIENT_NOT_FOUND")
    return agent


def _post(
    state: EconomyState,
    from_agent: str,
    to_agent: str,
    message_type: str,
    payload: dict[str, Any],
    *,
    expires_at: int | None = None,
    in_reply_to: str | None = None,
) -> Message:
    message = Message(
        message_id=generate_id(),
        from_agent=from_agent,
        to_agent=to_agent,
        type=message_type,
        payload=payload,
        signature=_common.fake_signature(),
        timestamp=state.now(),
        expires_at=expires_at,
        in_reply_to=in_reply_to,
    )
    state.messages.create(message)
    state.deliver(to_agent, message.message_id)
    logger.debug("Message %s (%s) %s -> %s", message.message_id, message_type, from_agent, to_agent)
    return message


def _settle_expiry(state: EconomyState, message: Message, now: int) -> None:
    if expire_message_if_due(message, now):
        state.messages.save(message)


def _agent_name(state: EconomyState, agent_id: str) -> str:
    agent = state.agents.get(agent_id)
    return agent.name if agent else "Unknown"


def send_agent_message(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Send a typed message to another registered agent.

    ``expires_in`` is in seconds; the message expires once that much time has
    passed without it being read.
    """
    from_id = get_str(arguments, "from_agent_id", required=True)
    to_id = get_str(arguments, "to_agent_id", required=True)
    message_type = get_enum(arguments, "type", MESSAGE_TYPES, required=True)
    payload = get_dict(arguments, "payload", required=True)
    expires_in = get_int(arguments, "expires_in", minimum=1, maximum=defaults.MAX_MESSAGE_TTL_S)

    state = _common.get_state()
    sender = _require_sender(state, from_id)
    recipient = _require_recipient(state, to_id)

    expires_at = state.now() + expires_in * 1000 if expires_in else None
    message = _post(state, from_id, to_id, message_type, payload, expires_at=expires_at)

    return success_response(
        {
            "message_id": message.message_id,
            "from": sender.name,
            "to": recipient.name,
            "type": message.type,
            "status": message.status.value,
            "signature": message.signature,
            "timestamp": _common.iso_timestamp(message.timestamp),
            "expires_at": _iso_or_none(message.expires_at),
            "message": "Message sent successfully",
        },
        context,
    )


def get_inbox(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    agent_id = get_str(arguments, "agent_id", required=True)
    message_type = get_enum(arguments, "type", MESSAGE_TYPES)
    status = get_enum(arguments, "status", MESSAGE_STATUSES)
    unread_only = get_bool(arguments, "unread_only", default=False)
    limit = get_int(arguments, "limit", minimum=1)

    state = _common.get_state()
    now = state.now()
    messages = state.inbox(agent_id)
    for message in messages:
        _settle_expiry(state, message, now)

    predicates = []
    if message_type:
        predicates.append(lambda m: m.type == message_type)
    if status:
        predicates.append(status_is(status))
    if unread_only:
        predicates.append(lambda m: m.is_unread)
    messages = take(sort_desc(select(messages, predicates), key=lambda m: m.timestamp), limit)

    return success_response(
        {
            "agent_id": agent_id,
            "messages": [
                {
                    "message_id": m.message_id,
                    "from": {"agent_id": m.from_agent, "name": _agent_name(state, m.from_agent)},
                    "type": m.type,
                    "payload": m.payload,
                    "status": m.status.value,
                    "in_reply_to": m.in_reply_to,
                    "timestamp": _common.iso_timestamp(m.timestamp),
                    "expires_at": _iso_or_none(m.expires_at),
                }
                for m in messages
            ],
            "total_messages": len(messages),
            "unread_count": sum(1 for m in messages if m.is_unread),
        },
        context,
    )


def get_message(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Fetch one message as its sender or recipient.

    A recipient fetching a sent or delivered message marks it read.
    """
    message_id = get_str(arguments, "message_id", required=True)
    agent_id = get_str(arguments, "agent_id", required=True)

    state = _common.get_state()
    message = state.messages.require(message_id)
    if agent_id not in (message.from_agent, message.to_agent):
        raise UnauthorizedError("You can only view messages you sent or received")

    _settle_expiry(state, message, state.now())
    if message.to_agent == agent_id and message.is_unread:
        require_transition("message", MESSAGE_TRANSITIONS, message.status, MessageStatus.READ)
        message.status = MessageStatus.READ
        state.messages.save(message)

    sender = state.agents.get(message.from_agent)
    recipient = state.agents.get(message.to_agent)
    return success_response(
        {
            "message_id": message.message_id,
            "from": {
                "agent_id": message.from_agent,
                "name": sender.name if sender else "Unknown",
                "wallet_address": sender.wallet_address if sender else None,
            },
            "to": {
                "agent_id": message.to_agent,
                "name": recipient.name if recipient else "Unknown",
                "wallet_address": recipient.wallet_address if recipient else None,
            },
            "type": message.type,
            "payload": message.payload,
            "signature": message.signature,
            "in_reply_to": message.in_reply_to,
            "timestamp": _common.iso_timestamp(message.timestamp),
            "expires_at": _iso_or_none(message.expires_at),
            "status": message.status.value,
        },
        context,
    )


def reply_to_message(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    original_id = get_str(arguments, "original_message_id", required=True)
    agent_id = get_str(arguments, "agent_id", required=True)
    payload = get_dict(arguments, "payload", required=True)

    state = _common.get_state()
    original = state.messages.require(original_id)
    if original.to_agent != agent_id:
        raise UnauthorizedError("You can only reply to messages sent to you")

    _settle_expiry(state, original, state.now())
    if original.status == MessageStatus.EXPIRED:
        raise InvalidStateError("Cannot reply to an expired message")

    if original.status != MessageStatus.RESPONDED:
        require_transition("message", MESSAGE_TRANSITIONS, original.status, MessageStatus.RESPONDED)

    reply_type = REPLY_TYPES.get(original.type, "custom")
    reply = _post(
        state,
        agent_id,
        original.from_agent,
        reply_type,
        {**payload, "in_reply_to": original_id},
        in_reply_to=original_id,
    )

    original.status = MessageStatus.RESPONDED
    state.messages.save(original)

    return success_response(
        {
            "reply_id": reply.message_id,
            "original_message_id": original_id,
            "to": original.from_agent,
            "type": reply_type,
            "status": reply.status.value,
            "message": "Reply sent successfully",
        },
        context,
    )


def broadcast_message(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Send one copy of a message to many agents.

    Recipients default to every registered agent other than the sender and
    can be narrowed by capability category and minimum reputation.
    """
    from_id = get_str(arguments, "from_agent_id", required=True)
    to_ids = get_list(arguments, "to_agent_ids", item_type=str)
    message_type = get_enum(arguments, "type", MESSAGE_TYPES, required=True)
    payload = get_dict(arguments, "payload", required=True)
    categories = get_list(arguments, "filter_capabilities", default=[], item_type=str)
    min_score = get_int(arguments, "min_reputation", minimum=0)

    state = _common.get_state()
    sender = _require_sender(state, from_id)

    if not to_ids or to_ids[0] == "all":
        candidates = [a for a in state.agents.list() if a.agent_id != from_id]
    else:
        candidates = [a for a in (state.agents.get(i) for i in to_ids if i != from_id) if a is not None]

    predicates = []
    if categories:
        predicates.append(lambda a: any(c.category in categories for c in a.capabilities))
    if min_score is not None:
        predicates.append(lambda a: a.reputation.score >= min_score)
    recipients = select(candidates, predicates)

    body = {**payload, "is_broadcast": True}
    message_ids = [_post(state, from_id, a.agent_id, message_type, dict(body)).message_id for a in recipients]
    logger.info("Broadcast from %s reached %d agents", from_id, len(message_ids))

    return success_response(
        {
            "broadcast_id": generate_id(),
            "from": sender.name,
            "recipient_count": len(message_ids),
            "message_ids": message_ids,
            "type": message_type,
            "message": f"Broadcast sent to {len(message_ids)} agents",
        },
        context,
    )


def query_agent_capability(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    from_id = get_str(arguments, "from_agent_id", required=True)
    to_id = get_str(arguments, "to_agent_id", required=True)
    capability_name = get_str(arguments, "capability_name", required=True)
    task_description = get_str(arguments, "task_description", allow_empty=True)
    parameters = get_dict(arguments, "parameters")

    state = _common.get_state()
    _require_sender(state, from_id)
    target = _require_recipient(state, to_id)

    message = _post(
        state,
        from_id,
        to_id,
        "capability_query",
        {
            "capability_name": capability_name,
            "task_description": task_description,
            "parameters": parameters,
            "request_quote": True,
        },
        expires_at=state.now() + defaults.CAPABILITY_QUERY_TTL_MS,
    )

    needle = capability_name.lower()
    has_capability = any(needle in c.name.lower() or c.category == needle for c in target.capabilities)

    return success_response(
        {
            "query_id": message.message_id,
            "to": to_id,
            "agent_name": target.name,
            "capability_name": capability_name,
            "has_capability": has_capability,
            "status": "query_sent",
            "expires_at": _iso_or_none(message.expires_at),
            "message": (
                "Query sent. Agent appears to have this capability."
                if has_capability
                else "Query sent. Agent may not have this exact capability."
            ),
        },
        context,
    )


def get_conversation(arguments: dict[str, Any], context: ToolContext) -> dict[str, Any]:
    """Messages exchanged between two agents, oldest first.

    ``limit`` keeps the most recent messages.
    """
    agent_id = get_str(arguments, "agent_id", required=True)
    other_id = get_str(arguments, "other_agent_id", required=True)
    limit = get_int(arguments, "limit", minimum=1)

    state = _common.get_state()

    def between(m: Message) -> bool:
        return (m.from_agent, m.to_agent) in ((agent_id, other_id), (other_id, agent_id))

    messages = sort_asc(select(state.messages.list(), [between]), key=lambda m: m.timestamp)
    recent = messages[-limit:] if limit else messages

    return success_response(
        {
            "participants": {
                "self": {"agent_id": agent_id, "name": _agent_name(state, agent_id)},
                "other": {"agent_id": other_id, "name": _agent_name(state, other_id)},
            },
            "messages": [
                {
                    "message_id": m.message_id,
                    "direction": "outgoing" if m.from_agent == agent_id else "incoming",
                    "type": m.type,
                    "payload": m.payload,
                    "status": m.status.value,
                    "timestamp": _common.iso_timestamp(m.timestamp),
                }
                for m in recent
            ],
            "total_messages": len(messages),
        },
        context,
    )
