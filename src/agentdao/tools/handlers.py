"""Tool dispatch and handler registry.

Provides handle_tool() and the TOOL_HANDLERS mapping.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..core.exceptions import AgentDAOException
from ..core.logging import tool_logger
from ..core.responses import ToolContext, error_response, exception_response
from .agents import (
    add_agent_capability,
    get_agent_profile,
    list_my_agents,
    register_agent,
    stake_tokens,
    update_agent_profile,
)
from .collaboration import (
    complete_workflow_step,
    delegate_subtask,
    get_collaboration_status,
    list_agent_collaborations,
    propose_collaboration,
    respond_to_collaboration,
    start_workflow,
)
from .discovery import (
    discover_agents,
    find_best_agent_for_task,
    get_capability_categories,
    get_network_stats,
    search_capabilities,
)
from .escrow import (
    create_escrow,
    dispute_escrow,
    get_escrow_status,
    list_escrows,
    refund_escrow,
    release_escrow,
    update_release_condition,
)
from .governance import (
    cancel_proposal,
    create_proposal,
    execute_proposal,
    get_proposal,
    get_voting_power,
    list_proposals,
    vote_on_proposal,
)
from .messaging import (
    broadcast_message,
    get_conversation,
    get_inbox,
    get_message,
    query_agent_capability,
    reply_to_message,
    send_agent_message,
)
from .reputation import (
    calculate_trust_score,
    get_agent_reputation,
    get_attestation,
    get_reputation_leaderboard,
    list_agent_attestations,
    submit_attestation,
)
from .tasks import (
    bid_on_task,
    cancel_task,
    create_task,
    get_task_details,
    list_tasks,
    submit_task_result,
    validate_submission,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any], ToolContext], dict[str, Any]]

# Tool name to handler mapping
TOOL_HANDLERS: dict[str, ToolHandler] = {
    # Agent registry
    "register_agent": register_agent,
    "get_agent_profile": get_agent_profile,
    "update_agent_profile": update_agent_profile,
    "add_agent_capability": add_agent_capability,
    "list_my_agents": list_my_agents,
    "stake_tokens": stake_tokens,
    # Task marketplace
    "create_task": create_task,
    "list_tasks": list_tasks,
    "get_task_details": get_task_details,
    "bid_on_task": bid_on_task,
    "submit_task_result": submit_task_result,
    "validate_submission": validate_submission,
    "cancel_task": cancel_task,
    # Escrow
    "create_escrow": create_escrow,
    "get_escrow_status": get_escrow_status,
    "update_release_condition": update_release_condition,
    "release_escrow": release_escrow,
    "refund_escrow": refund_escrow,
    "dispute_escrow": dispute_escrow,
    "list_escrows": list_escrows,
    # Reputation
    "submit_attestation": submit_attestation,
    "get_agent_reputation": get_agent_reputation,
    "get_attestation": get_attestation,
    "list_agent_attestations": list_agent_attestations,
    "calculate_trust_score": calculate_trust_score,
    "get_reputation_leaderboard": get_reputation_leaderboard,
    # Governance
    "create_proposal": create_proposal,
    "vote_on_proposal": vote_on_proposal,
    "get_proposal": get_proposal,
    "list_proposals": list_proposals,
    "execute_proposal": execute_proposal,
    "cancel_proposal": cancel_proposal,
    "get_voting_power": get_voting_power,
    # Collaboration
    "propose_collaboration": propose_collaboration,
    "respond_to_collaboration": respond_to_collaboration,
    "start_workflow": start_workflow,
    "complete_workflow_step": complete_workflow_step,
    "get_collaboration_status": get_collaboration_status,
    "list_agent_collaborations": list_agent_collaborations,
    "delegate_subtask": delegate_subtask,
    # Messaging
    "send_agent_message": send_agent_message,
    "get_inbox": get_inbox,
    "get_message": get_message,
    "reply_to_message": reply_to_message,
    "broadcast_message": broadcast_message,
    "query_agent_capability": query_agent_capability,
    "get_conversation": get_conversation,
    # Discovery
    "discover_agents": discover_agents,
    "search_capabilities": search_capabilities,
    "get_network_stats": get_network_stats,
    "find_best_agent_for_task": find_best_agent_for_task,
    "get_capability_categories": get_capability_categories,
}


def handle_tool(name: str, arguments: dict[str, Any] | None, context: ToolContext | None = None) -> dict[str, Any]:
    """Handle a tool call.

    Domain errors come back as ``{"success": False, "error": ...}``
    envelopes. Anything else propagates to the caller.

    Args:
        name: Tool name
        arguments: Tool arguments
        context: Per-call context (a fresh one when omitted)

    Returns:
        Response envelope
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return error_response("UNKNOWN_TOOL", f"Unknown tool: {name}")

    context = context or ToolContext()
    with tool_logger.track(name, context.request_id) as record:
        try:
            record["result"] = handler(arguments or {}, context)
        except AgentDAOException as e:
            logger.debug("Tool %s rejected: %s", name, e)
            record["result"] = exception_response(e)
    return record["result"]
