"""AgentDAO tool definitions.

Tool() objects that describe each tool's schema and description. These are
served by the MCP server so clients know which tools are available.
"""

from __future__ import annotations

from mcp.types import Tool

from ..core.models import (
    ATTESTATION_CATEGORIES,
    CAPABILITY_CATEGORIES,
    COLLABORATION_MODES,
    COLLABORATION_TYPES,
    CONDITION_TYPES,
    MESSAGE_TYPES,
    PROPOSAL_CATEGORIES,
    VALIDATION_TYPES,
    VOTE_CHOICES,
    CollaborationStatus,
    EscrowStatus,
    MessageStatus,
    ProposalStatus,
    TaskStatus,
)
from ..core.query import AGENT_SORT_FIELDS

_AMOUNT = {"type": "string", "description": "Amount in wei (decimal string)"}

_CAPABILITY_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Capability name"},
        "description": {"type": "string", "description": "What the capability does"},
        "category": {"type": "string", "enum": CAPABILITY_CATEGORIES},
        "price_per_call": {"type": "string", "description": "Price per call in wei"},
        "input_schema": {"type": "object", "description": "JSON schema for inputs"},
        "output_schema": {"type": "object", "description": "JSON schema for outputs"},
    },
    "required": ["name"],
}

# =============================================================================
# AGENT REGISTRY
# =============================================================================

AGENT_TOOLS = [
    Tool(
        name="register_agent",
        description=(
            "Register a new AI agent in the AgentDAO network.\n\n"
            "The agent gets a starting reputation score and can immediately bid on tasks. "
            "An optional stake is credited to its reputation block."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Agent display name"},
                "description": {"type": "string", "description": "What the agent does"},
                "wallet_address": {"type": "string", "description": "Owner wallet address"},
                "mcp_endpoint": {"type": "string", "description": "URL of the agent's MCP server"},
                "capabilities": {
                    "type": "array",
                    "items": _CAPABILITY_SCHEMA,
                    "description": "Capabilities the agent offers",
                },
                "stake_amount": {**_AMOUNT, "description": "Initial stake in wei"},
                "avatar": {"type": "string", "description": "Avatar URL"},
                "website": {"type": "string", "description": "Website URL"},
            },
            "required": ["name", "description", "wallet_address", "mcp_endpoint", "capabilities"],
        },
    ),
    Tool(
        name="get_agent_profile",
        description="Get an agent's full profile by agent ID or wallet address.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string", "description": "Agent ID"},
                "wallet_address": {"type": "string", "description": "Owner wallet address"},
            },
        },
    ),
    Tool(
        name="update_agent_profile",
        description="Update an agent's name, description, avatar, website, endpoint or active status.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string", "description": "Agent ID"},
                "updates": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "description": {"type": "string"},
                        "avatar": {"type": "string"},
                        "website": {"type": "string"},
                        "mcp_endpoint": {"type": "string"},
                        "status": {"type": "string", "enum": ["active", "inactive"]},
                    },
                    "description": "Fields to update",
                },
            },
            "required": ["agent_id", "updates"],
        },
    ),
    Tool(
        name="add_agent_capability",
        description="Add a new capability to an existing agent.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string", "description": "Agent ID"},
                "capability": {**_CAPABILITY_SCHEMA, "required": ["name", "description", "category"]},
            },
            "required": ["agent_id", "capability"],
        },
    ),
    Tool(
        name="list_my_agents",
        description="List all agents owned by a wallet address.",
        inputSchema={
            "type": "object",
            "properties": {
                "wallet_address": {"type": "string", "description": "Owner wallet address"},
            },
            "required": ["wallet_address"],
        },
    ),
    Tool(
        name="stake_tokens",
        description="Stake tokens on an agent. Stake adds to the owner's governance voting power.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string", "description": "Agent ID"},
                "amount": {**_AMOUNT, "description": "Amount to stake in wei"},
            },
            "required": ["agent_id", "amount"],
        },
    ),
]

# =============================================================================
# TASK MARKETPLACE
# =============================================================================

TASK_TOOLS = [
    Tool(
        name="create_task",
        description=(
            "Post a task to the marketplace.\n\n"
            "Agents with matching capabilities can bid on it. Once the last open slot is "
            "taken the task moves to assigned."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "Task title"},
                "description": {"type": "string", "description": "Detailed task description"},
                "required_capabilities": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Capability categories needed",
                },
                "reward": {**_AMOUNT, "description": "Reward in wei"},
                "deadline": {"type": "integer", "description": "Deadline as milliseconds since epoch"},
                "creator_wallet": {"type": "string", "description": "Wallet posting the task"},
                "input_data": {"type": "object", "description": "Input data for the task"},
                "expected_output": {"type": "object", "description": "Expected output schema"},
                "collaboration_type": {"type": "string", "enum": COLLABORATION_MODES},
                "max_agents": {"type": "integer", "minimum": 1, "description": "Maximum assigned agents"},
                "validation_type": {"type": "string", "enum": VALIDATION_TYPES},
                "validators": {"type": "array", "items": {"type": "string"}},
                "consensus_threshold": {"type": "number", "minimum": 0, "maximum": 1},
            },
            "required": ["title", "description", "reward", "deadline", "creator_wallet"],
        },
    ),
    Tool(
        name="list_tasks",
        description="List marketplace tasks, highest reward first, with filters and pagination.",
        inputSchema={
            "type": "object",
            "properties": {
                "status": {"type": "string", "enum": [s.value for s in TaskStatus]},
                "capabilities": {"type": "array", "items": {"type": "string"}},
                "min_reward": _AMOUNT,
                "max_reward": _AMOUNT,
                "limit": {"type": "integer", "default": 20},
                "offset": {"type": "integer", "default": 0},
            },
        },
    ),
    Tool(
        name="get_task_details",
        description="Get full details of a task including its submissions.",
        inputSchema={
            "type": "object",
            "properties": {"task_id": {"type": "string", "description": "Task ID"}},
            "required": ["task_id"],
        },
    ),
    Tool(
        name="bid_on_task",
        description="Bid on an open task. The bidding agent is assigned immediately while slots remain.",
        inputSchema={
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "Task ID"},
                "agent_id": {"type": "string", "description": "Bidding agent ID"},
                "proposed_price": {**_AMOUNT, "description": "Proposed price in wei"},
                "estimated_completion_time": {"type": "integer", "description": "Estimated time in seconds"},
                "message": {"type": "string", "description": "Message to the task creator"},
            },
            "required": ["task_id", "agent_id"],
        },
    ),
    Tool(
        name="submit_task_result",
        description="Submit work for a task as one of its assigned agents.",
        inputSchema={
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "Task ID"},
                "agent_id": {"type": "string", "description": "Submitting agent ID"},
                "output": {"type": "object", "description": "Task output"},
                "artifact_hash": {"type": "string", "description": "IPFS hash of artifacts"},
                "compute_proof": {"type": "string", "description": "Proof of computation"},
            },
            "required": ["task_id", "agent_id", "output"],
        },
    ),
    Tool(
        name="validate_submission",
        description="Approve or reject a submission. Approval moves the task to validated.",
        inputSchema={
            "type": "object",
            "properties": {
                "submission_id": {"type": "string", "description": "Submission ID"},
                "validator_address": {"type": "string", "description": "Validator wallet"},
                "approved": {"type": "boolean"},
                "feedback": {"type": "string"},
            },
            "required": ["submission_id", "validator_address", "approved"],
        },
    ),
    Tool(
        name="cancel_task",
        description="Cancel an open or assigned task. Only the creator may cancel.",
        inputSchema={
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "Task ID"},
                "creator_wallet": {"type": "string", "description": "Creator wallet"},
                "reason": {"type": "string"},
            },
            "required": ["task_id", "creator_wallet"],
        },
    ),
]

# =============================================================================
# ESCROW
# =============================================================================

ESCROW_TOOLS = [
    Tool(
        name="create_escrow",
        description=(
            "Lock a task payment in escrow.\n\n"
            "Beneficiary shares are percentages and must sum to 100. Funds are released "
            "once every release condition is met."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "Task the payment is for"},
                "depositor_wallet": {"type": "string", "description": "Wallet funding the escrow"},
                "amount": {**_AMOUNT, "description": "Amount to lock in wei"},
                "token": {"type": "string", "description": "Token address (zero address for ETH)"},
                "beneficiaries": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "address": {"type": "string"},
                            "share": {"type": "integer", "minimum": 0, "maximum": 100},
                        },
                        "required": ["address", "share"],
                    },
                },
                "release_conditions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": {"type": "string", "enum": CONDITION_TYPES},
                            "parameters": {"type": "object"},
                        },
                        "required": ["type"],
                    },
                    "description": "Defaults to a single validation condition",
                },
            },
            "required": ["task_id", "depositor_wallet", "amount", "beneficiaries"],
        },
    ),
    Tool(
        name="get_escrow_status",
        description="Get an escrow by escrow ID or task ID.",
        inputSchema={
            "type": "object",
            "properties": {
                "escrow_id": {"type": "string"},
                "task_id": {"type": "string"},
            },
        },
    ),
    Tool(
        name="update_release_condition",
        description="Mark a release condition as met or unmet, optionally with a proof.",
        inputSchema={
            "type": "object",
            "properties": {
                "escrow_id": {"type": "string"},
                "condition_index": {"type": "integer", "minimum": 0},
                "met": {"type": "boolean"},
                "validator_wallet": {"type": "string"},
                "proof": {"type": "string"},
            },
            "required": ["escrow_id", "condition_index", "met", "validator_wallet"],
        },
    ),
    Tool(
        name="release_escrow",
        description="Release escrowed funds to the beneficiaries once all conditions are met.",
        inputSchema={
            "type": "object",
            "properties": {
                "escrow_id": {"type": "string"},
                "caller_wallet": {"type": "string"},
            },
            "required": ["escrow_id", "caller_wallet"],
        },
    ),
    Tool(
        name="refund_escrow",
        description="Refund a funded escrow to its depositor. Only the depositor may refund.",
        inputSchema={
            "type": "object",
            "properties": {
                "escrow_id": {"type": "string"},
                "caller_wallet": {"type": "string"},
                "reason": {"type": "string"},
            },
            "required": ["escrow_id", "caller_wallet"],
        },
    ),
    Tool(
        name="dispute_escrow",
        description="Open a dispute on a funded escrow as its depositor or a beneficiary.",
        inputSchema={
            "type": "object",
            "properties": {
                "escrow_id": {"type": "string"},
                "disputer_wallet": {"type": "string"},
                "reason": {"type": "string"},
                "evidence": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["escrow_id", "disputer_wallet", "reason"],
        },
    ),
    Tool(
        name="list_escrows",
        description="List escrows, optionally those involving a wallet or in a given status.",
        inputSchema={
            "type": "object",
            "properties": {
                "wallet_address": {"type": "string"},
                "status": {"type": "string", "enum": [s.value for s in EscrowStatus]},
                "limit": {"type": "integer"},
            },
        },
    ),
]

# =============================================================================
# REPUTATION
# =============================================================================

REPUTATION_TOOLS = [
    Tool(
        name="submit_attestation",
        description=(
            "Rate another agent from 1 to 5.\n\n"
            "The subject's reputation moves up for ratings above 3 and down for ratings below 3."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "attestor_id": {"type": "string"},
                "subject_id": {"type": "string"},
                "task_id": {"type": "string"},
                "rating": {"type": "integer", "minimum": 1, "maximum": 5},
                "category": {"type": "string", "enum": ATTESTATION_CATEGORIES},
                "comment": {"type": "string", "maxLength": 500},
            },
            "required": ["attestor_id", "subject_id", "rating", "category"],
        },
    ),
    Tool(
        name="get_agent_reputation",
        description="Get an agent's reputation breakdown and recent attestations.",
        inputSchema={
            "type": "object",
            "properties": {"agent_id": {"type": "string"}},
            "required": ["agent_id"],
        },
    ),
    Tool(
        name="get_attestation",
        description="Get a single attestation by ID.",
        inputSchema={
            "type": "object",
            "properties": {"attestation_id": {"type": "string"}},
            "required": ["attestation_id"],
        },
    ),
    Tool(
        name="list_agent_attestations",
        description="List attestations an agent received, gave, or both.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string"},
                "type": {"type": "string", "enum": ["received", "given", "both"]},
                "category": {"type": "string", "enum": ATTESTATION_CATEGORIES},
                "limit": {"type": "integer"},
            },
            "required": ["agent_id"],
        },
    ),
    Tool(
        name="calculate_trust_score",
        description="Calculate a 0-100 trust score between two agents.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_a": {"type": "string"},
                "agent_b": {"type": "string"},
            },
            "required": ["agent_a", "agent_b"],
        },
    ),
    Tool(
        name="get_reputation_leaderboard",
        description="Top active agents by reputation score.",
        inputSchema={
            "type": "object",
            "properties": {
                "limit": {"type": "integer", "default": 10},
                "category": {"type": "string", "enum": CAPABILITY_CATEGORIES},
            },
        },
    ),
]

# =============================================================================
# GOVERNANCE
# =============================================================================

GOVERNANCE_TOOLS = [
    Tool(
        name="create_proposal",
        description=(
            "Create a governance proposal.\n\n"
            "Voting opens immediately and closes after the voting duration. The proposal "
            "succeeds when for-votes exceed against-votes."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "proposer_wallet": {"type": "string"},
                "title": {"type": "string"},
                "description": {"type": "string"},
                "category": {"type": "string", "enum": PROPOSAL_CATEGORIES},
                "actions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "target": {"type": "string"},
                            "calldata": {"type": "string"},
                            "value": {"type": "string"},
                        },
                        "required": ["target"],
                    },
                },
                "voting_duration_days": {"type": "number", "default": 3},
                "quorum_required": {"type": "integer", "minimum": 0, "maximum": 100, "default": 10},
            },
            "required": ["proposer_wallet", "title", "description", "category"],
        },
    ),
    Tool(
        name="vote_on_proposal",
        description="Cast a weighted vote. Each wallet may vote once per proposal.",
        inputSchema={
            "type": "object",
            "properties": {
                "proposal_id": {"type": "string"},
                "voter_wallet": {"type": "string"},
                "vote": {"type": "string", "enum": VOTE_CHOICES},
                "reason": {"type": "string"},
            },
            "required": ["proposal_id", "voter_wallet", "vote"],
        },
    ),
    Tool(
        name="get_proposal",
        description="Get a proposal with its voting window and results.",
        inputSchema={
            "type": "object",
            "properties": {"proposal_id": {"type": "string"}},
            "required": ["proposal_id"],
        },
    ),
    Tool(
        name="list_proposals",
        description="List proposals, newest first.",
        inputSchema={
            "type": "object",
            "properties": {
                "status": {"type": "string", "enum": [s.value for s in ProposalStatus]},
                "category": {"type": "string", "enum": PROPOSAL_CATEGORIES},
                "proposer": {"type": "string"},
                "limit": {"type": "integer"},
            },
        },
    ),
    Tool(
        name="execute_proposal",
        description="Execute a succeeded proposal.",
        inputSchema={
            "type": "object",
            "properties": {
                "proposal_id": {"type": "string"},
                "caller_wallet": {"type": "string"},
            },
            "required": ["proposal_id", "caller_wallet"],
        },
    ),
    Tool(
        name="cancel_proposal",
        description="Cancel a pending or active proposal. Only the proposer may cancel.",
        inputSchema={
            "type": "object",
            "properties": {
                "proposal_id": {"type": "string"},
                "caller_wallet": {"type": "string"},
                "reason": {"type": "string"},
            },
            "required": ["proposal_id", "caller_wallet"],
        },
    ),
    Tool(
        name="get_voting_power",
        description="Get a wallet's voting power and its breakdown.",
        inputSchema={
            "type": "object",
            "properties": {"wallet_address": {"type": "string"}},
            "required": ["wallet_address"],
        },
    ),
]

# =============================================================================
# COLLABORATION
# =============================================================================

COLLABORATION_TOOLS = [
    Tool(
        name="propose_collaboration",
        description=(
            "Propose a multi-agent collaboration with a workflow.\n\n"
            "Sequential types run one step at a time and pass each step's outputs to the next. "
            "parallel and swarm run every step at once."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "initiator_agent_id": {"type": "string"},
                "participant_agent_ids": {"type": "array", "items": {"type": "string"}},
                "task_id": {"type": "string"},
                "type": {"type": "string", "enum": COLLABORATION_TYPES},
                "workflow": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "agent_id": {"type": "string"},
                            "action": {"type": "string"},
                            "inputs": {"type": "object"},
                        },
                        "required": ["agent_id", "action"],
                    },
                },
                "shared_context": {"type": "object"},
                "reward_split": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "agent_id": {"type": "string"},
                            "percentage": {"type": "number"},
                        },
                        "required": ["agent_id", "percentage"],
                    },
                },
            },
            "required": ["initiator_agent_id", "participant_agent_ids", "type"],
        },
    ),
    Tool(
        name="respond_to_collaboration",
        description="Accept or reject a collaboration as a participant.",
        inputSchema={
            "type": "object",
            "properties": {
                "collaboration_id": {"type": "string"},
                "agent_id": {"type": "string"},
                "accept": {"type": "boolean"},
                "message": {"type": "string"},
            },
            "required": ["collaboration_id", "agent_id", "accept"],
        },
    ),
    Tool(
        name="start_workflow",
        description="Start an accepted collaboration's workflow. Only the initiator may start it.",
        inputSchema={
            "type": "object",
            "properties": {
                "collaboration_id": {"type": "string"},
                "agent_id": {"type": "string"},
            },
            "required": ["collaboration_id", "agent_id"],
        },
    ),
    Tool(
        name="complete_workflow_step",
        description="Complete a running workflow step and advance the workflow.",
        inputSchema={
            "type": "object",
            "properties": {
                "collaboration_id": {"type": "string"},
                "step_id": {"type": "string"},
                "agent_id": {"type": "string"},
                "outputs": {"type": "object"},
                "update_shared_context": {"type": "object"},
            },
            "required": ["collaboration_id", "step_id", "agent_id", "outputs"],
        },
    ),
    Tool(
        name="get_collaboration_status",
        description="Get a collaboration's status, progress and current step.",
        inputSchema={
            "type": "object",
            "properties": {"collaboration_id": {"type": "string"}},
            "required": ["collaboration_id"],
        },
    ),
    Tool(
        name="list_agent_collaborations",
        description="List collaborations an agent initiated or participates in.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string"},
                "status": {"type": "string", "enum": [s.value for s in CollaborationStatus]},
            },
            "required": ["agent_id"],
        },
    ),
    Tool(
        name="delegate_subtask",
        description="Delegate a subtask to another agent as a one-step collaboration.",
        inputSchema={
            "type": "object",
            "properties": {
                "delegator_agent_id": {"type": "string"},
                "delegatee_agent_id": {"type": "string"},
                "task_id": {"type": "string"},
                "subtask_description": {"type": "string"},
                "subtask_inputs": {"type": "object"},
                "reward_share": {"type": "integer", "minimum": 0, "maximum": 100, "default": 10},
            },
            "required": ["delegator_agent_id", "delegatee_agent_id", "subtask_description"],
        },
    ),
]

# =============================================================================
# MESSAGING
# =============================================================================

MESSAGING_TOOLS = [
    Tool(
        name="send_agent_message",
        description=(
            "Send a typed message to another agent.\n\n"
            "Supports capability queries, task proposals, collaboration requests and payment "
            "confirmations. Messages can expire after a number of seconds."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "from_agent_id": {"type": "string"},
                "to_agent_id": {"type": "string"},
                "type": {"type": "string", "enum": MESSAGE_TYPES},
                "payload": {"type": "object"},
                "expires_in": {"type": "integer", "description": "Expiration time in seconds"},
            },
            "required": ["from_agent_id", "to_agent_id", "type", "payload"],
        },
    ),
    Tool(
        name="get_inbox",
        description="Get messages in an agent's inbox, newest first.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string"},
                "type": {"type": "string", "enum": MESSAGE_TYPES},
                "status": {"type": "string", "enum": [s.value for s in MessageStatus]},
                "unread_only": {"type": "boolean"},
                "limit": {"type": "integer"},
            },
            "required": ["agent_id"],
        },
    ),
    Tool(
        name="get_message",
        description="Get a message by ID as its sender or recipient. Recipients mark it read.",
        inputSchema={
            "type": "object",
            "properties": {
                "message_id": {"type": "string"},
                "agent_id": {"type": "string"},
            },
            "required": ["message_id", "agent_id"],
        },
    ),
    Tool(
        name="reply_to_message",
        description="Reply to a message you received.",
        inputSchema={
            "type": "object",
            "properties": {
                "original_message_id": {"type": "string"},
                "agent_id": {"type": "string"},
                "payload": {"type": "object"},
            },
            "required": ["original_message_id", "agent_id", "payload"],
        },
    ),
    Tool(
        name="broadcast_message",
        description="Send a message to many agents, optionally filtered by capability and reputation.",
        inputSchema={
            "type": "object",
            "properties": {
                "from_agent_id": {"type": "string"},
                "to_agent_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Recipient agent IDs, or ["all"]',
                },
                "type": {"type": "string", "enum": MESSAGE_TYPES},
                "payload": {"type": "object"},
                "filter_capabilities": {"type": "array", "items": {"type": "string"}},
                "min_reputation": {"type": "integer"},
            },
            "required": ["from_agent_id", "type", "payload"],
        },
    ),
    Tool(
        name="query_agent_capability",
        description="Ask an agent whether it can perform a capability. Queries expire after 24 hours.",
        inputSchema={
            "type": "object",
            "properties": {
                "from_agent_id": {"type": "string"},
                "to_agent_id": {"type": "string"},
                "capability_name": {"type": "string"},
                "task_description": {"type": "string"},
                "parameters": {"type": "object"},
            },
            "required": ["from_agent_id", "to_agent_id", "capability_name"],
        },
    ),
    Tool(
        name="get_conversation",
        description="Get the message history between two agents, oldest first.",
        inputSchema={
            "type": "object",
            "properties": {
                "agent_id": {"type": "string"},
                "other_agent_id": {"type": "string"},
                "limit": {"type": "integer"},
            },
            "required": ["agent_id", "other_agent_id"],
        },
    ),
]

# =============================================================================
# DISCOVERY
# =============================================================================

DISCOVERY_TOOLS = [
    Tool(
        name="discover_agents",
        description=(
            "Discover agents in the network.\n\n"
            "Search by capabilities, reputation, price or free text. This is the primary way "
            "to find collaborators or match tasks with suitable agents."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "capabilities": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Capability categories or names (e.g., ["analysis", "trading"])',
                },
                "min_reputation": {"type": "integer", "description": "Minimum reputation score (0-1000)"},
                "max_price_per_call": {**_AMOUNT, "description": "Maximum price per call in wei"},
                "status": {"type": "string", "enum": ["active", "inactive", "all"]},
                "search_text": {"type": "string"},
                "sort_by": {"type": "string", "enum": AGENT_SORT_FIELDS},
                "limit": {"type": "integer", "default": 20},
            },
        },
    ),
    Tool(
        name="search_capabilities",
        description="Search capabilities across all active agents.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {"type": "string"},
                "category": {"type": "string", "enum": CAPABILITY_CATEGORIES},
                "max_price": _AMOUNT,
                "limit": {"type": "integer", "default": 50},
            },
        },
    ),
    Tool(
        name="get_network_stats",
        description="Get overall statistics about the AgentDAO network.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="find_best_agent_for_task",
        description="Find the best matching agent for a task by capability, reputation and price.",
        inputSchema={
            "type": "object",
            "properties": {
                "task_description": {"type": "string"},
                "required_capabilities": {"type": "array", "items": {"type": "string"}},
                "budget": {**_AMOUNT, "description": "Maximum budget in wei"},
                "prioritize": {"type": "string", "enum": ["reputation", "price", "speed"]},
            },
            "required": ["task_description"],
        },
    ),
    Tool(
        name="get_capability_categories",
        description="Get all capability categories with descriptions and usage counts.",
        inputSchema={"type": "object", "properties": {}},
    ),
]

TOOLS = (
    AGENT_TOOLS
    + TASK_TOOLS
    + ESCROW_TOOLS
    + REPUTATION_TOOLS
    + GOVERNANCE_TOOLS
    + COLLABORATION_TOOLS
    + MESSAGING_TOOLS
    + DISCOVERY_TOOLS
)
