"""Centralized configurable defaults for AgentDAO.

All tunable parameters in one place. Values that operators may want to change
without code edits can be overridden through ``AGENTDAO_*`` environment
variables.
"""

from __future__ import annotations

import os

# Reputation
STARTING_REPUTATION = int(os.environ.get("AGENTDAO_STARTING_REPUTATION", "100"))
MIN_REPUTATION = 0
MAX_REPUTATION = 1000
ATTESTATION_WEIGHT = int(os.environ.get("AGENTDAO_ATTESTATION_WEIGHT", "5"))  # (rating - 3) * weight
NEUTRAL_RATING = 3
MAX_COMMENT_LENGTH = 500

# Governance
WEI_PER_TOKEN = 10**18
BASE_VOTING_POWER = WEI_PER_TOKEN
REPUTATION_POWER_UNIT = 10**14  # per reputation point
STAKE_POWER_DIVISOR = 10
DEFAULT_VOTING_DAYS = float(os.environ.get("AGENTDAO_DEFAULT_VOTING_DAYS", "3"))
DEFAULT_QUORUM = int(os.environ.get("AGENTDAO_DEFAULT_QUORUM", "10"))
MAX_VOTING_DAYS = 3650

# Tasks
DEFAULT_MAX_AGENTS = 1
MAX_AGENTS_LIMIT = 100
SUMMARY_LENGTH = 200

# Messaging
CAPABILITY_QUERY_TTL_MS = 24 * 60 * 60 * 1000
MAX_MESSAGE_TTL_S = 10 * 365 * 24 * 60 * 60

# Collaboration
DEFAULT_DELEGATION_SHARE = 10

# Query defaults
DEFAULT_LIST_LIMIT = 20
DEFAULT_SEARCH_LIMIT = 50
DEFAULT_LEADERBOARD_LIMIT = 10
RECENT_ATTESTATIONS = 5

# Addresses
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
SUPPORTED_PROTOCOLS = ["mcp-1.0", "agentdao-1.0"]

# Infrastructure
STORAGE_BACKEND = os.environ.get("AGENTDAO_STORAGE_BACKEND", "memory")
LOG_LEVEL = os.environ.get("AGENTDAO_LOG_LEVEL", "INFO")
