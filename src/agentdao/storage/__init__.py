"""AgentDAO Storage - Entity stores over pluggable key-value backends.

Example usage:
    from agentdao.storage import get_state

    state = get_state()
    agent = state.agents.require(agent_id)
    agent.reputation.score += 5
    state.agents.save(agent)
"""

from .backend import BackendRegistry, MemoryBackend, StorageBackend
from .state import EconomyState, get_state, reset_state, system_clock
from .store import EntityStore, generate_id

__all__ = [
    "BackendRegistry",
    "EconomyState",
    "EntityStore",
    "MemoryBackend",
    "StorageBackend",
    "generate_id",
    "get_state",
    "reset_state",
    "system_clock",
]
