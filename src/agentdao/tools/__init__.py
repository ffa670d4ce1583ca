"""AgentDAO tools - definitions, handlers and dispatch.

Usage:
    from agentdao.tools import TOOLS, TOOL_HANDLERS, handle_tool
"""

from .definitions import TOOLS
from .handlers import TOOL_HANDLERS, handle_tool

__all__ = [
    "TOOLS",
    "TOOL_HANDLERS",
    "handle_tool",
]
