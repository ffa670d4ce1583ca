"""MCP Server for the AgentDAO agent economy.

Provides tools for:
- Agent registry (register, profile, capabilities, staking)
- Task marketplace (create, bid, submit, validate)
- Escrow (fund, release, refund, dispute)
- Reputation (attestations, trust, leaderboard)
- Governance (proposals, voting)
- Collaboration (multi-agent workflows)
- Messaging (inbox, replies, broadcasts)
- Discovery (search and matching)
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Resource, TextContent, Tool

from . import __version__
from .core.logging import configure_logging
from .core.responses import ToolContext, error_response
from .resources import RESOURCES, read_resource_json
from .tools import TOOLS, handle_tool

logger = logging.getLogger(__name__)

# Initialize the MCP server
server = Server("agentdao")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return TOOLS


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """Handle tool calls."""
    context = ToolContext()
    try:
        result = handle_tool(name, arguments or {}, context)
    except Exception as e:
        logger.exception(f"Error in tool {name}")
        result = error_response("TOOL_EXECUTION_ERROR", str(e))
    return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List live economy snapshots."""
    return [
        Resource(uri=r.uri, name=r.name, description=r.description, mimeType=r.mime_type)
        for r in RESOURCES
    ]


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read a resource as JSON."""
    return read_resource_json(str(uri))


def run() -> None:
    """Run the MCP server."""
    configure_logging()
    logger.info("AgentDAO MCP server %s starting with %d tools...", __version__, len(TOOLS))

    async def main():
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    asyncio.run(main())


if __name__ == "__main__":
    run()
