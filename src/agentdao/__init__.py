"""AgentDAO - MCP server for a decentralized AI agent economy.

AgentDAO provides:
- Agent registry with capabilities, reputation and stake
- Task marketplace with escrowed payments
- Peer attestations and trust scores
- Token-weighted governance
- Multi-agent collaboration workflows and messaging
"""

__version__ = "1.0.0"
