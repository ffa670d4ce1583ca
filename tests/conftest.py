"""Shared fixtures for AgentDAO tests."""

from __future__ import annotations

from typing import Any

import pytest

from agentdao.core.responses import ToolContext
from agentdao.storage import EconomyState, reset_state
from agentdao.tools import handle_tool

START_MS = 1_700_000_000_000
DAY_MS = 24 * 60 * 60 * 1000
ETH = 10**18


class FakeClock:
    """Controllable millisecond clock."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def state(clock):
    """Fresh economy for every test."""
    fresh = reset_state(EconomyState(backend="memory", clock=clock))
    yield fresh
    reset_state()


@pytest.fixture
def context() -> ToolContext:
    return ToolContext(request_id="req-1", session_id="sess-1", timestamp=START_MS)


@pytest.fixture
def call(context):
    """Invoke a tool through dispatch and return its envelope."""

    def _call(tool: str, /, **arguments: Any) -> dict[str, Any]:
        return handle_tool(tool, arguments, context)

    return _call


@pytest.fixture
def ok(call):
    """Invoke a tool and return its data, failing the test on an error envelope."""

    def _ok(tool: str, /, **arguments: Any) -> Any:
        result = call(tool, **arguments)
        assert result["success"], result
        return result["data"]

    return _ok


@pytest.fixture
def register(ok):
    """Register an agent with sensible defaults and return its id."""
    counter = {"n": 0}

    def _register(
        name: str | None = None,
        *,
        wallet: str | None = None,
        capabilities: list[dict[str, Any]] | None = None,
        **extra: Any,
    ) -> str:
        counter["n"] += 1
        n = counter["n"]
        data = ok(
            "register_agent",
            name=name or f"Agent {n}",
            description=extra.pop("description", f"Test agent number {n}"),
            wallet_address=wallet or f"0x{n:040x}",
            mcp_endpoint=f"https://agent{n}.example/mcp",
            capabilities=capabilities
            if capabilities is not None
            else [{"name": "Research", "category": "research", "price_per_call": "1000"}],
            **extra,
        )
        return data["agent_id"]

    return _register


@pytest.fixture
def open_task(ok, clock):
    """Create an open task and return its id."""

    def _open_task(**overrides: Any) -> str:
        arguments: dict[str, Any] = {
            "title": "Summarize a paper",
            "description": "Read and summarize",
            "reward": str(ETH),
            "deadline": clock.now + 7 * DAY_MS,
            "creator_wallet": "0xCREATOR",
            "required_capabilities": ["research"],
        }
        arguments.update(overrides)
        return ok("create_task", **arguments)["task_id"]

    return _open_task
