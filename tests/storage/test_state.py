"""Tests for the economy state side tables."""

from __future__ import annotations

from agentdao.core.models import Agent, Message, Vote
from agentdao.storage import EconomyState, get_state, reset_state


def add_agent(state: EconomyState, agent_id: str, wallet: str) -> Agent:
    agent = Agent(agent_id=agent_id, wallet_address=wallet, name=agent_id, description="", mcp_endpoint="")
    state.agents.create(agent)
    return agent


class TestGlobalState:
    def test_reset_installs_given_state(self, state):
        assert get_state() is state
        fresh = EconomyState(backend="memory")
        assert reset_state(fresh) is fresh
        assert get_state() is fresh

    def test_clock_is_injected(self, state, clock):
        start = state.now()
        clock.advance(500)
        assert state.now() == start + 500


class TestAgentLookup:
    def test_find_by_wallet_ignores_case(self, state):
        add_agent(state, "a1", "0xAbCdEf")
        assert state.find_agent_by_wallet("0xabcdef").agent_id == "a1"
        assert state.find_agent_by_wallet("") is None

    def test_resolve_prefers_id(self, state):
        add_agent(state, "a1", "0x1")
        add_agent(state, "a2", "0x2")
        assert state.resolve_agent("a1", "0x2").agent_id == "a1"
        assert state.resolve_agent("missing", "0x2").agent_id == "a2"
        assert state.resolve_agent(None, None) is None


class TestVotes:
    def test_ballot_records_by_lowercase_wallet(self, state):
        state.open_ballot("p1")
        assert state.get_votes("p1") == {}
        state.record_vote("p1", "0xVoter", Vote(vote="for", weight="10", timestamp=1))
        assert state.has_voted("p1", "0xvoter")
        assert state.has_voted("p1", "0xVOTER")
        assert state.get_votes("p1")["0xvoter"].weight == "10"

    def test_unopened_ballot(self, state):
        assert not state.has_voted("nope", "0x1")
        assert state.get_votes("nope") == {}


class TestInboxes:
    def test_deliver_keeps_arrival_order(self, state):
        for n in (1, 2):
            state.messages.create(
                Message(
                    message_id=f"m{n}",
                    from_agent="a",
                    to_agent="b",
                    type="custom",
                    payload={"n": n},
                    signature="0x",
                    timestamp=n,
                )
            )
            state.deliver("b", f"m{n}")
        assert [m.message_id for m in state.inbox("b")] == ["m1", "m2"]
        assert state.inbox("a") == []

    def test_dangling_ids_are_skipped(self, state):
        state.deliver("b", "ghost")
        assert state.inbox("b") == []
