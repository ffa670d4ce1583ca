"""Tests for agent messaging tools."""

from __future__ import annotations

import pytest


@pytest.fixture
def pair(register):
    """Two registered agents, (alice, bob)."""
    return register("Alice"), register("Bob")


@pytest.fixture
def send(ok):
    def _send(from_id, to_id, type="custom", payload=None, **extra):
        return ok(
            "send_agent_message",
            from_agent_id=from_id,
            to_agent_id=to_id,
            type=type,
            payload=payload if payload is not None else {"text": "hi"},
            **extra,
        )["message_id"]

    return _send


class TestSend:
    """send_agent_message and get_inbox tools."""

    def test_send_and_receive(self, ok, pair, send):
        alice, bob = pair
        data = ok("send_agent_message", from_agent_id=alice, to_agent_id=bob, type="task_proposal", payload={"task": "t1"})
        assert data["from"] == "Alice"
        assert data["to"] == "Bob"
        assert data["status"] == "sent"
        assert data["expires_at"] is None

        inbox = ok("get_inbox", agent_id=bob)
        assert inbox["total_messages"] == 1
        assert inbox["unread_count"] == 1
        message = inbox["messages"][0]
        assert message["from"] == {"agent_id": alice, "name": "Alice"}
        assert message["payload"] == {"task": "t1"}
        assert ok("get_inbox", agent_id=alice)["total_messages"] == 0

    def test_unknown_sender_or_recipient(self, call, pair):
        alice, _ = pair
        result = call("send_agent_message", from_agent_id="ghost", to_agent_id=alice, type="custom", payload={})
        assert result["error"]["code"] == "SENDER_NOT_FOUND"
        result = call("send_agent_message", from_agent_id=alice, to_agent_id="ghost", type="custom", payload={})
        assert result["error"]["code"] == "RECIPIENT_NOT_FOUND"

    def test_invalid_type(self, call, pair):
        alice, bob = pair
        result = call("send_agent_message", from_agent_id=alice, to_agent_id=bob, type="spam", payload={})
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_inbox_newest_first_with_filters(self, ok, clock, pair, send):
        alice, bob = pair
        first = send(alice, bob, type="task_proposal")
        clock.advance(1)
        second = send(alice, bob)
        ok("get_message", message_id=first, agent_id=bob)

        assert [m["message_id"] for m in ok("get_inbox", agent_id=bob)["messages"]] == [second, first]
        assert [m["message_id"] for m in ok("get_inbox", agent_id=bob, unread_only=True)["messages"]] == [second]
        assert [m["message_id"] for m in ok("get_inbox", agent_id=bob, type="task_proposal")["messages"]] == [first]
        assert [m["message_id"] for m in ok("get_inbox", agent_id=bob, status="read")["messages"]] == [first]
        assert len(ok("get_inbox", agent_id=bob, limit=1)["messages"]) == 1

    def test_expiry_bounds(self, call, pair):
        alice, bob = pair
        for expires_in in (0, 10**12, float("inf")):
            result = call(
                "send_agent_message",
                from_agent_id=alice,
                to_agent_id=bob,
                type="custom",
                payload={},
                expires_in=expires_in,
            )
            assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_expiry_on_read(self, ok, clock, pair, send):
        alice, bob = pair
        message_id = send(alice, bob, expires_in=60)
        clock.advance(60 * 1000)
        assert ok("get_inbox", agent_id=bob)["messages"][0]["status"] == "sent"
        clock.advance(1)
        inbox = ok("get_inbox", agent_id=bob)
        assert inbox["messages"][0]["status"] == "expired"
        assert inbox["unread_count"] == 0
        assert ok("get_message", message_id=message_id, agent_id=bob)["status"] == "expired"


class TestReadAndReply:
    """get_message and reply_to_message tools."""

    def test_recipient_read_marks_read(self, ok, pair, send):
        alice, bob = pair
        message_id = send(alice, bob)
        assert ok("get_message", message_id=message_id, agent_id=alice)["status"] == "sent"
        data = ok("get_message", message_id=message_id, agent_id=bob)
        assert data["status"] == "read"
        assert data["from"]["name"] == "Alice"
        assert data["to"]["wallet_address"].startswith("0x")

    def test_outsider_cannot_read(self, call, register, pair, send):
        alice, bob = pair
        message_id = send(alice, bob)
        result = call("get_message", message_id=message_id, agent_id=register("Eve"))
        assert result["error"]["code"] == "UNAUTHORIZED"

    def test_unknown_message(self, call, pair):
        assert call("get_message", message_id="nope", agent_id=pair[0])["error"]["code"] == "MESSAGE_NOT_FOUND"

    def test_reply_maps_type_and_links(self, ok, pair, send):
        alice, bob = pair
        original = send(alice, bob, type="task_proposal")
        data = ok("reply_to_message", original_message_id=original, agent_id=bob, payload={"price": "10"})
        assert data["type"] == "task_acceptance"
        assert data["to"] == alice

        reply = ok("get_message", message_id=data["reply_id"], agent_id=alice)
        assert reply["in_reply_to"] == original
        assert reply["payload"] == {"price": "10", "in_reply_to": original}
        assert ok("get_message", message_id=original, agent_id=alice)["status"] == "responded"

    def test_reply_to_other_types_is_custom(self, ok, pair, send):
        alice, bob = pair
        original = send(alice, bob, type="payment_request")
        assert ok("reply_to_message", original_message_id=original, agent_id=bob, payload={})["type"] == "custom"

    def test_only_recipient_replies(self, call, pair, send):
        alice, bob = pair
        original = send(alice, bob)
        result = call("reply_to_message", original_message_id=original, agent_id=alice, payload={})
        assert result["error"]["code"] == "UNAUTHORIZED"

    def test_reply_after_read_and_again(self, ok, pair, send):
        alice, bob = pair
        original = send(alice, bob)
        assert ok("get_message", message_id=original, agent_id=bob)["status"] == "read"
        ok("reply_to_message", original_message_id=original, agent_id=bob, payload={"n": 1})
        ok("reply_to_message", original_message_id=original, agent_id=bob, payload={"n": 2})
        assert ok("get_message", message_id=original, agent_id=bob)["status"] == "responded"
        assert ok("get_inbox", agent_id=alice)["total_messages"] == 2

    def test_cannot_reply_to_expired(self, call, clock, pair, send):
        alice, bob = pair
        original = send(alice, bob, expires_in=1)
        clock.advance(1001)
        result = call("reply_to_message", original_message_id=original, agent_id=bob, payload={})
        assert result["error"]["code"] == "INVALID_STATUS"


class TestBroadcastAndQuery:
    """broadcast_message, query_agent_capability and get_conversation tools."""

    def test_broadcast_to_all(self, ok, register):
        sender = register("Sender")
        coder = register("Coder", capabilities=[{"name": "Code", "category": "coding"}])
        researcher = register("Researcher")
        data = ok("broadcast_message", from_agent_id=sender, type="custom", payload={"news": 1})
        assert data["recipient_count"] == 2
        assert data["from"] == "Sender"
        for agent_id in (coder, researcher):
            message = ok("get_inbox", agent_id=agent_id)["messages"][0]
            assert message["payload"] == {"news": 1, "is_broadcast": True}
        assert ok("get_inbox", agent_id=sender)["total_messages"] == 0

    def test_broadcast_filters(self, ok, register):
        sender = register("Sender")
        coder = register("Coder", capabilities=[{"name": "Code", "category": "coding"}])
        register("Researcher")
        ok("submit_attestation", attestor_id="x", subject_id=coder, rating=5, category="task_quality")

        by_category = ok("broadcast_message", from_agent_id=sender, type="custom", payload={}, filter_capabilities=["coding"])
        assert by_category["recipient_count"] == 1
        by_score = ok("broadcast_message", from_agent_id=sender, type="custom", payload={}, min_reputation=101)
        assert by_score["recipient_count"] == 1

    def test_broadcast_explicit_list_skips_unknown(self, ok, register):
        sender = register("Sender")
        target = register("Target")
        register("Bystander")
        data = ok(
            "broadcast_message",
            from_agent_id=sender,
            to_agent_ids=[target, "ghost", sender],
            type="custom",
            payload={},
        )
        assert data["recipient_count"] == 1

    def test_broadcast_all_keyword(self, ok, register):
        sender = register()
        register()
        assert ok("broadcast_message", from_agent_id=sender, to_agent_ids=["all"], type="custom", payload={})["recipient_count"] == 1

    def test_query_capability(self, ok, pair):
        alice, bob = pair
        data = ok(
            "query_agent_capability",
            from_agent_id=alice,
            to_agent_id=bob,
            capability_name="research",
            task_description="lit review",
        )
        assert data["has_capability"] is True
        assert data["status"] == "query_sent"
        message = ok("get_message", message_id=data["query_id"], agent_id=bob)
        assert message["type"] == "capability_query"
        assert message["payload"]["request_quote"] is True

    def test_query_expires_after_a_day(self, ok, clock, pair):
        alice, bob = pair
        data = ok("query_agent_capability", from_agent_id=alice, to_agent_id=bob, capability_name="trading")
        assert data["has_capability"] is False
        clock.advance(24 * 60 * 60 * 1000 + 1)
        assert ok("get_message", message_id=data["query_id"], agent_id=bob)["status"] == "expired"

    def test_query_requires_both_agents(self, call, pair):
        alice, _ = pair
        result = call("query_agent_capability", from_agent_id=alice, to_agent_id="ghost", capability_name="x")
        assert result["error"]["code"] == "RECIPIENT_NOT_FOUND"

    def test_conversation(self, ok, clock, register, pair, send):
        alice, bob = pair
        first = send(alice, bob)
        clock.advance(1)
        ok("reply_to_message", original_message_id=first, agent_id=bob, payload={})
        clock.advance(1)
        send(alice, register("Carol"))

        data = ok("get_conversation", agent_id=alice, other_agent_id=bob)
        assert data["participants"]["other"]["name"] == "Bob"
        assert [m["direction"] for m in data["messages"]] == ["outgoing", "incoming"]
        assert data["total_messages"] == 2

        latest = ok("get_conversation", agent_id=alice, other_agent_id=bob, limit=1)
        assert [m["direction"] for m in latest["messages"]] == ["incoming"]
        assert latest["total_messages"] == 2
