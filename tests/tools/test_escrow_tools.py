"""Tests for escrow tools."""

from __future__ import annotations

import pytest

DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture
def escrow_for(ok):
    """Fund an escrow for a task and return its id."""

    def _escrow_for(task_id, **overrides):
        arguments = {
            "task_id": task_id,
            "depositor_wallet": "0xCREATOR",
            "amount": "100",
            "beneficiaries": [{"address": "0xAAA", "share": 100}],
        }
        arguments.update(overrides)
        return ok("create_escrow", **arguments)["escrow_id"]

    return _escrow_for


def meet_all(ok, escrow_id):
    status = ok("get_escrow_status", escrow_id=escrow_id)
    for index in range(status["release_progress"]["total_conditions"]):
        ok("update_release_condition", escrow_id=escrow_id, condition_index=index, met=True, validator_wallet="0xV")


class TestCreateEscrow:
    """create_escrow and get_escrow_status tools."""

    def test_default_condition_is_validation(self, ok, open_task, escrow_for):
        escrow_id = escrow_for(open_task())
        status = ok("get_escrow_status", escrow_id=escrow_id)
        assert status["status"] == "funded"
        assert status["token"] == "0x0000000000000000000000000000000000000000"
        assert status["conditions"] == [{"type": "validation", "parameters": {}, "met": False}]
        assert status["release_progress"] == {"conditions_met": 0, "total_conditions": 1, "percentage": 0}

    def test_lookup_by_task(self, ok, open_task, escrow_for):
        task_id = open_task()
        escrow_id = escrow_for(task_id)
        assert ok("get_escrow_status", task_id=task_id)["escrow_id"] == escrow_id

    def test_lookup_requires_identifier(self, call):
        assert call("get_escrow_status")["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_escrow(self, call):
        assert call("get_escrow_status", task_id="nope")["error"]["code"] == "ESCROW_NOT_FOUND"

    @pytest.mark.parametrize(
        "beneficiaries",
        [
            [],
            [{"address": "0xA", "share": 60}, {"address": "0xB", "share": 30}],
            [{"address": "0xA", "share": 101}],
        ],
    )
    def test_shares_must_sum_to_100(self, call, beneficiaries):
        result = call(
            "create_escrow",
            task_id="t",
            depositor_wallet="0xD",
            amount="100",
            beneficiaries=beneficiaries,
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_condition_progress(self, ok, open_task, escrow_for):
        escrow_id = escrow_for(
            open_task(),
            release_conditions=[{"type": "validation"}, {"type": "deadline", "parameters": {"after": 1}}],
        )
        data = ok(
            "update_release_condition",
            escrow_id=escrow_id,
            condition_index=1,
            met=True,
            validator_wallet="0xV",
            proof="0xproof",
        )
        assert data["all_conditions_met"] is False
        status = ok("get_escrow_status", escrow_id=escrow_id)
        assert status["release_progress"]["percentage"] == 50
        assert status["conditions"][1]["parameters"] == {"after": 1, "proof": "0xproof"}

    def test_condition_index_out_of_range(self, call, open_task, escrow_for):
        escrow_id = escrow_for(open_task())
        result = call("update_release_condition", escrow_id=escrow_id, condition_index=3, met=True, validator_wallet="0xV")
        assert result["error"]["code"] == "INVALID_CONDITION_INDEX"


class TestRelease:
    """release_escrow tool."""

    def test_split_pays_shares_and_credits_agents(self, ok, register, open_task, escrow_for):
        alice = register("Alice", wallet="0xAAA")
        bob = register("Bob", wallet="0xBBB")
        task_id = open_task()
        escrow_id = escrow_for(
            task_id,
            beneficiaries=[{"address": "0xAAA", "share": 60}, {"address": "0xbbb", "share": 40}],
        )
        meet_all(ok, escrow_id)

        data = ok("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")
        assert [p["amount"] for p in data["payments"]] == ["60", "40"]
        assert data["status"] == "released"

        alice_rep = ok("get_agent_profile", agent_id=alice)["reputation"]
        bob_rep = ok("get_agent_profile", agent_id=bob)["reputation"]
        assert alice_rep["total_earnings"] == "60"
        assert bob_rep["total_earnings"] == "40"
        assert alice_rep["total_tasks"] == alice_rep["successful_tasks"] == 1

    def test_validated_task_becomes_paid(self, ok, open_task, escrow_for):
        task_id = open_task()
        ok("bid_on_task", task_id=task_id, agent_id="a1")
        submission = ok("submit_task_result", task_id=task_id, agent_id="a1", output={})
        ok("validate_submission", submission_id=submission["submission_id"], validator_address="0xV", approved=True)
        escrow_id = escrow_for(task_id)
        meet_all(ok, escrow_id)
        ok("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")
        assert ok("get_task_details", task_id=task_id)["status"] == "paid"

    def test_open_task_is_not_marked_paid(self, ok, open_task, escrow_for):
        task_id = open_task()
        escrow_id = escrow_for(task_id)
        meet_all(ok, escrow_id)
        ok("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")
        assert ok("get_task_details", task_id=task_id)["status"] == "open"

    def test_unmet_conditions_change_nothing(self, ok, call, register, open_task, escrow_for):
        agent_id = register(wallet="0xAAA")
        escrow_id = escrow_for(open_task())
        result = call("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")
        assert result["error"]["code"] == "CONDITIONS_NOT_MET"
        assert ok("get_escrow_status", escrow_id=escrow_id)["status"] == "funded"
        assert ok("get_agent_profile", agent_id=agent_id)["reputation"]["total_earnings"] == "0"

    def test_cannot_release_twice(self, ok, call, open_task, escrow_for):
        escrow_id = escrow_for(open_task())
        meet_all(ok, escrow_id)
        ok("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")
        assert call("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")["error"]["code"] == "INVALID_STATUS"


class TestRefundAndDispute:
    """refund_escrow, dispute_escrow and list_escrows tools."""

    def test_refund_after_cancel(self, ok, open_task, escrow_for):
        task_id = open_task()
        escrow_id = escrow_for(task_id)
        ok("cancel_task", task_id=task_id, creator_wallet="0xCREATOR")
        data = ok("refund_escrow", escrow_id=escrow_id, caller_wallet="0xcreator", reason="cancelled")
        assert data["status"] == "refunded"
        assert data["refund_amount"] == "100"
        assert data["refund_to"] == "0xCREATOR"

    def test_refund_after_deadline(self, ok, call, clock, open_task, escrow_for):
        escrow_id = escrow_for(open_task(deadline=clock.now + DAY_MS))
        assert call("refund_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")["error"]["code"] == "REFUND_NOT_ALLOWED"
        clock.advance(DAY_MS + 1)
        assert ok("refund_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")["status"] == "refunded"

    def test_only_depositor_refunds(self, call, open_task, escrow_for):
        escrow_id = escrow_for(open_task())
        assert call("refund_escrow", escrow_id=escrow_id, caller_wallet="0xAAA")["error"]["code"] == "UNAUTHORIZED"

    def test_dispute_marks_task(self, ok, open_task, escrow_for):
        task_id = open_task()
        escrow_id = escrow_for(task_id)
        data = ok("dispute_escrow", escrow_id=escrow_id, disputer_wallet="0xaaa", reason="late", evidence=["ipfs://x"])
        assert data["status"] == "disputed"
        assert data["disputed_by"] == "0xaaa"
        assert data["evidence"] == ["ipfs://x"]
        assert ok("get_task_details", task_id=task_id)["status"] == "disputed"
        assert ok("get_escrow_status", escrow_id=escrow_id)["dispute"]["reason"] == "late"

    def test_outsider_cannot_dispute(self, call, open_task, escrow_for):
        escrow_id = escrow_for(open_task())
        result = call("dispute_escrow", escrow_id=escrow_id, disputer_wallet="0xZZZ", reason="x")
        assert result["error"]["code"] == "UNAUTHORIZED"

    def test_released_escrow_cannot_be_disputed(self, ok, call, open_task, escrow_for):
        escrow_id = escrow_for(open_task())
        meet_all(ok, escrow_id)
        ok("release_escrow", escrow_id=escrow_id, caller_wallet="0xCREATOR")
        result = call("dispute_escrow", escrow_id=escrow_id, disputer_wallet="0xCREATOR", reason="x")
        assert result["error"]["code"] == "INVALID_STATUS"

    def test_list_escrows(self, ok, clock, open_task, escrow_for):
        first = escrow_for(open_task())
        clock.advance(10)
        second = escrow_for(open_task(), depositor_wallet="0xOTHER", beneficiaries=[{"address": "0xBBB", "share": 100}])
        ok("dispute_escrow", escrow_id=second, disputer_wallet="0xOTHER", reason="x")

        assert [e["escrow_id"] for e in ok("list_escrows")] == [second, first]
        assert [e["escrow_id"] for e in ok("list_escrows", wallet_address="0xaaa")] == [first]
        assert [e["escrow_id"] for e in ok("list_escrows", status="disputed")] == [second]
        assert len(ok("list_escrows", limit=1)) == 1
