"""Tests for governance tools."""

from __future__ import annotations

import pytest

ETH = 10**18
DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture
def propose(ok):
    """Create a proposal and return its id."""

    def _propose(**overrides):
        arguments = {
            "proposer_wallet": "0xPROPOSER",
            "title": "Lower fees",
            "description": "Halve the marketplace fee",
            "category": "fee_adjustment",
        }
        arguments.update(overrides)
        return ok("create_proposal", **arguments)["proposal_id"]

    return _propose


class TestCreateProposal:
    """create_proposal and get_proposal tools."""

    def test_defaults(self, ok, clock, propose):
        proposal = ok("get_proposal", proposal_id=propose())
        assert proposal["status"] == "active"
        assert proposal["voting"]["quorum_required"] == 10
        assert proposal["voting"]["time_remaining"] == 3 * DAY_MS
        assert proposal["results"]["total_voters"] == 0
        assert proposal["results"]["for"]["percentage"] == 0

    def test_response(self, ok):
        data = ok(
            "create_proposal",
            proposer_wallet="0xP",
            title="Upgrade",
            description="",
            category="protocol_upgrade",
            actions=[{"target": "0xCONTRACT"}],
            quorum_required=25,
        )
        assert data["quorum_required"] == "25%"
        assert data["voting_start"].endswith("Z")
        assert ok("get_proposal", proposal_id=data["proposal_id"])["actions"] == [
            {"target": "0xCONTRACT", "calldata": "0x", "value": "0"}
        ]

    def test_invalid_category(self, call):
        result = call("create_proposal", proposer_wallet="0xP", title="t", description="d", category="coup")
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_proposal(self, call):
        assert call("get_proposal", proposal_id="nope")["error"]["code"] == "PROPOSAL_NOT_FOUND"


class TestVoting:
    """vote_on_proposal and get_voting_power tools."""

    def test_unregistered_wallet_has_base_power(self, ok):
        data = ok("get_voting_power", wallet_address="0xNOBODY")
        assert data["voting_power"] == str(ETH)
        assert data["voting_power_formatted"] == "1.0000 DAO"
        assert data["agent_registered"] is False

    def test_registered_agent_power(self, ok, register):
        register("Voter", wallet="0xVOTER", stake_amount=str(10 * ETH))
        data = ok("get_voting_power", wallet_address="0xvoter")
        # base 1 + reputation 100 * 1e14 + stake 10 ETH / 10
        assert data["voting_power"] == str(ETH + 10**16 + ETH)
        assert data["breakdown"] == {
            "base": "1.0000 DAO",
            "reputation_bonus": "0.0100 DAO",
            "stake_bonus": "1.0000 DAO",
        }
        assert data["agent_name"] == "Voter"

    def test_vote_updates_tallies(self, ok, propose):
        proposal_id = propose()
        data = ok("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xA", vote="for")
        assert data["voting_power"] == str(ETH)
        assert data["current_totals"] == {"for": "1.0000 DAO", "against": "0.0000 DAO", "abstain": "0.0000 DAO"}
        ok("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xB", vote="for")
        ok("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xC", vote="against", reason="no")

        results = ok("get_proposal", proposal_id=proposal_id)["results"]
        assert results["for"]["votes"] == str(2 * ETH)
        assert results["for"]["percentage"] == 66.66
        assert results["against"]["percentage"] == 33.33
        assert results["total_voters"] == 3

    def test_double_vote_leaves_totals(self, ok, call, propose):
        proposal_id = propose()
        ok("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xA", vote="for")
        second = call("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xa", vote="against")
        assert second["error"]["code"] == "ALREADY_VOTED"
        results = ok("get_proposal", proposal_id=proposal_id)["results"]
        assert results["for"]["votes"] == str(ETH)
        assert results["against"]["votes"] == "0"

    def test_vote_after_window_closes_proposal(self, ok, call, clock, propose):
        proposal_id = propose(voting_duration_days=1)
        clock.advance(DAY_MS)
        result = call("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xA", vote="for")
        assert result["error"]["code"] == "VOTING_ENDED"
        assert ok("get_proposal", proposal_id=proposal_id)["status"] == "defeated"

    def test_vote_on_closed_proposal(self, ok, call, propose):
        proposal_id = propose()
        ok("cancel_proposal", proposal_id=proposal_id, caller_wallet="0xPROPOSER")
        result = call("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xA", vote="for")
        assert result["error"]["code"] == "VOTING_CLOSED"

    def test_oversized_stake_is_rejected_before_voting(self, ok, call, propose):
        result = call(
            "register_agent",
            name="Whale",
            description="",
            wallet_address="0xWHALE",
            mcp_endpoint="https://whale/mcp",
            capabilities=[],
            stake_amount="9" * 400,
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert ok("get_voting_power", wallet_address="0xWHALE")["agent_registered"] is False

    def test_maximum_stakes_vote_and_read_back(self, ok, register, propose):
        whale = register("Whale", wallet="0xWHALE", stake_amount=str(2**256 - 1))
        ok("stake_tokens", agent_id=whale, amount=str(2**256 - 1))
        proposal_id = propose()

        data = ok("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xWHALE", vote="for")
        expected_power = ETH + 100 * 10**14 + (2 * (2**256 - 1)) // 10
        assert data["voting_power"] == str(expected_power)
        assert data["voting_power_formatted"].endswith(" DAO")

        assert ok("get_proposal", proposal_id=proposal_id)["results"]["for"]["votes"] == str(expected_power)
        assert ok("list_proposals")[0]["proposal_id"] == proposal_id
        assert ok("get_network_stats")["economics"]["total_staked"] == str(2 * (2**256 - 1))

    def test_non_finite_duration_is_rejected(self, call):
        for days in (float("inf"), float("nan"), 10**6):
            result = call(
                "create_proposal",
                proposer_wallet="0xP",
                title="t",
                description="d",
                category="custom",
                voting_duration_days=days,
            )
            assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_invalid_choice(self, call, propose):
        result = call("vote_on_proposal", proposal_id=propose(), voter_wallet="0xA", vote="maybe")
        assert result["error"]["code"] == "VALIDATION_ERROR"


class TestLifecycle:
    """list_proposals, execute_proposal and cancel_proposal tools."""

    def test_zero_day_proposal_closes_on_list(self, ok, propose):
        proposal_id = propose(voting_duration_days=0)
        listed = ok("list_proposals")
        assert listed[0]["proposal_id"] == proposal_id
        assert listed[0]["status"] == "defeated"

    def test_list_filters_and_order(self, ok, clock, propose):
        first = propose(category="custom")
        clock.advance(1)
        second = propose(proposer_wallet="0xOTHER")
        assert [p["proposal_id"] for p in ok("list_proposals")] == [second, first]
        assert [p["proposal_id"] for p in ok("list_proposals", category="custom")] == [first]
        assert [p["proposal_id"] for p in ok("list_proposals", proposer="0xother")] == [second]
        assert [p["proposal_id"] for p in ok("list_proposals", status="active", limit=1)] == [second]

    def test_execute_succeeded_proposal(self, ok, clock, propose):
        proposal_id = propose(actions=[{"target": "0x1"}, {"target": "0x2"}])
        ok("vote_on_proposal", proposal_id=proposal_id, voter_wallet="0xA", vote="for")
        clock.advance(3 * DAY_MS)
        data = ok("execute_proposal", proposal_id=proposal_id, caller_wallet="0xANYONE")
        assert data["status"] == "executed"
        assert data["actions_executed"] == 2
        assert ok("get_proposal", proposal_id=proposal_id)["execution_tx"] == data["execution_tx"]

    def test_cannot_execute_active_or_defeated(self, call, clock, propose):
        proposal_id = propose()
        assert call("execute_proposal", proposal_id=proposal_id, caller_wallet="0xA")["error"]["code"] == "INVALID_STATUS"
        clock.advance(3 * DAY_MS)
        assert call("execute_proposal", proposal_id=proposal_id, caller_wallet="0xA")["error"]["code"] == "INVALID_STATUS"

    def test_cancel_by_proposer_only(self, ok, call, propose):
        proposal_id = propose()
        assert call("cancel_proposal", proposal_id=proposal_id, caller_wallet="0xOTHER")["error"]["code"] == "UNAUTHORIZED"
        assert ok("cancel_proposal", proposal_id=proposal_id, caller_wallet="0xproposer")["status"] == "cancelled"

    def test_cannot_cancel_closed_proposal(self, call, propose):
        proposal_id = propose(voting_duration_days=0)
        result = call("cancel_proposal", proposal_id=proposal_id, caller_wallet="0xPROPOSER")
        assert result["error"]["code"] == "CANNOT_CANCEL"
