"""Tests for agent registry tools."""

from __future__ import annotations


class TestRegisterAgent:
    """register_agent tool."""

    def test_registers_with_starting_reputation(self, ok, register):
        agent_id = register("Scout", stake_amount="500")
        profile = ok("get_agent_profile", agent_id=agent_id)
        assert profile["name"] == "Scout"
        assert profile["status"] == "active"
        assert profile["reputation"]["score"] == 100
        assert profile["reputation"]["total_stake"] == "500"
        assert profile["supported_protocols"] == ["mcp-1.0", "agentdao-1.0"]

    def test_response_shape(self, ok):
        data = ok(
            "register_agent",
            name="Solo",
            description="",
            wallet_address="0xSOLO",
            mcp_endpoint="https://solo/mcp",
            capabilities=[],
        )
        assert data["wallet_address"] == "0xSOLO"
        assert data["transaction_hash"].startswith("0x")
        assert len(data["transaction_hash"]) == 66

    def test_capability_defaults(self, ok):
        data = ok(
            "register_agent",
            name="Bare",
            description="d",
            wallet_address="0xB",
            mcp_endpoint="https://b/mcp",
            capabilities=[{"name": "Anything"}],
        )
        cap = ok("get_agent_profile", agent_id=data["agent_id"])["capabilities"][0]
        assert cap["category"] == "custom"
        assert cap["price_per_call"] == "0"
        assert cap["id"]

    def test_missing_capabilities(self, call):
        result = call("register_agent", name="X", description="d", wallet_address="0x1", mcp_endpoint="e")
        assert result["success"] is False
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert result["error"]["details"] == {"field": "capabilities"}

    def test_invalid_category_names_capability(self, call):
        result = call(
            "register_agent",
            name="X",
            description="d",
            wallet_address="0x1",
            mcp_endpoint="e",
            capabilities=[{"name": "x", "category": "astrology"}],
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert result["error"]["message"].startswith("capabilities[0]:")


class TestAgentProfile:
    """get_agent_profile and update_agent_profile tools."""

    def test_lookup_by_wallet_is_case_insensitive(self, ok, register):
        agent_id = register(wallet="0xABCDEF")
        assert ok("get_agent_profile", wallet_address="0xabcdef")["agent_id"] == agent_id

    def test_requires_an_identifier(self, call):
        assert call("get_agent_profile")["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_agent(self, call):
        result = call("get_agent_profile", agent_id="nope")
        assert result["error"]["code"] == "AGENT_NOT_FOUND"

    def test_update_fields(self, ok, register, clock):
        agent_id = register()
        clock.advance(1000)
        data = ok("update_agent_profile", agent_id=agent_id, updates={"name": "Renamed", "status": "inactive"})
        assert data["updated_fields"] == ["name", "status"]
        profile = ok("get_agent_profile", agent_id=agent_id)
        assert profile["name"] == "Renamed"
        assert profile["status"] == "inactive"
        assert profile["updated_at"] == profile["created_at"] + 1000

    def test_update_rejects_unknown_field(self, call, register):
        result = call("update_agent_profile", agent_id=register(), updates={"reputation": 1000})
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_update_cannot_suspend(self, call, register):
        result = call("update_agent_profile", agent_id=register(), updates={"status": "suspended"})
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_update_unknown_agent(self, call):
        result = call("update_agent_profile", agent_id="nope", updates={"name": "x"})
        assert result["error"]["code"] == "AGENT_NOT_FOUND"


class TestCapabilitiesAndStake:
    """add_agent_capability, list_my_agents and stake_tokens tools."""

    def test_add_capability(self, ok, register):
        agent_id = register()
        data = ok(
            "add_agent_capability",
            agent_id=agent_id,
            capability={"name": "Audit", "description": "Smart contract audits", "category": "security", "price_per_call": "7"},
        )
        caps = ok("get_agent_profile", agent_id=agent_id)["capabilities"]
        assert len(caps) == 2
        assert caps[-1]["id"] == data["capability_id"]
        assert caps[-1]["category"] == "security"

    def test_add_capability_requires_details(self, call, register):
        result = call("add_agent_capability", agent_id=register(), capability={"name": "Audit"})
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_list_my_agents(self, ok, register):
        register("One", wallet="0xOWNER")
        register("Two", wallet="0xowner")
        register("Other", wallet="0xSOMEONE")
        agents = ok("list_my_agents", wallet_address="0xOwner")
        assert [a["name"] for a in agents] == ["One", "Two"]
        assert agents[0]["reputation"] == 100
        assert agents[0]["capabilities"] == 1

    def test_stake_accumulates(self, ok, register):
        agent_id = register(stake_amount="100")
        data = ok("stake_tokens", agent_id=agent_id, amount="50")
        assert data["previous_stake"] == "100"
        assert data["new_stake"] == "150"
        data = ok("stake_tokens", agent_id=agent_id, amount=25)
        assert data["new_stake"] == "175"

    def test_stake_rejects_negative(self, call, register):
        result = call("stake_tokens", agent_id=register(), amount="-5")
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_stake_unknown_agent(self, call):
        assert call("stake_tokens", agent_id="nope", amount="1")["error"]["code"] == "AGENT_NOT_FOUND"
