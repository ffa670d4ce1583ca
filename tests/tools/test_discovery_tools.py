"""Tests for discovery tools."""

from __future__ import annotations

ETH = 10**18


def cap(name, category, price="1000", description=""):
    return {"name": name, "category": category, "price_per_call": price, "description": description}


def boost(ok, agent_id, times=1):
    for _ in range(times):
        ok("submit_attestation", attestor_id="fan", subject_id=agent_id, rating=5, category="task_quality")


class TestDiscoverAgents:
    """discover_agents tool."""

    def test_by_category(self, ok, register):
        researcher = register("Researcher", capabilities=[cap("Deep dive", "research")])
        register("Coder", capabilities=[cap("Solidity", "coding")])
        data = ok("discover_agents", capabilities=["research"])
        assert [a["agent_id"] for a in data["agents"]] == [researcher]
        assert data["total_found"] == 1
        assert data["filters"]["capabilities"] == ["research"]

    def test_by_capability_name(self, ok, register):
        register("Coder", capabilities=[cap("Solidity audit", "coding")])
        register("Other", capabilities=[cap("Charts", "analysis")])
        assert [a["name"] for a in ok("discover_agents", capabilities=["solidity"])["agents"]] == ["Coder"]

    def test_inactive_hidden_unless_asked(self, ok, register):
        register("Active")
        idle = register("Idle")
        ok("update_agent_profile", agent_id=idle, updates={"status": "inactive"})
        assert [a["name"] for a in ok("discover_agents")["agents"]] == ["Active"]
        assert [a["name"] for a in ok("discover_agents", status="inactive")["agents"]] == ["Idle"]
        assert ok("discover_agents", status="all")["total_found"] == 2

    def test_reputation_price_and_text(self, ok, register):
        star = register("Star", capabilities=[cap("Whale tracker", "analysis", "500")], description="Follows whales")
        register("Pricey", capabilities=[cap("Whale tracker", "analysis", str(ETH))])
        boost(ok, star)
        assert [a["name"] for a in ok("discover_agents", min_reputation=105)["agents"]] == ["Star"]
        assert [a["name"] for a in ok("discover_agents", max_price_per_call="1000")["agents"]] == ["Star"]
        assert ok("discover_agents", search_text="WHALE")["total_found"] == 2
        assert ok("discover_agents", search_text="follows")["total_found"] == 1

    def test_sorting(self, ok, register):
        cheap = register("Cheap", capabilities=[cap("x", "data", "1")])
        bare = register("Bare", capabilities=[])
        famous = register("Famous", capabilities=[cap("x", "data", "999")])
        boost(ok, famous, 2)
        assert [a["agent_id"] for a in ok("discover_agents", sort_by="price")["agents"]] == [cheap, famous, bare]
        assert ok("discover_agents")["agents"][0]["agent_id"] == famous
        assert len(ok("discover_agents", limit=2)["agents"]) == 2

    def test_description_is_summarized(self, ok, register):
        register(description="d" * 300)
        assert ok("discover_agents")["agents"][0]["description"] == "d" * 200 + "..."

    def test_invalid_sort(self, call):
        assert call("discover_agents", sort_by="vibes")["error"]["code"] == "VALIDATION_ERROR"


class TestSearchCapabilities:
    """search_capabilities tool."""

    def test_search(self, ok, register):
        low = register("Low", capabilities=[cap("Sentiment", "analysis", "50", "social sentiment")])
        high = register("High", capabilities=[cap("Sentiment pro", "analysis", "500"), cap("Posts", "content")])
        boost(ok, high)

        data = ok("search_capabilities", query="sentiment")
        assert data["total_found"] == 2
        assert [r["agent"]["agent_id"] for r in data["capabilities"]] == [high, low]
        assert data["capabilities"][0]["capability"]["name"] == "Sentiment pro"

        assert ok("search_capabilities", category="content")["total_found"] == 1
        assert [r["agent"]["name"] for r in ok("search_capabilities", max_price="100")["capabilities"]] == ["Low"]

    def test_limit_does_not_change_total(self, ok, register):
        for _ in range(3):
            register()
        data = ok("search_capabilities", limit=1)
        assert len(data["capabilities"]) == 1
        assert data["total_found"] == 3


class TestNetworkStats:
    """get_network_stats and get_capability_categories tools."""

    def test_empty_network(self, ok):
        data = ok("get_network_stats")
        assert data["network"]["total_agents"] == 0
        assert data["network"]["average_reputation"] == 0
        assert data["tasks"]["success_rate"] == 0
        assert data["top_categories"] == []

    def test_totals(self, ok, register):
        register(stake_amount=str(ETH), capabilities=[cap("a", "research"), cap("b", "research"), cap("c", "coding")])
        idle = register(stake_amount=str(ETH // 2))
        ok("update_agent_profile", agent_id=idle, updates={"status": "inactive"})

        data = ok("get_network_stats")
        assert data["network"] == {
            "total_agents": 2,
            "active_agents": 1,
            "total_capabilities": 4,
            "average_reputation": 100,
        }
        assert data["economics"]["total_staked_formatted"] == "1.5000 ETH"
        assert data["category_distribution"] == {"research": 3, "coding": 1}
        assert data["top_categories"][0] == {"category": "research", "count": 3}

    def test_categories(self, ok, register):
        register(capabilities=[cap("a", "research"), cap("b", "research")])
        register(capabilities=[cap("c", "research")])
        data = ok("get_capability_categories")
        assert data["total_categories"] == 10
        research = next(c for c in data["categories"] if c["id"] == "research")
        assert research["capability_count"] == 3
        assert research["agent_count"] == 2
        assert research["examples"]


class TestFindBestAgent:
    """find_best_agent_for_task tool."""

    def test_best_by_match_score(self, ok, register):
        plain = register("Plain")
        star = register("Star")
        boost(ok, star, 4)
        data = ok("find_best_agent_for_task", task_description="research tokenomics", required_capabilities=["research"])
        assert data["found"] is True
        assert data["best_match"]["agent_id"] == star
        assert [a["agent_id"] for a in data["alternatives"]] == [plain]
        assert data["total_candidates"] == 2

    def test_prioritize_price(self, ok, register):
        register("Pricey", capabilities=[cap("Research", "research", "900")])
        cheap = register("Cheap", capabilities=[cap("Research", "research", "5")])
        data = ok("find_best_agent_for_task", task_description="anything", prioritize="price")
        assert data["best_match"]["agent_id"] == cheap

    def test_budget_excludes_expensive(self, ok, register):
        register("Pricey", capabilities=[cap("Research", "research", str(ETH))])
        affordable = register("Affordable", capabilities=[cap("Research", "research", "100")])
        data = ok("find_best_agent_for_task", task_description="x", budget="1000")
        assert data["best_match"]["agent_id"] == affordable
        assert data["total_candidates"] == 1

    def test_requires_all_capabilities(self, ok, register):
        register(capabilities=[cap("Research", "research")])
        data = ok("find_best_agent_for_task", task_description="x", required_capabilities=["research", "coding"])
        assert data["found"] is False
        assert "suggestion" in data
