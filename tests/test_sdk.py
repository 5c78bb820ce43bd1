"""
Tests for the Explorer facade (page and detail loaders).
"""

import pytest
from unittest.mock import AsyncMock, Mock

from agent0_explorer import Explorer, ExplorerConfig
from agent0_explorer.core.config import DEFAULT_IPFS_GATEWAY, DEFAULT_SUBGRAPH_URL


def _agents_response(count):
    return {"agents": [
        {
            "id": f"11155111:{i}",
            "chainId": "11155111",
            "agentId": str(i),
            "owner": "0xabc",
            "agentURI": None,
            "createdAt": "1700000000",
            "updatedAt": "1700000000",
            "totalFeedback": "0",
            "registrationFile": {"name": f"Agent {i}"},
        }
        for i in range(count)
    ]}


def _route(responses):
    """Answer each query according to which root field it selects."""
    def query(text):
        if "globalStats" in text:
            return responses["globalStats"]
        if "agent(id:" in text:
            return responses["agent"]
        if "skip:" in text:
            return responses["agents"]
        return responses["count"]
    return query


class TestExplorer:

    @pytest.fixture
    def subgraph_client(self):
        return Mock()

    @pytest.fixture
    def explorer(self, subgraph_client):
        resolver = Mock()
        resolver.resolve_many = AsyncMock(side_effect=lambda uris: [None for _ in uris])
        return Explorer(
            config=ExplorerConfig(subgraph_url="https://subgraph.example.com"),
            subgraph_client=subgraph_client,
            resolver=resolver,
        )

    def test_unfiltered_page_uses_global_counter(self, explorer, subgraph_client):
        subgraph_client.query.side_effect = _route({
            "agents": _agents_response(24),
            "globalStats": {"globalStats": {"totalAgents": "100", "totalFeedback": "7"}},
        })

        page = explorer.loadExplorerPage(page=2)

        assert page.page == 2
        assert page.pageSize == 24
        assert page.totalAgents == 100
        assert page.totalPages == 5
        assert page.hasActiveFilters is False
        assert len(page.agents) == 24
        queries = [call[0][0] for call in subgraph_client.query.call_args_list]
        assert len(queries) == 2
        assert "skip: 24" in queries[0]

    def test_filtered_page_uses_filtered_count(self, explorer, subgraph_client):
        subgraph_client.query.side_effect = _route({
            "agents": _agents_response(3),
            "globalStats": {"globalStats": {"totalAgents": "100", "totalFeedback": "7"}},
            "count": {"agents": [{"id": "a"}, {"id": "b"}, {"id": "c"}]},
        })

        page = explorer.loadExplorerPage(search="  bot ", hasEndpoint=True, perPage=12)

        assert page.hasActiveFilters is True
        assert page.searchTerm == "bot"
        assert page.filters.search == "bot"
        assert page.totalAgents == 3
        assert page.totalPages == 1
        assert page.pageSize == 12
        assert subgraph_client.query.call_count == 3

    @pytest.mark.parametrize("page_arg, per_page, expected_page, expected_size", [
        (0, 24, 1, 24),
        (-3, 48, 1, 48),
        (1, 30, 1, 24),
        (3, 99, 3, 99),
    ])
    def test_page_arguments_are_normalized(
        self, explorer, subgraph_client, page_arg, per_page, expected_page, expected_size
    ):
        subgraph_client.query.side_effect = _route({
            "agents": _agents_response(0),
            "globalStats": {"globalStats": {"totalAgents": "0", "totalFeedback": "0"}},
        })

        page = explorer.loadExplorerPage(page=page_arg, perPage=per_page)

        assert page.page == expected_page
        assert page.pageSize == expected_size
        assert page.totalPages == 1
        agents_query = subgraph_client.query.call_args_list[0][0][0]
        assert f"first: {expected_size}" in agents_query
        assert f"skip: {(expected_page - 1) * expected_size}" in agents_query

    def test_agent_detail_average_score(self, explorer, subgraph_client):
        subgraph_client.query.side_effect = _route({"agent": {"agent": {
            "id": "11155111:1",
            "chainId": "11155111",
            "agentId": "1",
            "owner": "0xabc",
            "agentURI": None,
            "createdAt": "1",
            "updatedAt": "1",
            "totalFeedback": "3",
            "registrationFile": {"name": "Helper"},
            "feedback": [
                {"id": "f1", "score": "90", "clientAddress": "0x1", "createdAt": "3", "isRevoked": False},
                {"id": "f2", "score": "85", "clientAddress": "0x2", "createdAt": "2", "isRevoked": False},
                {"id": "f3", "score": "n/a", "clientAddress": "0x3", "createdAt": "1", "isRevoked": False},
            ],
        }}})

        detail = explorer.loadAgentDetail("11155111:1")

        assert detail.agent.displayName == "Helper"
        assert len(detail.feedback) == 3
        assert detail.avgScore == 88

    def test_agent_detail_without_feedback(self, explorer, subgraph_client):
        subgraph_client.query.side_effect = _route({"agent": {"agent": {
            "id": "11155111:2",
            "agentId": "2",
            "owner": "0xabc",
            "registrationFile": None,
            "feedback": [],
        }}})

        detail = explorer.loadAgentDetail("11155111:2")

        assert detail.avgScore is None
        assert detail.agent.chainId == 11155111
        assert detail.agent.displayName == "Agent #2"

    def test_agent_detail_not_found(self, explorer, subgraph_client):
        subgraph_client.query.side_effect = _route({"agent": {"agent": None}})

        assert explorer.loadAgentDetail("11155111:404") is None
        assert explorer.fetchAgentWithFeedback("11155111:404") == (None, [])


class TestExplorerConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("AGENT0_SUBGRAPH_URL", raising=False)
        monkeypatch.delenv("AGENT0_IPFS_GATEWAY", raising=False)

        config = ExplorerConfig.from_env()

        assert config.subgraph_url == DEFAULT_SUBGRAPH_URL
        assert config.ipfs_gateway == DEFAULT_IPFS_GATEWAY

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("AGENT0_SUBGRAPH_URL", "https://my-subgraph.example.com")
        monkeypatch.setenv("AGENT0_IPFS_GATEWAY", "https://dweb.link/ipfs")

        config = ExplorerConfig.from_env()

        assert config.subgraph_url == "https://my-subgraph.example.com"
        assert config.ipfs_gateway == "https://dweb.link/ipfs/"

    def test_config_is_read_only(self):
        config = ExplorerConfig()
        with pytest.raises(AttributeError):
            config.subgraph_url = "https://elsewhere.example.com"
