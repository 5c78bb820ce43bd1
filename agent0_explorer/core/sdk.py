"""
Main entry point for the Agent0 explorer.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import DEFAULT_PAGE_SIZE, PAGE_SIZES, ExplorerConfig
from .indexer import AgentIndexer
from .metadata_resolver import MetadataResolver
from .models import Agent, AgentFilters, AgentId, Feedback, GlobalStats
from .subgraph_client import SubgraphClient

logger = logging.getLogger(__name__)


@dataclass
class ExplorerPage:
    """Everything needed to render one page of the agent list."""
    agents: List[Agent]
    stats: GlobalStats
    totalAgents: int
    totalPages: int
    page: int
    pageSize: int
    filters: AgentFilters = field(default_factory=AgentFilters)
    hasActiveFilters: bool = False
    searchTerm: str = ""


@dataclass
class AgentDetail:
    """An agent with its recent feedback and average score."""
    agent: Agent
    feedback: List[Feedback]
    avgScore: Optional[int] = None


class Explorer:
    """Read-only explorer over the Agent0 subgraph."""

    def __init__(
        self,
        config: Optional[ExplorerConfig] = None,
        subgraph_client: Optional[SubgraphClient] = None,
        resolver: Optional[MetadataResolver] = None,
    ):
        """Initialize the explorer.

        Args:
            config: Endpoints; defaults to ExplorerConfig.from_env()
            subgraph_client: Override the transport (mainly for tests)
            resolver: Override the metadata resolver (mainly for tests)
        """
        self.config = config or ExplorerConfig.from_env()
        self.subgraph_client = subgraph_client or SubgraphClient(self.config.subgraph_url)
        self.resolver = resolver or MetadataResolver(self.config.ipfs_gateway)
        self.indexer = AgentIndexer(
            subgraph_client=self.subgraph_client,
            resolver=self.resolver,
        )

    def fetchAgents(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        filters: Optional[AgentFilters] = None,
    ) -> List[Agent]:
        """Fetch a page of agents, newest first."""
        return self.indexer.list_agents(page_size=first, skip=skip, filters=filters)

    def fetchAgentWithFeedback(self, agentId: AgentId) -> Tuple[Optional[Agent], List[Feedback]]:
        """Fetch one agent and its recent feedback; (None, []) if it does not exist."""
        return self.indexer.get_agent_with_feedback(agentId)

    def fetchAgentCount(self, filters: Optional[AgentFilters] = None, exact: bool = False) -> int:
        """Count agents matching the filters (saturates at 1000 unless exact)."""
        return self.indexer.count_agents(filters=filters, exact=exact)

    def fetchGlobalStats(self) -> GlobalStats:
        """Fetch global agent and feedback counters."""
        return self.indexer.get_global_stats()

    def loadExplorerPage(
        self,
        page: int = 1,
        perPage: int = DEFAULT_PAGE_SIZE,
        search: str = "",
        hasReviews: bool = False,
        hasEndpoint: bool = False,
    ) -> ExplorerPage:
        """
        Load one page of the agent list with the totals needed for paging.

        Args:
            page: 1-based page number; values below 1 are clamped to 1
            perPage: One of PAGE_SIZES; anything else falls back to the default
            search: Free-text name search
            hasReviews: Only agents with feedback
            hasEndpoint: Only agents with an MCP or A2A endpoint

        Returns:
            ExplorerPage. When filters are active the total is the (saturating)
            filtered count, otherwise the global agent counter.
        """
        page = max(1, int(page or 1))
        page_size = perPage if perPage in PAGE_SIZES else DEFAULT_PAGE_SIZE
        skip = (page - 1) * page_size

        search_term = (search or "").strip()
        filters = AgentFilters(
            search=search_term or None,
            hasReviews=bool(hasReviews),
            hasEndpoint=bool(hasEndpoint),
        )
        has_active_filters = filters.isActive

        agents = self.fetchAgents(page_size, skip, filters)
        stats = self.fetchGlobalStats()
        if has_active_filters:
            total_agents = self.fetchAgentCount(filters)
        else:
            total_agents = stats.totalAgentsCount

        total_pages = max(1, math.ceil(total_agents / page_size))
        logger.debug(f"Explorer page {page}/{total_pages}: {len(agents)} agents of {total_agents}")

        return ExplorerPage(
            agents=agents,
            stats=stats,
            totalAgents=total_agents,
            totalPages=total_pages,
            page=page,
            pageSize=page_size,
            filters=filters,
            hasActiveFilters=has_active_filters,
            searchTerm=search_term,
        )

    def loadAgentDetail(self, agentId: AgentId) -> Optional[AgentDetail]:
        """Load an agent with feedback and its rounded average score, or None if not found."""
        agent, feedback = self.fetchAgentWithFeedback(agentId)
        if agent is None:
            return None

        scores = [fb.score for fb in feedback if fb.score is not None]
        avg_score = math.floor(sum(scores) / len(scores) + 0.5) if scores else None

        return AgentDetail(agent=agent, feedback=feedback, avgScore=avg_score)

    def close(self):
        """Release the HTTP session held by the subgraph client."""
        self.subgraph_client.close()
