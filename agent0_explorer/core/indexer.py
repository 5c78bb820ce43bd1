"""
Agent indexer for discovery over the Agent0 subgraph.

Every operation is a fresh read: nothing is cached between calls. Subgraph
failures (TransportError, GraphQLError) propagate to the caller untouched;
metadata resolution failures only leave `registrationFile` as None.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from .config import COUNT_LIMIT, DEFAULT_PAGE_SIZE, FEEDBACK_PAGE_SIZE
from .metadata_resolver import MetadataResolver
from .models import Agent, AgentFilters, AgentId, Feedback, GlobalStats
from .query_builder import (
    build_agent_query,
    build_agents_query,
    build_count_query,
    build_global_stats_query,
)
from .subgraph_client import SubgraphClient

logger = logging.getLogger(__name__)


class AgentIndexer:
    """Read operations composing query building, transport and metadata resolution."""

    def __init__(self, subgraph_client: SubgraphClient, resolver: Optional[MetadataResolver] = None):
        self.subgraph_client = subgraph_client
        self.resolver = resolver or MetadataResolver()

    async def _enrich_agents(self, agents: List[Agent]) -> List[Agent]:
        """Resolve registration files the subgraph did not decode, keeping page order."""
        pending = [
            index for index, agent in enumerate(agents)
            if agent.registrationFile is None and agent.metadataUri
        ]
        if not pending:
            return agents

        logger.debug(f"Resolving metadata for {len(pending)} of {len(agents)} agents")
        resolved = await self.resolver.resolve_many([agents[i].metadataUri for i in pending])
        for index, registration_file in zip(pending, resolved):
            agents[index].registrationFile = registration_file
        return agents

    def list_agents(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        filters: Optional[AgentFilters] = None,
    ) -> List[Agent]:
        """
        Fetch a page of agents ordered by creation time, newest first.

        Args:
            page_size: Maximum number of agents to return
            skip: Number of agents to skip
            filters: Optional search / hasReviews / hasEndpoint filters

        Returns:
            Agents in subgraph order, with missing registration files resolved
        """
        query = build_agents_query(page_size, skip, filters)
        data = self.subgraph_client.query(query)
        agents = [Agent.from_dict(item) for item in data.get("agents") or []]
        logger.info(f"Fetched {len(agents)} agents (skip={skip}, filters={filters.to_dict() if filters else {}})")
        return asyncio.run(self._enrich_agents(agents))

    def get_agent_with_feedback(self, agent_id: AgentId) -> Tuple[Optional[Agent], List[Feedback]]:
        """
        Fetch one agent and up to 50 of its most recent non-revoked feedback entries.

        Returns:
            (agent, feedback), or (None, []) when the agent does not exist
        """
        data = self.subgraph_client.query(build_agent_query(agent_id, FEEDBACK_PAGE_SIZE))
        agent_data = data.get("agent")
        if not agent_data:
            logger.info(f"Agent {agent_id} not found in subgraph")
            return None, []

        agent = Agent.from_dict(agent_data)
        asyncio.run(self._enrich_agents([agent]))

        feedback = [Feedback.from_dict(item) for item in agent_data.get("feedback") or []]
        feedback = [fb for fb in feedback if not fb.isRevoked]
        return agent, feedback

    def count_agents(self, filters: Optional[AgentFilters] = None, exact: bool = False) -> int:
        """
        Count agents matching the filters.

        The subgraph has no count primitive, so ids are fetched and counted.
        By default a single request is made and the count saturates at
        COUNT_LIMIT. With `exact=True` ids are walked in COUNT_LIMIT batches
        using an `id_gt` cursor until a short batch is returned.
        """
        if not exact:
            data = self.subgraph_client.query(build_count_query(filters, COUNT_LIMIT))
            return len(data.get("agents") or [])

        total = 0
        after_id = ""
        while True:
            data = self.subgraph_client.query(build_count_query(filters, COUNT_LIMIT, after_id=after_id))
            batch = data.get("agents") or []
            total += len(batch)
            if len(batch) < COUNT_LIMIT:
                break
            after_id = batch[-1]["id"]
        logger.debug(f"Exact agent count: {total}")
        return total

    def get_global_stats(self) -> GlobalStats:
        """Fetch the singleton global counters."""
        data = self.subgraph_client.query(build_global_stats_query())
        return GlobalStats.from_dict(data.get("globalStats"))
