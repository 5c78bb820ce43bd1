"""
GraphQL query construction for the Agent0 subgraph.

Filters are built as plain mappings (the subgraph `where` input shape) and
serialized to GraphQL literal syntax in one place, so user-supplied strings
are always emitted as escaped string literals.

The Graph rejects a top-level `or` mixed with sibling conditions, so as soon
as two or more conditions are active they are all wrapped in an `and` list.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .config import COUNT_LIMIT, FEEDBACK_PAGE_SIZE
from .models import AgentFilters

REGISTRATION_FILE_FIELDS = """
        registrationFile {
          name
          description
          image
          mcpEndpoint
          a2aEndpoint
          supportedTrusts
        }"""

DETAIL_REGISTRATION_FILE_FIELDS = """
        registrationFile {
          name
          description
          image
          mcpEndpoint
          a2aEndpoint
          supportedTrusts
          ens
          agentWallet
        }"""

AGENT_FIELDS = """
        id
        chainId
        agentId
        owner
        agentURI
        createdAt
        updatedAt
        totalFeedback"""

FEEDBACK_FIELDS = """
          id
          score
          tag1
          tag2
          clientAddress
          createdAt
          isRevoked
          feedbackFile {
            text
            capability
            skill
          }"""


def to_graphql(value: Any) -> str:
    """Serialize a Python value to a GraphQL input literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        # JSON string escaping is a valid GraphQL string literal
        return json.dumps(value)
    if isinstance(value, dict):
        fields = ", ".join(f"{key}: {to_graphql(val)}" for key, val in value.items())
        return f"{{ {fields} }}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(to_graphql(item) for item in value) + "]"
    raise TypeError(f"Cannot serialize {type(value).__name__} to GraphQL")


def filter_conditions(filters: Optional[AgentFilters]) -> List[Dict[str, Any]]:
    """Translate active filters into individual `where` conditions."""
    conditions: List[Dict[str, Any]] = []
    if filters is None:
        return conditions

    if filters.search:
        conditions.append({"registrationFile_": {"name_contains_nocase": filters.search}})

    if filters.hasReviews:
        conditions.append({"totalFeedback_gt": 0})

    if filters.hasEndpoint:
        # Either endpoint; kept in its own object since `or` cannot have siblings
        conditions.append({"or": [
            {"registrationFile_": {"mcpEndpoint_not": None}},
            {"registrationFile_": {"a2aEndpoint_not": None}},
        ]})

    return conditions


def build_where(
    filters: Optional[AgentFilters],
    extra: Optional[List[Dict[str, Any]]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Build the `where` input for an agents query.

    Args:
        filters: Active user filters (may be None)
        extra: Additional conditions, e.g. an `id_gt` pagination cursor

    Returns:
        None when nothing is active, the single condition unwrapped, or an
        `and` group holding every condition.
    """
    conditions = filter_conditions(filters) + list(extra or [])
    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return {"and": conditions}


def where_argument(
    filters: Optional[AgentFilters],
    extra: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """Render the `where:` argument, or an empty string when unfiltered."""
    where = build_where(filters, extra)
    if where is None:
        return ""
    return f"where: {to_graphql(where)}"


def _check_non_negative(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got: {value!r}")
    return value


def build_agents_query(first: int, skip: int, filters: Optional[AgentFilters] = None) -> str:
    """Query a page of agents, newest first."""
    first = _check_non_negative("first", first)
    skip = _check_non_negative("skip", skip)
    return f"""
    {{
      agents(
        first: {first}
        skip: {skip}
        orderBy: createdAt
        orderDirection: desc
        {where_argument(filters)}
      ) {{{AGENT_FIELDS}{REGISTRATION_FILE_FIELDS}
      }}
    }}
    """


def build_agent_query(agent_id: str, feedback_first: int = FEEDBACK_PAGE_SIZE) -> str:
    """Query one agent by composite id with its most recent non-revoked feedback."""
    feedback_first = _check_non_negative("feedback_first", feedback_first)
    return f"""
    {{
      agent(id: {to_graphql(str(agent_id))}) {{{AGENT_FIELDS}{DETAIL_REGISTRATION_FILE_FIELDS}
        feedback(
          first: {feedback_first}
          orderBy: createdAt
          orderDirection: desc
          where: {{ isRevoked: false }}
        ) {{{FEEDBACK_FIELDS}
        }}
      }}
    }}
    """


def build_count_query(
    filters: Optional[AgentFilters] = None,
    first: int = COUNT_LIMIT,
    after_id: Optional[str] = None,
) -> str:
    """
    Query only agent ids matching the filters.

    With `after_id` the ids are ordered ascending and restricted to
    `id_gt: after_id`, which allows walking past the `first` limit.
    """
    first = _check_non_negative("first", first)
    if after_id is None:
        return f"""
    {{
      agents(
        first: {first}
        {where_argument(filters)}
      ) {{
        id
      }}
    }}
    """
    return f"""
    {{
      agents(
        first: {first}
        orderBy: id
        orderDirection: asc
        {where_argument(filters, extra=[{"id_gt": after_id}])}
      ) {{
        id
      }}
    }}
    """


def build_global_stats_query() -> str:
    return """
    {
      globalStats(id: "global") {
        totalAgents
        totalFeedback
      }
    }
    """
