"""
Minimal GraphQL client for the Agent0 subgraph.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .exceptions import GraphQLError, TransportError

logger = logging.getLogger(__name__)


class SubgraphClient:
    """Issues one GraphQL POST per call against a single subgraph endpoint."""

    def __init__(self, url: str, session: Optional[requests.Session] = None):
        """
        Initialize subgraph client.

        Args:
            url: Full subgraph query URL (any API key is part of the path)
            session: Optional requests session, used for connection pooling
        """
        self.url = url
        self.session = session or requests.Session()

    def query(self, query: str) -> Dict[str, Any]:
        """
        Execute a GraphQL query and return its `data` object.

        Args:
            query: Complete GraphQL query text

        Returns:
            The response `data` mapping, untyped

        Raises:
            TransportError: HTTP status was not 2xx
            GraphQLError: response carried an `errors` array
        """
        logger.debug(f"Subgraph query to {self.url}: {' '.join(query.split())[:200]}")
        response = self.session.post(
            self.url,
            json={"query": query},
            headers={"Content-Type": "application/json"},
        )

        if not response.ok:
            raise TransportError(response.status_code)

        result = response.json()

        errors = result.get("errors")
        # any errors key present, even an empty list, marks the response as failed
        if errors is not None:
            first = errors[0] if isinstance(errors, list) and errors else errors
            if isinstance(first, dict):
                message = first.get("message", str(first))
            else:
                message = str(first) if first else "unknown error"
            raise GraphQLError(message, errors)

        return result.get("data") or {}

    def close(self):
        """Close the underlying HTTP session."""
        self.session.close()
