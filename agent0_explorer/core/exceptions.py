"""
Errors raised by the explorer.

Only failures talking to the subgraph are raised. Metadata resolution never
raises; it returns None instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ExplorerError(Exception):
    """Base class for all explorer errors."""


class TransportError(ExplorerError):
    """The subgraph endpoint answered with a non-success HTTP status."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Subgraph request failed: {status_code}")


class GraphQLError(ExplorerError):
    """The subgraph answered 2xx but reported GraphQL errors."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(f"GraphQL error: {message}")
