"""
Agent0 Explorer - read-only discovery over the Agent0 ERC-8004 subgraph.
"""

from .core.config import ExplorerConfig
from .core.exceptions import ExplorerError, GraphQLError, TransportError
from .core.models import (
    Agent,
    AgentFilters,
    Feedback,
    FeedbackFile,
    GlobalStats,
    RegistrationFile,
)
from .core.sdk import AgentDetail, Explorer, ExplorerPage

__version__ = "0.1.0"

__all__ = [
    "Explorer",
    "ExplorerConfig",
    "ExplorerPage",
    "AgentDetail",
    "Agent",
    "AgentFilters",
    "Feedback",
    "FeedbackFile",
    "GlobalStats",
    "RegistrationFile",
    "ExplorerError",
    "TransportError",
    "GraphQLError",
]
