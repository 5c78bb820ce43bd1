"""
Static configuration for the explorer: endpoints and paging limits.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Agent0 public subgraph on Ethereum Sepolia
DEFAULT_SUBGRAPH_URL = (
    "https://gateway.thegraph.com/api/00a452ad3cd1900273ea62c1bf283f93"
    "/subgraphs/id/6wQRC7geo9XYAhckfmfo8kbMRLeWU8KQd3XsJqFKmZLT"
)
DEFAULT_IPFS_GATEWAY = "https://ipfs.io/ipfs/"

PAGE_SIZES = (12, 24, 48, 99)
DEFAULT_PAGE_SIZE = 24
FEEDBACK_PAGE_SIZE = 50
COUNT_LIMIT = 1000  # max `first` accepted by the subgraph

SUBGRAPH_URL_ENV = "AGENT0_SUBGRAPH_URL"
IPFS_GATEWAY_ENV = "AGENT0_IPFS_GATEWAY"


@dataclass(frozen=True)
class ExplorerConfig:
    """Endpoints used by the explorer. Built once, never mutated."""
    subgraph_url: str = DEFAULT_SUBGRAPH_URL
    ipfs_gateway: str = DEFAULT_IPFS_GATEWAY

    @classmethod
    def from_env(cls) -> ExplorerConfig:
        """
        Build configuration from the environment.

        Priority order:
        1. AGENT0_SUBGRAPH_URL / AGENT0_IPFS_GATEWAY
        2. Built-in defaults
        """
        subgraph_url = os.environ.get(SUBGRAPH_URL_ENV) or DEFAULT_SUBGRAPH_URL
        ipfs_gateway = os.environ.get(IPFS_GATEWAY_ENV) or DEFAULT_IPFS_GATEWAY
        if not ipfs_gateway.endswith("/"):
            ipfs_gateway += "/"
        return cls(subgraph_url=subgraph_url, ipfs_gateway=ipfs_gateway)
