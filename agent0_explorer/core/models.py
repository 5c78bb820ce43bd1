"""
Core data models for the Agent0 explorer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .formatting import is_readable_text


# Type aliases
AgentId = str  # "chainId:tokenId" (e.g., "11155111:1234")
ChainId = int
Address = str  # 0x-hex
URI = str  # https://..., ipfs://... or data:...
Timestamp = int  # unix seconds


def _to_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Parse an int from a subgraph BigInt/string value."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _text(value: Any) -> Optional[str]:
    """Return value if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def _string_list(value: Any) -> Optional[List[str]]:
    """Keep the string items of a JSON array; anything else is None."""
    if not isinstance(value, list):
        return None
    items = [item for item in value if isinstance(item, str) and item]
    return items or None


def _endpoint_from_list(endpoints: Any, name: str) -> Optional[str]:
    """Find an endpoint value by name in an ERC-8004 `endpoints` array."""
    if not isinstance(endpoints, list):
        return None
    for ep in endpoints:
        if isinstance(ep, dict) and ep.get("name") == name and _text(ep.get("endpoint")):
            return ep["endpoint"]
    return None


@dataclass
class RegistrationFile:
    """Off-chain registration file, as decoded by the subgraph or resolved locally."""
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[URI] = None
    mcpEndpoint: Optional[URI] = None
    a2aEndpoint: Optional[URI] = None
    supportedTrusts: Optional[List[str]] = None
    ens: Optional[str] = None  # only selected by the single-agent query
    agentWallet: Optional[Address] = None  # only selected by the single-agent query

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[RegistrationFile]:
        """Create from a subgraph `registrationFile` object."""
        if not isinstance(data, dict):
            return None
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            image=data.get("image"),
            mcpEndpoint=data.get("mcpEndpoint"),
            a2aEndpoint=data.get("a2aEndpoint"),
            supportedTrusts=data.get("supportedTrusts"),
            ens=data.get("ens"),
            agentWallet=data.get("agentWallet"),
        )

    @classmethod
    def from_metadata(cls, metadata: Any) -> Optional[RegistrationFile]:
        """Normalize arbitrary registration JSON into the fixed shape.

        Every absent, empty or wrongly typed field becomes None. Endpoints may
        be given either as flat `mcpEndpoint`/`a2aEndpoint` keys or inside an
        `endpoints` array.
        """
        if not isinstance(metadata, dict):
            return None
        endpoints = metadata.get("endpoints")
        return cls(
            name=_text(metadata.get("name")),
            description=_text(metadata.get("description")),
            image=_text(metadata.get("image")),
            mcpEndpoint=_text(metadata.get("mcpEndpoint")) or _endpoint_from_list(endpoints, "MCP"),
            a2aEndpoint=_text(metadata.get("a2aEndpoint")) or _endpoint_from_list(endpoints, "A2A"),
            supportedTrusts=(
                _string_list(metadata.get("supportedTrusts"))
                or _string_list(metadata.get("supportedTrust"))
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def hasEndpoint(self) -> bool:
        return bool(self.mcpEndpoint or self.a2aEndpoint)


@dataclass
class Agent:
    """A registered agent as returned by the subgraph."""
    id: AgentId
    chainId: ChainId
    agentId: str  # token id
    owner: Address
    metadataUri: Optional[URI] = None
    createdAt: Timestamp = 0
    updatedAt: Timestamp = 0
    totalFeedback: int = 0
    registrationFile: Optional[RegistrationFile] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Agent:
        """Create from a subgraph `agent` object (the URI arrives as `agentURI`)."""
        agent_id = data.get("id", "")
        chain_id = data.get("chainId")
        if chain_id is None and ":" in agent_id:
            chain_id = agent_id.split(":", 1)[0]
        return cls(
            id=agent_id,
            chainId=_to_int(chain_id),
            agentId=str(data.get("agentId", "")),
            owner=data.get("owner", ""),
            metadataUri=data.get("agentURI") or data.get("metadataUri") or None,
            createdAt=_to_int(data.get("createdAt")),
            updatedAt=_to_int(data.get("updatedAt")),
            totalFeedback=_to_int(data.get("totalFeedback")),
            registrationFile=RegistrationFile.from_dict(data.get("registrationFile")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def displayName(self) -> str:
        if self.registrationFile and self.registrationFile.name:
            return self.registrationFile.name
        return f"Agent #{self.agentId}"


@dataclass
class FeedbackFile:
    """Off-chain feedback payload decoded by the subgraph."""
    text: Optional[str] = None
    capability: Optional[str] = None
    skill: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[FeedbackFile]:
        if not isinstance(data, dict):
            return None
        return cls(
            text=data.get("text"),
            capability=data.get("capability"),
            skill=data.get("skill"),
        )


@dataclass
class Feedback:
    """A single review submitted against an agent."""
    id: str
    score: Optional[int]  # 0-100, None if the subgraph value is not numeric
    clientAddress: Address
    createdAt: Timestamp = 0
    isRevoked: bool = False
    tag1: Optional[str] = None
    tag2: Optional[str] = None
    feedbackFile: Optional[FeedbackFile] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Feedback:
        return cls(
            id=data.get("id", ""),
            score=_to_int(data.get("score"), default=None),
            clientAddress=data.get("clientAddress", ""),
            createdAt=_to_int(data.get("createdAt")),
            isRevoked=bool(data.get("isRevoked", False)),
            tag1=data.get("tag1"),
            tag2=data.get("tag2"),
            feedbackFile=FeedbackFile.from_dict(data.get("feedbackFile")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def readableTags(self) -> List[str]:
        """Tags that are human readable (on-chain tags may hold binary noise)."""
        return [tag for tag in (self.tag1, self.tag2) if is_readable_text(tag)]


@dataclass
class GlobalStats:
    """Subgraph-wide counters, string encoded as delivered."""
    totalAgents: str = "0"
    totalFeedback: str = "0"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> GlobalStats:
        data = data or {}
        return cls(
            totalAgents=str(data.get("totalAgents", "0")),
            totalFeedback=str(data.get("totalFeedback", "0")),
        )

    @property
    def totalAgentsCount(self) -> int:
        return _to_int(self.totalAgents)

    @property
    def totalFeedbackCount(self) -> int:
        return _to_int(self.totalFeedback)


@dataclass
class AgentFilters:
    """Filters for agent listing and counting."""
    search: Optional[str] = None  # case-insensitive substring of the name
    hasReviews: bool = False  # totalFeedback > 0
    hasEndpoint: bool = False  # MCP or A2A endpoint present

    @property
    def isActive(self) -> bool:
        return bool(self.search or self.hasReviews or self.hasEndpoint)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, filtering out inactive values."""
        return {k: v for k, v in self.__dict__.items() if v}
