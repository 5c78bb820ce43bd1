"""
Client-side resolution of agent registration files.

The subgraph only decodes IPFS metadata. For HTTP(S) URLs and base64 data
URIs, and for IPFS content the subgraph failed to decode, the registration
file is fetched and normalized here.

Resolution is best effort: every failure yields None and never raises.
"""

from __future__ import annotations

import asyncio
import base64
import json
import re
from typing import Any, List, Optional, Sequence

import aiohttp

from .config import DEFAULT_IPFS_GATEWAY
from .models import URI, RegistrationFile

DATA_URI_PATTERN = re.compile(r"^data:[^,]*;base64,(.+)$", re.DOTALL)


class MetadataResolver:
    """Resolves `data:`, `http(s)://` and `ipfs://` URIs into registration files."""

    def __init__(self, ipfs_gateway: str = DEFAULT_IPFS_GATEWAY):
        self.ipfs_gateway = ipfs_gateway if ipfs_gateway.endswith("/") else ipfs_gateway + "/"

    def _detect_uri_type(self, uri: str) -> str:
        """Detect URI type (data, http, https, ipfs, unknown)."""
        if uri.startswith("data:"):
            return "data"
        elif uri.startswith("https://"):
            return "https"
        elif uri.startswith("http://"):
            return "http"
        elif uri.startswith("ipfs://"):
            return "ipfs"
        else:
            return "unknown"

    def _decode_data_uri(self, uri: str) -> Optional[str]:
        match = DATA_URI_PATTERN.match(uri)
        if not match:
            return None
        payload = match.group(1).strip()
        # tolerate missing padding
        payload += "=" * (-len(payload) % 4)
        return base64.b64decode(payload, validate=True).decode("utf-8")

    def gateway_url(self, uri: str) -> str:
        """Map `ipfs://<cid>[/path]` to the configured HTTP gateway."""
        return self.ipfs_gateway + uri[len("ipfs://"):]

    async def _fetch_text(self, session: aiohttp.ClientSession, url: str) -> Optional[str]:
        """GET a URL and return its body, or None on a non-success status."""
        async with session.get(url) as response:
            if response.status < 200 or response.status >= 300:
                return None
            return await response.text()

    async def _load_text(self, uri: str, session: Optional[aiohttp.ClientSession]) -> Optional[str]:
        uri_type = self._detect_uri_type(uri)

        if uri_type == "data":
            return self._decode_data_uri(uri)

        if uri_type == "unknown":
            return None

        url = self.gateway_url(uri) if uri_type == "ipfs" else uri
        if session is not None:
            return await self._fetch_text(session, url)
        async with aiohttp.ClientSession() as own_session:
            return await self._fetch_text(own_session, url)

    async def resolve(
        self,
        uri: URI,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> Optional[RegistrationFile]:
        """
        Resolve a metadata URI into a normalized registration file.

        Args:
            uri: `data:...;base64,...`, `http(s)://...` or `ipfs://...`
            session: Optional shared aiohttp session

        Returns:
            RegistrationFile, or None when the URI is unsupported or any step
            (fetch, decode, JSON parse) fails
        """
        if not uri:
            return None
        try:
            text = await self._load_text(uri, session)
            if text is None:
                return None
            return RegistrationFile.from_metadata(json.loads(text))
        except Exception:
            return None

    async def resolve_many(self, uris: Sequence[Optional[URI]]) -> List[Optional[RegistrationFile]]:
        """
        Resolve several URIs concurrently.

        The result list is aligned with `uris`; a None/empty entry resolves
        to None without any work.
        """
        async def resolve_single(session: aiohttp.ClientSession, uri: Optional[URI]) -> Optional[RegistrationFile]:
            if not uri:
                return None
            return await self.resolve(uri, session=session)

        if not any(uris):
            return [None] * len(uris)

        async with aiohttp.ClientSession() as session:
            tasks = [resolve_single(session, uri) for uri in uris]
            results: List[Any] = await asyncio.gather(*tasks, return_exceptions=True)

        resolved: List[Optional[RegistrationFile]] = []
        for result in results:
            if isinstance(result, Exception):
                resolved.append(None)
            else:
                resolved.append(result)
        return resolved
