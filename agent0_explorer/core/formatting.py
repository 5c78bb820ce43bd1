"""
Display helpers for values coming out of the subgraph.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from eth_utils import is_hex_address, to_checksum_address

# Share of non-printable characters above which a tag is treated as noise
NON_READABLE_THRESHOLD = 0.3


def is_readable_text(value: Optional[str]) -> bool:
    """Check whether a string is mostly printable ASCII.

    On-chain tags are bytes32 values and frequently decode to binary junk.
    """
    if not value:
        return False
    non_readable = sum(1 for c in value if ord(c) < 32 or ord(c) > 126)
    return non_readable / len(value) < NON_READABLE_THRESHOLD


def format_address(address: str) -> str:
    """Shorten a wallet address to `0xAbCd...1234` (EIP-55 cased when valid)."""
    if not address:
        return ""
    if is_hex_address(address):
        address = to_checksum_address(address)
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_timestamp(timestamp: Any) -> str:
    """Format unix seconds as e.g. `Jan 5, 2024` (UTC)."""
    dt = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"
