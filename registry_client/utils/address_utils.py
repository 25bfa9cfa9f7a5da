"""Account address normalization, comparison and display helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from web3 import Web3


def normalize_address(address: str | None) -> str:
    """Lower-case a hex address. None or blank input normalizes to ""."""
    if not address:
        return ""
    return address.strip().lower()


def addresses_equal(a: str | None, b: str | None) -> bool:
    """
    Case-insensitive address comparison.

    The empty address never equals anything, including another empty address,
    so a missing account can never pass an ownership comparison.
    """
    left = normalize_address(a)
    if not left:
        return False
    return left == normalize_address(b)


def display_address(address: str | None) -> str:
    """Render 0x1234...abcd for display; "" for empty input."""
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"


def is_valid_address(address: str | None) -> bool:
    """Return True if address is a 20-byte hex account (any letter case)."""
    if not address:
        return False
    # checksum casing is not enforced; accounts compare case-insensitively
    return bool(Web3.is_address(address.strip().lower()))


def format_timestamp(millis: int) -> str:
    """Millisecond epoch to ISO 8601 UTC string; "" when outside the datetime range."""
    try:
        dt = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return ""
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
