"""
Data models for ledger reads.

Mirrors the registry contract's return tuples. Every on-chain timestamp is
whole seconds; from_contract() converts to milliseconds exactly once, so
nothing downstream ever sees seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

MILLIS_PER_SECOND = 1000

TX_REGISTER = "REGISTER"
TX_TRANSFER = "TRANSFER"


def seconds_to_millis(seconds: Any) -> int:
    return int(seconds) * MILLIS_PER_SECOND


@dataclass(frozen=True)
class Profile:
    """Registered user profile (getUser)."""

    address: str
    name: str
    email: str
    registered_at_millis: int
    is_registered: bool

    @classmethod
    def from_contract(cls, values: Sequence[Any]) -> "Profile":
        """Build from (address, name, email, registeredAt, isRegistered)."""
        address, name, email, registered_at, is_registered = values
        return cls(
            address=str(address),
            name=str(name),
            email=str(email),
            registered_at_millis=seconds_to_millis(registered_at),
            is_registered=bool(is_registered),
        )


@dataclass(frozen=True)
class Asset:
    """Registered asset (getAsset). id and created_at_millis never change; owner changes on transfer."""

    id: int
    name: str
    description: str
    owner: str
    created_at_millis: int

    @classmethod
    def from_contract(cls, values: Sequence[Any]) -> "Asset":
        """Build from (id, name, description, owner, createdAt)."""
        asset_id, name, description, owner, created_at = values
        return cls(
            id=int(asset_id),
            name=str(name),
            description=str(description),
            owner=str(owner),
            created_at_millis=seconds_to_millis(created_at),
        )


@dataclass(frozen=True)
class HistoryRecord:
    """One append-only history entry; the ledger writes one per registration and per transfer."""

    asset_id: int
    from_address: str
    to_address: str
    timestamp_millis: int
    transaction_type: str

    @classmethod
    def from_contract(cls, values: Sequence[Any]) -> "HistoryRecord":
        """Build from (assetId, from, to, timestamp, transactionType)."""
        asset_id, from_address, to_address, timestamp, transaction_type = values
        return cls(
            asset_id=int(asset_id),
            from_address=str(from_address),
            to_address=str(to_address),
            timestamp_millis=seconds_to_millis(timestamp),
            transaction_type=str(transaction_type),
        )


@dataclass(frozen=True)
class LedgerTotals:
    """Contract-wide counters (getTotalUsers, getTotalAssets)."""

    total_users: int
    total_assets: int
