"""
In-memory stand-in for the registry contract.

Per-method call counters, failure injection, per-account gates that hold
get_profile open, and writes that only take effect when their pending
transaction is awaited.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import replace

from registry_client.core.exceptions import LedgerReadFailed, LedgerWriteFailed
from registry_client.ledger.models import (
    TX_REGISTER,
    TX_TRANSFER,
    Asset,
    HistoryRecord,
    LedgerTotals,
    Profile,
)
from registry_client.utils.address_utils import normalize_address

ACCOUNT_A = "0x" + "aa" * 20
ACCOUNT_B = "0x" + "bb" * 20
ACCOUNT_C = "0x" + "cc" * 20
ZERO_ADDRESS = "0x" + "00" * 20


class FakePendingTransaction:
    def __init__(self, ledger: "FakeLedger", tx_hash: str, apply, fail_reason: str | None = None) -> None:
        self._ledger = ledger
        self.tx_hash = tx_hash
        self._apply = apply
        self._fail_reason = fail_reason
        self.waited = False

    async def wait(self) -> None:
        await asyncio.sleep(0)
        self.waited = True
        if self._fail_reason:
            raise LedgerWriteFailed("fake", self._fail_reason)
        self._apply()


class FakeLedger:
    """In-memory registry. Writes are sent from signer.current_account() (or .sender)."""

    def __init__(self, signer=None) -> None:
        self.signer = signer
        self.sender: str | None = None
        self.profiles: dict[str, Profile] = {}
        self.assets: dict[int, Asset] = {}
        self.histories: dict[int, list[HistoryRecord]] = {}
        self.calls: Counter = Counter()
        self.gates: dict[str, asyncio.Event] = {}
        self.fail_profile = False
        self.fail_ids = False
        self.fail_assets: set[int] = set()
        self.fail_history: set[int] = set()
        self.fail_write: str | None = None
        self.now_millis = 10_000_000
        self._in_flight_asset_reads = 0
        self.max_concurrent_asset_reads = 0
        self._tx_counter = 0

    # -- setup helpers --------------------------------------------------

    def set_profile(self, account: str, name: str = "Alice", email: str = "alice@example.com",
                    registered_at_millis: int = 1_000_000) -> Profile:
        profile = Profile(account, name, email, registered_at_millis, True)
        self.profiles[normalize_address(account)] = profile
        return profile

    def add_asset(self, asset_id: int, owner: str, created_at_millis: int,
                  name: str | None = None, description: str = "") -> Asset:
        asset = Asset(asset_id, name or f"Asset {asset_id}", description, owner, created_at_millis)
        self.assets[asset_id] = asset
        self.histories.setdefault(asset_id, []).append(
            HistoryRecord(asset_id, ZERO_ADDRESS, owner, created_at_millis, TX_REGISTER)
        )
        return asset

    def add_history(self, asset_id: int, from_address: str, to_address: str,
                    timestamp_millis: int, transaction_type: str = TX_TRANSFER) -> HistoryRecord:
        record = HistoryRecord(asset_id, from_address, to_address, timestamp_millis, transaction_type)
        self.histories.setdefault(asset_id, []).append(record)
        return record

    def move_owner(self, asset_id: int, new_owner: str) -> None:
        """Transfer outside this client (another wallet), appending a TRANSFER record."""
        asset = self.assets[asset_id]
        self.now_millis += 1000
        self.assets[asset_id] = replace(asset, owner=new_owner)
        self.add_history(asset_id, asset.owner, new_owner, self.now_millis)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def _sender(self) -> str:
        if self.signer is not None:
            return self.signer.current_account()
        return self.sender

    # -- reads ----------------------------------------------------------

    async def get_profile(self, account: str) -> Profile:
        self.calls["get_profile"] += 1
        gate = self.gates.get(normalize_address(account))
        if gate is not None:
            await gate.wait()
        if self.fail_profile:
            raise LedgerReadFailed("getUser", "node unavailable")
        profile = self.profiles.get(normalize_address(account))
        return profile or Profile(ZERO_ADDRESS, "", "", 0, False)

    async def get_asset(self, asset_id: int) -> Asset:
        self.calls["get_asset"] += 1
        self._in_flight_asset_reads += 1
        self.max_concurrent_asset_reads = max(self.max_concurrent_asset_reads, self._in_flight_asset_reads)
        try:
            await asyncio.sleep(0)
            if asset_id in self.fail_assets:
                raise LedgerReadFailed("getAsset", f"revert on asset {asset_id}")
            if asset_id not in self.assets:
                raise LedgerReadFailed("getAsset", "Asset does not exist")
            return self.assets[asset_id]
        finally:
            self._in_flight_asset_reads -= 1

    async def get_asset_ids_by_owner(self, account: str) -> list[int]:
        self.calls["get_asset_ids_by_owner"] += 1
        if self.fail_ids:
            raise LedgerReadFailed("getAssetsByOwner", "node unavailable")
        key = normalize_address(account)
        return [a.id for a in self.assets.values() if normalize_address(a.owner) == key]

    async def get_asset_history(self, asset_id: int) -> list[HistoryRecord]:
        self.calls["get_asset_history"] += 1
        await asyncio.sleep(0)
        if asset_id in self.fail_history:
            raise RuntimeError(f"history unavailable for {asset_id}")
        return list(self.histories.get(asset_id, []))

    async def get_totals(self) -> LedgerTotals:
        self.calls["get_totals"] += 1
        return LedgerTotals(total_users=len(self.profiles), total_assets=len(self.assets))

    # -- writes ---------------------------------------------------------

    def _pending(self, operation: str, apply) -> FakePendingTransaction:
        self.calls[operation] += 1
        self._tx_counter += 1
        return FakePendingTransaction(self, f"0x{self._tx_counter:064x}", apply, self.fail_write)

    async def register_profile(self, name: str, email: str) -> FakePendingTransaction:
        sender = self._sender()
        return self._pending("register_profile", lambda: self.set_profile(sender, name, email, self.now_millis))

    async def update_profile(self, name: str, email: str) -> FakePendingTransaction:
        sender = self._sender()

        def apply() -> None:
            current = self.profiles[normalize_address(sender)]
            self.profiles[normalize_address(sender)] = replace(current, name=name, email=email)

        return self._pending("update_profile", apply)

    async def register_asset(self, name: str, description: str) -> FakePendingTransaction:
        sender = self._sender()

        def apply() -> None:
            self.now_millis += 1000
            self.add_asset(max(self.assets, default=0) + 1, sender, self.now_millis, name, description)

        return self._pending("register_asset", apply)

    async def transfer_asset(self, asset_id: int, to: str) -> FakePendingTransaction:
        return self._pending("transfer_asset", lambda: self.move_owner(asset_id, to))
