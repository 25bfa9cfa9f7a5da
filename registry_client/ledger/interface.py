"""
Collaborator contracts consumed by the reconciliation layer.

Ledger: reads and writes against the registry contract.
Signer: the active wallet account and its change notifications.
PendingTransaction: handle returned by every write; await wait() before
re-reading state.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from registry_client.ledger.models import Asset, HistoryRecord, LedgerTotals, Profile

AccountListener = Callable[[str | None], None]


class PendingTransaction(Protocol):
    tx_hash: str

    async def wait(self) -> None:
        """Block until the transaction is confirmed; raise LedgerWriteFailed if it reverted."""
        ...


class Ledger(Protocol):
    async def get_profile(self, account: str) -> Profile: ...

    async def get_asset(self, asset_id: int) -> Asset: ...

    async def get_asset_ids_by_owner(self, account: str) -> Sequence[int]: ...

    async def get_asset_history(self, asset_id: int) -> Sequence[HistoryRecord]: ...

    async def get_totals(self) -> LedgerTotals: ...

    async def register_profile(self, name: str, email: str) -> PendingTransaction: ...

    async def update_profile(self, name: str, email: str) -> PendingTransaction: ...

    async def register_asset(self, name: str, description: str) -> PendingTransaction: ...

    async def transfer_asset(self, asset_id: int, to: str) -> PendingTransaction: ...


class Signer(Protocol):
    def current_account(self) -> str | None: ...

    def on_account_changed(self, callback: AccountListener) -> None: ...
