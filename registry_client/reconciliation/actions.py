"""
Write actions: profile registration/update, asset registration, transfer.

Inputs are explicit typed values supplied by the caller. Each action submits
one transaction, waits for confirmation, then rebuilds the session snapshot
from fresh reads. Nothing local changes before confirmation, and a failed
write leaves the cached snapshot untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

from registry_client.core.exceptions import InvalidInput, NotConnected, RegistryClientError
from registry_client.ledger.interface import Ledger, PendingTransaction
from registry_client.reconciliation.session import ReconciliationSession, SessionSnapshot
from registry_client.registry_logging import account_context, get_logger
from registry_client.utils.address_utils import (
    display_address,
    is_valid_address,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProfileInput:
    name: str
    email: str = ""


@dataclass(frozen=True)
class AssetInput:
    name: str
    description: str = ""


@dataclass(frozen=True)
class TransferInput:
    asset_id: int
    to: str


@dataclass(frozen=True)
class WriteResult:
    """Confirmed write. snapshot is None when the follow-up refresh did not produce one."""

    operation: str
    tx_hash: str
    snapshot: SessionSnapshot | None


def _require_text(value: str, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(f"{field} must be non-empty")
    return text


class RegistryActions:
    """Write operations bound to one session and ledger."""

    def __init__(self, session: ReconciliationSession, ledger: Ledger) -> None:
        self._session = session
        self._ledger = ledger

    def _require_account(self) -> str:
        account = self._session.account
        if not account:
            raise NotConnected()
        return account

    async def register_profile(self, data: ProfileInput) -> WriteResult:
        name = _require_text(data.name, "name")
        email = (data.email or "").strip()
        return await self._submit("register_profile", lambda: self._ledger.register_profile(name, email))

    async def update_profile(self, data: ProfileInput) -> WriteResult:
        name = _require_text(data.name, "name")
        email = (data.email or "").strip()
        return await self._submit("update_profile", lambda: self._ledger.update_profile(name, email))

    async def register_asset(self, data: AssetInput) -> WriteResult:
        name = _require_text(data.name, "asset name")
        description = (data.description or "").strip()
        return await self._submit("register_asset", lambda: self._ledger.register_asset(name, description))

    async def transfer_asset(self, data: TransferInput) -> WriteResult:
        """Transfer an owned asset. The ownership guard runs before anything is submitted."""
        self._require_account()
        if data.asset_id is None or int(data.asset_id) < 0:
            raise InvalidInput("asset id must be a non-negative integer")
        to = _require_text(data.to, "recipient address")
        if not is_valid_address(to):
            raise InvalidInput(f"Invalid recipient address: {to!r}")
        asset_id = int(data.asset_id)
        await self._session.authorize(asset_id)
        return await self._submit("transfer_asset", lambda: self._ledger.transfer_asset(asset_id, to))

    async def _submit(
        self,
        operation: str,
        send: Callable[[], Awaitable[PendingTransaction]],
    ) -> WriteResult:
        account = self._require_account()
        with account_context(display_address(account)):
            pending = await send()
            logger.info("write_submitted", operation=operation, tx_hash=pending.tx_hash)
            await pending.wait()

            # a run that started before confirmation may predate the write
            await self._session.wait_idle()
            snapshot: SessionSnapshot | None = None
            try:
                snapshot = await self._session.refresh()
            except RegistryClientError as e:
                logger.warning(
                    "write_refresh_failed",
                    operation=operation,
                    tx_hash=pending.tx_hash,
                    error=str(e),
                )
            logger.info("write_confirmed", operation=operation, tx_hash=pending.tx_hash)
        return WriteResult(operation=operation, tx_hash=pending.tx_hash, snapshot=snapshot)
