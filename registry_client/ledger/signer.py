"""
Signer backed by the node's unlocked accounts.

Signing itself is done by the node; this object only tracks which account is
active and notifies listeners when it changes. Every change (including a
disconnect, reported as None) is a new session for the reconciliation layer.
"""

from __future__ import annotations

from typing import Iterable

from registry_client.core.exceptions import InvalidInput
from registry_client.ledger import rpc
from registry_client.ledger.interface import AccountListener
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import (
    addresses_equal,
    display_address,
    is_valid_address,
    normalize_address,
)

logger = get_logger(__name__)


class NodeSigner:
    """Tracks the active account and fans out account-change notifications."""

    def __init__(self, accounts: Iterable[str] = (), active: str | None = None) -> None:
        self._accounts = [a for a in accounts if a]
        self._active: str | None = None
        self._listeners: list[AccountListener] = []
        if active:
            self._active = self._validate(active)

    @classmethod
    async def from_node(cls, rpc_url: str, account_index: int = 0, timeout_sec: float = 30.0) -> "NodeSigner":
        """Load unlocked accounts from the node and activate the one at account_index, if any."""
        accounts = await rpc.fetch_accounts(rpc_url, timeout_sec)
        active = accounts[account_index] if 0 <= account_index < len(accounts) else None
        logger.info(
            "signer_accounts_loaded",
            account_count=len(accounts),
            active=display_address(active),
        )
        return cls(accounts, active)

    @property
    def accounts(self) -> list[str]:
        return list(self._accounts)

    def current_account(self) -> str | None:
        return self._active

    def on_account_changed(self, callback: AccountListener) -> None:
        self._listeners.append(callback)

    def _validate(self, account: str) -> str:
        if not is_valid_address(account):
            raise InvalidInput(f"Invalid account address: {account!r}")
        if self._accounts and not any(addresses_equal(account, a) for a in self._accounts):
            raise InvalidInput(f"Account {display_address(account)} is not available on this node")
        return account.strip()

    def select_account(self, account: str) -> None:
        """Make account active; no notification when it is already active."""
        account = self._validate(account)
        if addresses_equal(account, self._active):
            return
        self._active = account
        logger.info("signer_account_changed", account=display_address(account))
        self._notify(account)

    def clear(self) -> None:
        """Disconnect: no active account."""
        if self._active is None:
            return
        self._active = None
        logger.info("signer_disconnected")
        self._notify(None)

    def _notify(self, account: str | None) -> None:
        for callback in list(self._listeners):
            callback(account)

    def __repr__(self) -> str:
        return f"NodeSigner(active={normalize_address(self._active) or None!r}, accounts={len(self._accounts)})"
