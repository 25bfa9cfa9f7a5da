"""
web3 Ledger adapter — registry contract over an EVM JSON-RPC node.

Responsibilities:
- Call the registry contract's view functions and shape results into models.
- Submit write transactions from the signer's active account and hand back a
  pending handle whose wait() resolves on confirmation.
- Translate every third-party failure into LedgerReadFailed / LedgerWriteFailed
  so callers never see web3 or transport exceptions.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Sequence

import aiohttp
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, TimeExhausted

from registry_client.core.exceptions import LedgerReadFailed, LedgerWriteFailed, NotConnected
from registry_client.ledger.abi import REGISTRY_ABI
from registry_client.ledger.interface import Signer
from registry_client.ledger.models import Asset, HistoryRecord, LedgerTotals, Profile
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import display_address

logger = get_logger(__name__)

DEFAULT_RECEIPT_TIMEOUT_SEC = 120.0


def build_web3(rpc_url: str, request_timeout_sec: float) -> AsyncWeb3:
    """Async web3 client for one connection."""
    provider = AsyncWeb3.AsyncHTTPProvider(
        rpc_url,
        request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout_sec)},
    )
    return AsyncWeb3(provider)


def parse_write_error(error: BaseException) -> str:
    """Reduce a failed write to a user-facing reason (revert reason, user rejection, or message)."""
    if isinstance(error, ContractLogicError) and error.message:
        return str(error.message).removeprefix("execution reverted: ")
    reason = getattr(error, "reason", None)
    if reason:
        return str(reason)
    message = str(error)
    if "user rejected" in message.lower():
        return "transaction rejected by user"
    return message or "unknown error"


def _checksum(account: str) -> str:
    return Web3.to_checksum_address(account.strip().lower())


class Web3PendingTransaction:
    """Handle for a submitted transaction; wait() blocks until mined and checks status."""

    def __init__(
        self,
        w3: AsyncWeb3,
        tx_hash: str,
        operation: str,
        receipt_timeout_sec: float = DEFAULT_RECEIPT_TIMEOUT_SEC,
    ) -> None:
        self._w3 = w3
        self.tx_hash = tx_hash
        self.operation = operation
        self._receipt_timeout = receipt_timeout_sec

    async def wait(self) -> None:
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                self.tx_hash, timeout=self._receipt_timeout
            )
        except TimeExhausted as e:
            raise LedgerWriteFailed(self.operation, "confirmation timed out") from e
        except Exception as e:
            raise LedgerWriteFailed(self.operation, parse_write_error(e)) from e
        if receipt.get("status", 1) == 0:
            logger.warning("ledger_tx_reverted", operation=self.operation, tx_hash=self.tx_hash)
            raise LedgerWriteFailed(self.operation, "transaction reverted")
        logger.info(
            "ledger_tx_confirmed",
            operation=self.operation,
            tx_hash=self.tx_hash,
            block_number=receipt.get("blockNumber"),
        )


class Web3Ledger:
    """
    Ledger implementation backed by the deployed registry contract.

    Reads go through eth_call; writes are sent from signer.current_account()
    (an unlocked node account) and return a Web3PendingTransaction.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        contract_address: str,
        signer: Signer,
        *,
        receipt_timeout_sec: float = DEFAULT_RECEIPT_TIMEOUT_SEC,
    ) -> None:
        if not contract_address.strip():
            raise ValueError("contract_address must be non-empty")
        self._w3 = w3
        self._signer = signer
        self._receipt_timeout = receipt_timeout_sec
        self._contract = w3.eth.contract(address=_checksum(contract_address), abi=REGISTRY_ABI)

    async def _read(self, operation: str, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await call()
        except Exception as e:
            logger.warning("ledger_read_failed", operation=operation, error=str(e))
            raise LedgerReadFailed(operation, str(e) or type(e).__name__) from e

    async def get_profile(self, account: str) -> Profile:
        values = await self._read(
            "getUser",
            lambda: self._contract.functions.getUser(_checksum(account)).call(),
        )
        return Profile.from_contract(values)

    async def get_asset(self, asset_id: int) -> Asset:
        values = await self._read(
            "getAsset",
            lambda: self._contract.functions.getAsset(int(asset_id)).call(),
        )
        return Asset.from_contract(values)

    async def get_asset_ids_by_owner(self, account: str) -> Sequence[int]:
        ids = await self._read(
            "getAssetsByOwner",
            lambda: self._contract.functions.getAssetsByOwner(_checksum(account)).call(),
        )
        return [int(i) for i in ids]

    async def get_asset_history(self, asset_id: int) -> Sequence[HistoryRecord]:
        records = await self._read(
            "getAssetHistory",
            lambda: self._contract.functions.getAssetHistory(int(asset_id)).call(),
        )
        return [HistoryRecord.from_contract(r) for r in records]

    async def get_totals(self) -> LedgerTotals:
        users = await self._read("getTotalUsers", lambda: self._contract.functions.getTotalUsers().call())
        assets = await self._read("getTotalAssets", lambda: self._contract.functions.getTotalAssets().call())
        return LedgerTotals(total_users=int(users), total_assets=int(assets))

    async def _transact(self, operation: str, function: Any) -> Web3PendingTransaction:
        sender = self._signer.current_account()
        if not sender:
            raise NotConnected()
        try:
            tx_hash = await function.transact({"from": _checksum(sender)})
        except Exception as e:
            reason = parse_write_error(e)
            logger.warning(
                "ledger_tx_submit_failed",
                operation=operation,
                account=display_address(sender),
                reason=reason,
            )
            raise LedgerWriteFailed(operation, reason) from e
        tx_hex = Web3.to_hex(tx_hash)
        logger.info("ledger_tx_submitted", operation=operation, tx_hash=tx_hex, account=display_address(sender))
        return Web3PendingTransaction(self._w3, tx_hex, operation, self._receipt_timeout)

    async def register_profile(self, name: str, email: str) -> Web3PendingTransaction:
        return await self._transact("registerUser", self._contract.functions.registerUser(name, email))

    async def update_profile(self, name: str, email: str) -> Web3PendingTransaction:
        return await self._transact("updateProfile", self._contract.functions.updateProfile(name, email))

    async def register_asset(self, name: str, description: str) -> Web3PendingTransaction:
        return await self._transact("registerAsset", self._contract.functions.registerAsset(name, description))

    async def transfer_asset(self, asset_id: int, to: str) -> Web3PendingTransaction:
        return await self._transact(
            "transferAsset",
            self._contract.functions.transferAsset(int(asset_id), _checksum(to)),
        )
