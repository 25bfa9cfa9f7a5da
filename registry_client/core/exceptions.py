"""
Application-level exceptions.

Every error raised by the reconciliation layer derives from RegistryClientError
and carries an error_code that the API server maps to an HTTP status.
"""

from __future__ import annotations

from typing import Iterable


class RegistryClientError(Exception):
    """Base class for client errors."""

    error_code = "registry_error"


class LedgerReadFailed(RegistryClientError):
    """A read call against the contract failed (transport, node, or revert on a view call)."""

    error_code = "ledger_read_failed"

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class AssetResolutionFailed(RegistryClientError):
    """One or more owned asset ids could not be resolved; no partial collection is returned."""

    error_code = "asset_resolution_failed"

    def __init__(self, account: str, failed_ids: Iterable[int]) -> None:
        self.account = account
        self.failed_ids = tuple(sorted(failed_ids))
        super().__init__(
            f"Could not resolve assets {list(self.failed_ids)} owned by {account}"
        )


class NotOwned(RegistryClientError):
    """Requested asset is not in the session account's cached asset set."""

    error_code = "not_owned"

    def __init__(self, account: str, asset_id: int) -> None:
        super().__init__(f"Asset #{asset_id} is not owned by {account}")
        self.account = account
        self.asset_id = asset_id


class OwnershipStale(RegistryClientError):
    """Asset was owned at last reconciliation but the ledger now reports another owner."""

    error_code = "ownership_stale"

    def __init__(self, account: str, asset_id: int, current_owner: str) -> None:
        super().__init__(
            f"Asset #{asset_id} is no longer owned by {account} (current owner {current_owner})"
        )
        self.account = account
        self.asset_id = asset_id
        self.current_owner = current_owner


class LedgerWriteFailed(RegistryClientError):
    """A registration, update or transfer transaction was rejected, reverted or not confirmed."""

    error_code = "ledger_write_failed"

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = reason


class InvalidInput(RegistryClientError):
    """Caller-supplied input failed validation before anything was sent to the ledger."""

    error_code = "invalid_input"


class NotConnected(RegistryClientError):
    """No account is active on the session."""

    error_code = "not_connected"

    def __init__(self, message: str = "No wallet account is connected") -> None:
        super().__init__(message)
