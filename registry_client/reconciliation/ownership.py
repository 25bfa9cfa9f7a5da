"""
Ownership guard for single-asset views.

The contract is the only authority on ownership. This guard exists so the
client never displays another account's asset by accident, and so a request
that is already known to be denied fails without a round trip. Any doubt
resolves to denial: a failed fresh read propagates instead of falling back
to the cached copy.
"""

from __future__ import annotations

from typing import Iterable

from registry_client.core.exceptions import LedgerReadFailed, NotOwned, OwnershipStale
from registry_client.ledger.interface import Ledger
from registry_client.ledger.models import Asset, HistoryRecord
from registry_client.reconciliation.history import sort_history
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import addresses_equal, display_address

logger = get_logger(__name__)


def find_cached(cached_assets: Iterable[Asset], asset_id: int) -> Asset | None:
    for asset in cached_assets:
        if asset.id == asset_id:
            return asset
    return None


async def authorize(
    session_account: str | None,
    asset_id: int,
    cached_assets: Iterable[Asset],
    ledger: Ledger,
) -> Asset:
    """
    Return the freshly read asset if session_account owns it.

    Raises NotOwned (no ledger call) when the cached collection does not show
    the asset owned by session_account, and OwnershipStale when the cache says
    yes but the ledger now reports another owner.
    """
    cached = find_cached(cached_assets, asset_id)
    if cached is None or not addresses_equal(cached.owner, session_account):
        logger.info(
            "ownership_denied_local",
            account=display_address(session_account),
            asset_id=asset_id,
            cached=cached is not None,
        )
        raise NotOwned(session_account or "", asset_id)

    try:
        fresh = await ledger.get_asset(asset_id)
    except LedgerReadFailed:
        raise
    except Exception as e:
        raise LedgerReadFailed("getAsset", str(e) or type(e).__name__) from e

    if not addresses_equal(fresh.owner, session_account):
        logger.info(
            "ownership_denied_stale",
            account=display_address(session_account),
            asset_id=asset_id,
            current_owner=display_address(fresh.owner),
        )
        raise OwnershipStale(session_account or "", asset_id, fresh.owner)
    return fresh


async def authorized_history(
    session_account: str | None,
    asset_id: int,
    cached_assets: Iterable[Asset],
    ledger: Ledger,
) -> tuple[HistoryRecord, ...]:
    """Guard, then return the asset's full history newest first. Read failures propagate."""
    await authorize(session_account, asset_id, cached_assets, ledger)
    try:
        records = await ledger.get_asset_history(asset_id)
    except LedgerReadFailed:
        raise
    except Exception as e:
        raise LedgerReadFailed("getAssetHistory", str(e) or type(e).__name__) from e
    return sort_history(records)
