"""
Owned-asset loading.

Reads the id list for an owner, resolves every id concurrently, and returns
the collection newest first. All-or-nothing: any per-id failure fails the
whole load.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

from registry_client.core.exceptions import AssetResolutionFailed, LedgerReadFailed
from registry_client.ledger.interface import Ledger
from registry_client.ledger.models import Asset
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import addresses_equal, display_address

logger = get_logger(__name__)


def sort_assets(assets: Iterable[Asset]) -> tuple[Asset, ...]:
    """created_at_millis descending, ties by ascending id."""
    return tuple(sorted(assets, key=lambda a: (-a.created_at_millis, a.id)))


async def load_assets(ledger: Ledger, account: str) -> tuple[Asset, ...]:
    """
    Load every asset owned by account.

    Performs 1 + K reads for K owned assets (no pagination). Raises
    LedgerReadFailed if the id list cannot be read and AssetResolutionFailed
    if any id cannot be resolved.
    """
    try:
        asset_ids = list(await ledger.get_asset_ids_by_owner(account))
    except LedgerReadFailed:
        raise
    except Exception as e:
        raise LedgerReadFailed("getAssetsByOwner", str(e) or type(e).__name__) from e

    if not asset_ids:
        return ()

    results = await asyncio.gather(
        *(ledger.get_asset(asset_id) for asset_id in asset_ids),
        return_exceptions=True,
    )

    assets: list[Asset] = []
    failed: list[int] = []
    first_error: BaseException | None = None
    for asset_id, result in zip(asset_ids, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            failed.append(asset_id)
            first_error = first_error or result
            continue
        assets.append(result)

    if failed:
        logger.warning(
            "asset_resolution_failed",
            account=display_address(account),
            failed_ids=failed,
            asset_count=len(asset_ids),
            error=str(first_error),
        )
        raise AssetResolutionFailed(account, failed) from first_error

    foreign = [a.id for a in assets if not addresses_equal(a.owner, account)]
    if foreign:
        # id list and per-id reads raced a transfer; the guard rejects these
        logger.warning("asset_owner_mismatch", account=display_address(account), asset_ids=foreign)

    logger.debug("assets_loaded", account=display_address(account), asset_count=len(assets))
    return sort_assets(assets)
