"""
Recent activity feed.

Fetches history for the most recently created assets, merges it, and keeps
the newest entries. History is advisory: a failed per-asset fetch contributes
nothing instead of failing the feed.
"""

from __future__ import annotations

import asyncio
from itertools import chain
from typing import Iterable, Sequence

from registry_client.ledger.interface import Ledger
from registry_client.ledger.models import Asset, HistoryRecord
from registry_client.registry_logging import get_logger

logger = get_logger(__name__)

DEFAULT_SAMPLE_SIZE = 5
DEFAULT_FEED_SIZE = 10


def sort_history(records: Iterable[HistoryRecord]) -> tuple[HistoryRecord, ...]:
    """Stable sort, newest first."""
    return tuple(sorted(records, key=lambda r: r.timestamp_millis, reverse=True))


def merge_feed(
    record_sets: Iterable[Sequence[HistoryRecord]],
    feed_size: int = DEFAULT_FEED_SIZE,
) -> tuple[HistoryRecord, ...]:
    """Flatten per-asset record sets, order newest first, keep at most feed_size."""
    return sort_history(chain.from_iterable(record_sets))[:feed_size]


async def _fetch_or_empty(ledger: Ledger, asset_id: int) -> Sequence[HistoryRecord]:
    try:
        return list(await ledger.get_asset_history(asset_id))
    except Exception as e:
        logger.warning("asset_history_fetch_failed", asset_id=asset_id, error=str(e))
        return []


async def aggregate_history(
    ledger: Ledger,
    assets: Sequence[Asset],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    feed_size: int = DEFAULT_FEED_SIZE,
) -> tuple[HistoryRecord, ...]:
    """
    Build the recent feed from the first sample_size assets of an already
    ordered collection (newest first).

    Issues no read for an empty collection. Never raises for per-asset
    failures; those assets contribute an empty record set.
    """
    sample = list(assets[:sample_size])
    if not sample:
        return ()
    record_sets = await asyncio.gather(*(_fetch_or_empty(ledger, a.id) for a in sample))
    feed = merge_feed(record_sets, feed_size)
    logger.debug(
        "history_aggregated",
        sampled_assets=len(sample),
        record_count=sum(len(s) for s in record_sets),
        feed_size=len(feed),
    )
    return feed
