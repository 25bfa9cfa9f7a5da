"""
Reconciliation: keeps the client's view of the ledger in sync.

Loads the session account's profile and owned assets, derives the recent
activity feed, guards single-asset views, and orchestrates all of it per
account through ReconciliationSession.
"""

from registry_client.reconciliation.asset_loader import load_assets, sort_assets
from registry_client.reconciliation.history import aggregate_history, merge_feed
from registry_client.reconciliation.ownership import authorize, authorized_history
from registry_client.reconciliation.profile_loader import load_profile
from registry_client.reconciliation.session import (
    ReconciliationSession,
    SessionSnapshot,
    SessionState,
)

__all__ = [
    "ReconciliationSession",
    "SessionSnapshot",
    "SessionState",
    "aggregate_history",
    "authorize",
    "authorized_history",
    "load_assets",
    "load_profile",
    "merge_feed",
    "sort_assets",
]
