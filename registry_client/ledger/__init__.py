"""
Registry contract read models.

The Ledger/Signer protocols live in interface, the web3 adapter in
web3_ledger, node account helpers in rpc and signer.
"""

from registry_client.ledger.models import (
    Asset,
    HistoryRecord,
    LedgerTotals,
    Profile,
)

__all__ = [
    "Asset",
    "HistoryRecord",
    "LedgerTotals",
    "Profile",
]
