"""
Registry Client — on-chain identity and asset registry client.

Connects to the registry contract through a Ledger, keeps a per-account
snapshot of the user's profile, owned assets and recent activity in sync,
and guards single-asset views behind a local ownership check. Modular
layout with clear separation between ledger adapters, reconciliation core,
and API server.
"""

__version__ = "0.1.0"
