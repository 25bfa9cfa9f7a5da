"""
Core utilities — domain exceptions and cross-cutting concerns shared by the
ledger adapters, reconciliation layer and API server.
"""
