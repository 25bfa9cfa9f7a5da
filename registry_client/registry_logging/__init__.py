"""
Structured logging for Registry Client.

Use get_logger(__name__) in every module; wrap per-account work in
account_context() so its records carry the account.
"""

from registry_client.registry_logging.logger import (
    account_context,
    configure_logging,
    get_logger,
)

__all__ = ["account_context", "configure_logging", "get_logger"]
