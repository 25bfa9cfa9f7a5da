"""
Environment variable loading and validation for the Registry Client.

- REGISTRY_RPC_URL: JSON-RPC endpoint of the EVM node (default: local node)
- REGISTRY_CONTRACT_ADDRESS: deployed registry contract address
- REGISTRY_ACCOUNT_INDEX: which of the node's unlocked accounts to start with
- LEDGER_REQUEST_TIMEOUT_SEC: HTTP timeout for every ledger request
- RECENT_SAMPLE_SIZE / RECENT_FEED_SIZE: recent activity feed bounds
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is registry_client/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
# Placeholder until a deployment address is configured
DEFAULT_CONTRACT_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_REQUEST_TIMEOUT_SEC = 30.0
DEFAULT_RECENT_SAMPLE_SIZE = 5
DEFAULT_RECENT_FEED_SIZE = 10


def load_registry_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _get_str(name: str, default: str) -> str:
    load_registry_env()
    return (os.getenv(name) or "").strip() or default


def _get_int(name: str, default: int, minimum: int = 0) -> int:
    raw = _get_str(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = _get_str(name, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def get_rpc_url() -> str:
    """Resolve node RPC URL. Order: REGISTRY_RPC_URL > ETH_RPC_URL > local default."""
    url = _get_str("REGISTRY_RPC_URL", "")
    if url:
        return url
    return _get_str("ETH_RPC_URL", DEFAULT_RPC_URL)


def get_contract_address() -> str:
    """Return REGISTRY_CONTRACT_ADDRESS, or the zero-address placeholder."""
    return _get_str("REGISTRY_CONTRACT_ADDRESS", DEFAULT_CONTRACT_ADDRESS)


def get_account_index() -> int:
    return _get_int("REGISTRY_ACCOUNT_INDEX", 0)


def get_request_timeout_sec() -> float:
    return _get_float("LEDGER_REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC)


def get_recent_sample_size() -> int:
    """Number of most recently created assets whose history feeds the recent feed."""
    return _get_int("RECENT_SAMPLE_SIZE", DEFAULT_RECENT_SAMPLE_SIZE, minimum=1)


def get_recent_feed_size() -> int:
    """Maximum entries kept in the merged recent activity feed."""
    return _get_int("RECENT_FEED_SIZE", DEFAULT_RECENT_FEED_SIZE, minimum=1)


def mask_rpc_url(url: str) -> str:
    """Hide API keys embedded in provider URLs (path or query) for logging."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    if "/v3/" in url:
        return url.split("/v3/")[0] + "/v3/***"
    return url
