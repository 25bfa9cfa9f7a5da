"""
Application settings and environment configuration.

Typed settings (node RPC URL, contract address, API host/port, feed bounds)
resolved from env through config.env and cached for the process.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass

from registry_client.config import env


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one client process."""

    rpc_url: str
    contract_address: str
    account_index: int = 0
    request_timeout_sec: float = env.DEFAULT_REQUEST_TIMEOUT_SEC
    recent_sample_size: int = env.DEFAULT_RECENT_SAMPLE_SIZE
    recent_feed_size: int = env.DEFAULT_RECENT_FEED_SIZE
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "info"


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    env.load_registry_env()
    return Settings(
        rpc_url=env.get_rpc_url(),
        contract_address=env.get_contract_address(),
        account_index=env.get_account_index(),
        request_timeout_sec=env.get_request_timeout_sec(),
        recent_sample_size=env.get_recent_sample_size(),
        recent_feed_size=env.get_recent_feed_size(),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=int((os.getenv("API_PORT") or "8000").strip() or "8000"),
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Cached for the process; tests call get_settings.cache_clear() after
    changing the environment.
    """
    return load_settings()
