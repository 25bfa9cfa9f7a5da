"""
Configuration management for the Registry Client.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for all client configuration.
"""

from registry_client.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
