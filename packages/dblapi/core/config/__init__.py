"""Configuration management for dblapi."""

from dblapi.core.config.loader import ClientSettings, load_client_settings, load_config

__all__ = [
    "ClientSettings",
    "load_client_settings",
    "load_config",
]
