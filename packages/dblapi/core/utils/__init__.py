"""Shared utilities for dblapi."""

from dblapi.core.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
