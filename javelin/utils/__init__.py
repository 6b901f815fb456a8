"""
Utilities package for Javelin.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of query-building logic.
"""

from javelin.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
