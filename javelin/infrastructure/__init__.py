"""
Infrastructure package for Javelin.

Centralizes database connectivity concerns. Keep this layer focused on I/O and
resource management, decoupled from statement building.
"""

from javelin.infrastructure.connection import (
    ConnectionManager,
    close_connection,
    get_connection,
    open_connection,
    open_from_file,
    open_from_settings,
    set_schema,
)

__all__ = [
    "ConnectionManager",
    "close_connection",
    "get_connection",
    "open_connection",
    "open_from_file",
    "open_from_settings",
    "set_schema",
]
