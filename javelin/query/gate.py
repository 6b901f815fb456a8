"""
Table existence gate.

Before the first statement a record executes, the gate confirms the record's
table is visible on the connection's search path. A successful check is
remembered for the lifetime of the gate; a table dropped afterwards goes
unnoticed until the next statement fails in the database itself.
"""

from __future__ import annotations

from typing import Optional, Set

from psycopg import Connection

from javelin.exceptions import ConnectionNotOpenError, MissingTableError
from javelin.utils.logging import get_logger

log = get_logger(__name__)

TABLES_SQL = (
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = ANY (current_schemas(false))"
)


def list_tables(conn: Connection) -> Set[str]:
    """Return the lower-cased names of every table on the search path."""
    with conn.cursor() as cur:
        cur.execute(TABLES_SQL)
        return {str(row[0]).lower() for row in cur.fetchall()}


class TableExistenceGate:
    """Memoized existence check for one record instance."""

    def __init__(self) -> None:
        self.checked = False

    def check(self, conn: Optional[Connection], table: str) -> None:
        """
        Raise unless ``table`` exists, skipping the lookup once it has passed.

        Raises
        ------
        ConnectionNotOpenError
            If ``conn`` is None.
        MissingTableError
            If no table of that name (compared case-insensitively) exists.
        """
        if self.checked:
            return
        if conn is None:
            raise ConnectionNotOpenError()
        if table.lower() not in list_tables(conn):
            log.debug("Table %s not found", table)
            raise MissingTableError(table)
        log.debug("Table %s exists", table)
        self.checked = True


__all__ = ["TABLES_SQL", "TableExistenceGate", "list_tables"]
