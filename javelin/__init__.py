"""
Javelin - a fluent query builder and lightweight ORM for PostgreSQL.

Application classes extend ``Record`` and declare no schema: a record tracks a
table name and a set of column values, translates chained calls into a single
SQL statement, runs it over the process-wide psycopg connection and turns
result rows back into records.

    from javelin import Record, open_connection

    class Person(Record):
        __tablename__ = "people"

    open_connection("postgresql://localhost/app", "user", "secret")
    people = Person().find_all().where("age>20").execute()
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from javelin.domain.record import Query, Record
from javelin.config import Settings, get_settings
from javelin.exceptions import (
    ConnectionNotOpenError,
    InvalidColumnsError,
    InvalidIdentifierError,
    InvalidQueryError,
    JavelinError,
    MissingTableError,
    ResourcePersistenceError,
    SchemaNotFoundError,
    TypeMismatchError,
)
from javelin.infrastructure.connection import (
    close_connection,
    get_connection,
    open_connection,
    open_from_file,
    open_from_settings,
    set_schema,
)
from javelin.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Records
    "Record",
    "Query",
    # Configuration
    "Settings",
    "get_settings",
    # Connection
    "open_connection",
    "open_from_settings",
    "open_from_file",
    "set_schema",
    "get_connection",
    "close_connection",
    # Errors
    "JavelinError",
    "InvalidColumnsError",
    "InvalidQueryError",
    "InvalidIdentifierError",
    "TypeMismatchError",
    "ResourcePersistenceError",
    "MissingTableError",
    "ConnectionNotOpenError",
    "SchemaNotFoundError",
    # Logging
    "configure_logging",
    "get_logger",
]
