"""
Exception hierarchy for Javelin.

Every error raised by the query builder derives from ``JavelinError``. Failures
coming from the database driver itself (``psycopg.Error``) are logged and
re-raised untouched.
"""

from __future__ import annotations

from typing import Optional


class JavelinError(Exception):
    """Base exception class for all Javelin errors."""


class InvalidColumnsError(JavelinError):
    """Raised when the columns needed to build a statement are missing or unusable."""


class InvalidQueryError(JavelinError):
    """Raised when a statement is built or executed out of order."""

    def __init__(self, message: str, statement: Optional[str] = None):
        super().__init__(message)
        self.statement = statement


class InvalidIdentifierError(InvalidColumnsError, InvalidQueryError):
    """
    Raised when a column name, table name or predicate fails the allow-list.

    It is both an invalid-columns and an invalid-query error so callers can
    catch whichever kind they think in terms of.
    """

    def __init__(self, message: str, value: str):
        InvalidQueryError.__init__(self, message)
        self.value = value


class TypeMismatchError(JavelinError):
    """Raised when a column is re-set with a value of a different type."""

    def __init__(self, column: str, expected: type, actual: type):
        super().__init__(
            f"Column {column} holds a value of type {expected.__name__} and cannot "
            f"be set to a value of type {actual.__name__}; use change_column() instead"
        )
        self.column = column
        self.expected = expected
        self.actual = actual


class ResourcePersistenceError(JavelinError):
    """
    Raised when data cannot be persisted to or found in the database.

    Does not have a default message; one must be provided.
    """


class MissingTableError(ResourcePersistenceError):
    """Raised when the table backing a record does not exist."""

    def __init__(self, table: str):
        super().__init__(
            f"Table {table} does not exist in the connected schema. "
            f"Create it before using the {table} record."
        )
        self.table = table


class ConnectionNotOpenError(ResourcePersistenceError):
    """Raised when a statement needs the database but no connection is open."""

    def __init__(self, message: str = "No open database connection; call open_connection() first"):
        super().__init__(message)


class SchemaNotFoundError(ResourcePersistenceError):
    """Raised when switching to a schema that does not exist."""

    def __init__(self, schema: str):
        super().__init__(f"Schema {schema} does not exist")
        self.schema = schema


__all__ = [
    "JavelinError",
    "InvalidColumnsError",
    "InvalidQueryError",
    "InvalidIdentifierError",
    "TypeMismatchError",
    "ResourcePersistenceError",
    "MissingTableError",
    "ConnectionNotOpenError",
    "SchemaNotFoundError",
]
