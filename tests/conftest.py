"""
Pytest configuration for Javelin.

Provides fixtures for:
- An in-memory fake connection standing in for psycopg in unit tests
- Database connection management for integration tests
- Settings override for integration tests
"""

from __future__ import annotations

import os
from typing import Any, Generator, Iterable, List, Optional, Sequence, Tuple

import psycopg
import pytest

from javelin.config import Settings
from javelin.infrastructure.connection import ConnectionManager, close_connection, open_connection
from javelin.query.gate import TABLES_SQL


class FakeCursor:
    """Cursor double answering from the owning FakeConnection's script."""

    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn
        self._rows: List[Tuple[Any, ...]] = []
        self.description: Optional[List[Tuple[str]]] = None
        self.rowcount = -1

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, query: str, params: Sequence[Any] = ()) -> None:
        if query == TABLES_SQL:
            self._conn.table_lookups += 1
            self.description = [("table_name",)]
            self._rows = [(name,) for name in self._conn.tables]
            return
        self._conn.executed.append((query, tuple(params)))
        if self._conn.error is not None:
            raise self._conn.error
        if query.startswith("SELECT"):
            self.description = [(name,) for name in self._conn.columns]
            self._rows = [tuple(row) for row in self._conn.rows]
        else:
            self.description = None
            self.rowcount = self._conn.rowcount

    def fetchall(self) -> List[Tuple[Any, ...]]:
        return list(self._rows)


class FakeConnection:
    """
    Connection double.

    ``tables`` are reported by the existence gate lookup; SELECT statements
    return ``columns``/``rows``; other statements report ``rowcount``.
    """

    def __init__(
        self,
        tables: Iterable[str] = (),
        columns: Sequence[str] = (),
        rows: Sequence[Sequence[Any]] = (),
        rowcount: int = 1,
    ) -> None:
        self.tables = list(tables)
        self.columns = list(columns)
        self.rows = [tuple(row) for row in rows]
        self.rowcount = rowcount
        self.error: Optional[Exception] = None
        self.executed: List[Tuple[str, Tuple[Any, ...]]] = []
        self.table_lookups = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)


@pytest.fixture()
def fake_connection(monkeypatch: pytest.MonkeyPatch) -> FakeConnection:
    """
    Route the executor to a FakeConnection whose schema holds the tables used
    by the unit tests, stored lower-case as PostgreSQL folds them.
    """
    conn = FakeConnection(tables=["modelextension", "test"])
    monkeypatch.setattr("javelin.query.executor.get_connection", lambda: conn)
    return conn


@pytest.fixture()
def fresh_manager(monkeypatch: pytest.MonkeyPatch) -> ConnectionManager:
    """A ConnectionManager singleton that starts with no connection."""
    monkeypatch.setattr(ConnectionManager, "_instance", None)
    return ConnectionManager()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "javelin"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def db_connection_available(test_settings: Settings) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_settings.dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture()
def javelin_connection(
    test_settings: Settings, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Open the process-wide Javelin connection with the test tables dropped.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = open_connection(test_settings.dsn)
    conn.execute("DROP TABLE IF EXISTS ModelExtension")
    conn.execute("DROP TABLE IF EXISTS Test")
    try:
        yield conn
    finally:
        conn.execute("DROP TABLE IF EXISTS ModelExtension")
        conn.execute("DROP TABLE IF EXISTS Test")
        close_connection()
