"""
Database connection management for Javelin.

Holds the single process-wide PostgreSQL connection the query builder runs
against. The ConnectionManager singleton owns the connection lifecycle and is
cleaned up on application exit; module-level helpers delegate to it.

Connecting retries transient failures using tenacity.
"""

from __future__ import annotations

import atexit
import threading
from pathlib import Path
from typing import Optional, Union

import psycopg
from psycopg import Connection, sql
from psycopg.conninfo import conninfo_to_dict
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from javelin.config import Settings, get_settings
from javelin.exceptions import ConnectionNotOpenError, SchemaNotFoundError
from javelin.utils.logging import get_logger

log = get_logger(__name__)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def _connect(
    url: str,
    user: Optional[str] = None,
    password: Optional[str] = None,
    connect_timeout: Optional[int] = None,
) -> Connection:
    """
    Open a dedicated autocommit connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    kwargs = {}
    if user is not None:
        kwargs["user"] = user
    if password is not None:
        kwargs["password"] = password
    if connect_timeout is not None:
        kwargs["connect_timeout"] = connect_timeout
    return psycopg.connect(url, autocommit=True, **kwargs)


def _target(url: str) -> str:
    """Describe where ``url`` points without its credentials."""
    try:
        params = conninfo_to_dict(url)
    except psycopg.ProgrammingError:
        return "<invalid conninfo>"
    return f"{params.get('host', '')}:{params.get('port', '')}/{params.get('dbname', '')}"


class ConnectionManager:
    """
    Thread-safe singleton holding the live database connection.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["ConnectionManager"] = None
    _lock = threading.RLock()

    def __new__(cls) -> "ConnectionManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._connection: Optional[Connection] = None
                # Register cleanup on exit
                atexit.register(cls._instance.close)
            return cls._instance

    def open(
        self,
        url: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        schema: Optional[str] = None,
        connect_timeout: Optional[int] = None,
    ) -> Connection:
        """
        Open a connection, replacing any connection that is already open.

        Parameters
        ----------
        url : str
            PostgreSQL URL or conninfo string.
        user, password : str, optional
            Credentials; override whatever ``url`` carries.
        schema : str, optional
            Schema to put first on the search path.

        Returns
        -------
        Connection
            The new live connection.
        """
        with self._lock:
            if self._connection is not None:
                log.info("Closing open connection %s", self._describe(self._connection))
                self.close()
            try:
                self._connection = _connect(url, user, password, connect_timeout)
            except psycopg.Error:
                log.error("Could not open a connection to %s", _target(url), exc_info=True)
                self._connection = None
                raise
            log.info("Opened connection %s", self._describe(self._connection))
            if schema is not None:
                self.set_schema(schema)
            return self._connection

    def set_schema(self, schema: str) -> None:
        """
        Put ``schema`` first on the search path of the live connection.

        An unknown schema drops the connection, as does any driver failure.
        """
        with self._lock:
            conn = self.get()
            if conn is None:
                raise ConnectionNotOpenError()
            try:
                found = conn.execute(
                    "SELECT 1 FROM information_schema.schemata WHERE schema_name = %s",
                    (schema,),
                ).fetchone()
                if found is None:
                    raise SchemaNotFoundError(schema)
                conn.execute(sql.SQL("SET search_path TO {}").format(sql.Identifier(schema)))
            except (psycopg.Error, SchemaNotFoundError):
                log.error("Could not switch to schema %s", schema, exc_info=True)
                self.close()
                raise

    def get(self) -> Optional[Connection]:
        """Return the live connection, or None when none is open."""
        conn = self._connection
        if conn is None or conn.closed:
            return None
        return conn

    def close(self) -> None:
        """
        Close the live connection, if any.

        Errors while closing are logged and never raised. This is called
        automatically on exit via atexit hook.
        """
        with self._lock:
            conn = self._connection
            if conn is None:
                return
            try:
                conn.close()
                log.info("Closed connection %s", self._describe(conn))
            except Exception as exc:
                log.error("Error when closing connection: %s", exc)
            finally:
                self._connection = None

    @staticmethod
    def _describe(conn: Connection) -> str:
        try:
            info = conn.info
            return f"{info.user}@{info.host}:{info.port}/{info.dbname}"
        except Exception:
            return repr(conn)


def open_connection(
    url: str,
    user: Optional[str] = None,
    password: Optional[str] = None,
    schema: Optional[str] = None,
) -> Connection:
    """Open the process-wide connection. See ``ConnectionManager.open``."""
    return ConnectionManager().open(url, user=user, password=password, schema=schema)


def open_from_settings(settings: Optional[Settings] = None) -> Connection:
    """
    Open the process-wide connection described by ``settings``.

    Falls back to the cached environment settings when none are given.
    """
    if settings is None:
        settings = get_settings()
    return ConnectionManager().open(
        settings.dsn,
        schema=settings.db_schema,
        connect_timeout=settings.db_connect_timeout,
    )


def open_from_file(location: Union[str, Path]) -> Connection:
    """
    Open the process-wide connection from a properties file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    try:
        settings = Settings.from_file(location)
    except FileNotFoundError:
        log.error("File not found at path specified: %s", location)
        raise
    return open_from_settings(settings)


def set_schema(schema: str) -> None:
    """Switch the schema of the process-wide connection."""
    ConnectionManager().set_schema(schema)


def get_connection() -> Optional[Connection]:
    """Return the process-wide connection, or None when none is open."""
    return ConnectionManager().get()


def close_connection() -> None:
    """Close the process-wide connection. Safe to call repeatedly."""
    ConnectionManager().close()


__all__ = [
    "ConnectionManager",
    "open_connection",
    "open_from_settings",
    "open_from_file",
    "set_schema",
    "get_connection",
    "close_connection",
]
