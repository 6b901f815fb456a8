"""
Statement execution and row materialization.

The executor classifies a statement by its leading keyword, passes the
originating record through its table existence gate, runs the statement with
bound parameters on the process-wide connection and turns SELECT rows into new
objects of the expected type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Sequence, Type, TypeVar

import psycopg

from javelin.exceptions import ConnectionNotOpenError, InvalidQueryError, ResourcePersistenceError
from javelin.infrastructure.connection import get_connection
from javelin.query.abstract import Materializable
from javelin.query.statement import Verb
from javelin.utils.logging import get_logger

if TYPE_CHECKING:
    from javelin.domain.record import Record

log = get_logger(__name__)

T = TypeVar("T", bound=Materializable)

_FAILURE_MESSAGES = {
    Verb.INSERT: "Insert failed: no row was created",
    Verb.UPDATE: "Update failed: no row matched the key, please try again",
    Verb.DELETE: "Delete failed: no row matched the statement",
}


def leading_verb(text: str) -> Verb:
    """
    Classify ``text`` by its first keyword.

    Raises
    ------
    InvalidQueryError
        If the statement does not start with SELECT, INSERT, UPDATE or DELETE.
    """
    keyword = text.split(None, 1)[0].upper() if text.strip() else ""
    try:
        return Verb(keyword)
    except ValueError:
        raise InvalidQueryError(
            "A starting operation was not used. Start a query with find_all(), "
            f"find_columns(), delete() or similar; got {text!r}",
            text,
        ) from None


def materialize(
    expected_type: Type[T], columns: Sequence[str], rows: Sequence[Sequence[Any]]
) -> List[T]:
    """Build one ``expected_type`` instance per row, in result order."""
    results: List[T] = []
    for row in rows:
        instance = expected_type()
        instance.replace_fields(dict(zip(columns, row)))
        results.append(instance)
    return results


def execute(
    record: "Record",
    text: str,
    params: Sequence[Any],
    expected_type: Type[T],
) -> List[T]:
    """
    Run a statement on behalf of ``record``.

    Parameters
    ----------
    record : Record
        The record the statement was built from; owns the existence gate and
        is refreshed in place when a SELECT returns exactly one row.
    text : str
        Statement text with ``%s`` placeholders.
    params : sequence
        Values bound positionally to the placeholders.
    expected_type : type
        Type each SELECT row is materialized into.

    Returns
    -------
    list
        Materialized rows for SELECT; an empty list for other verbs.

    Raises
    ------
    InvalidQueryError
        If ``text`` does not start with a supported verb.
    ConnectionNotOpenError
        If no connection is open.
    MissingTableError
        If the record's table does not exist.
    ResourcePersistenceError
        If an INSERT, UPDATE or DELETE affected no rows.
    psycopg.Error
        Any failure reported by the database, re-raised after logging.
    """
    verb = leading_verb(text)
    conn = get_connection()
    if conn is None:
        raise ConnectionNotOpenError()

    log.debug("Executing %s (%d parameter(s))", text, len(params))
    try:
        record.table_gate.check(conn, record.table_name)
        with conn.cursor() as cur:
            cur.execute(text, tuple(params))
            if verb is Verb.SELECT:
                columns = [str(column[0]).upper() for column in cur.description or ()]
                rows = cur.fetchall()
            else:
                affected = cur.rowcount
    except psycopg.Error:
        log.error("Statement failed: %s", text, exc_info=True)
        raise

    if verb is not Verb.SELECT:
        if affected <= 0:
            raise ResourcePersistenceError(_FAILURE_MESSAGES[verb])
        log.debug("%s affected %d row(s)", verb.value, affected)
        return []

    results = materialize(expected_type, columns, rows)
    log.debug("SELECT returned %d row(s)", len(results))
    if len(results) == 1:
        record.replace_fields(results[0].fields)
        record.set_table_name(results[0].table_name)
    return results


__all__ = ["execute", "leading_verb", "materialize"]
