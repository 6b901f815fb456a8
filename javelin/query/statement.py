"""
Immutable statement descriptors.

A Statement captures one SQL statement under construction: its verb, target
table, column list, joins, WHERE predicates and the values to bind. Builder
steps return new descriptors instead of mutating shared state, and the SQL
text is only rendered when the statement is executed or inspected.

Placeholders use psycopg's positional ``%s`` style.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Sequence, Tuple

from pydantic import BaseModel

from javelin.exceptions import InvalidColumnsError, InvalidQueryError
from javelin.query.sanitizer import (
    sanitize_identifier,
    sanitize_predicate_fragment,
    sanitize_table_name,
)


class Verb(str, Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Statement(BaseModel):
    """
    A single SQL statement, as a frozen value.

    ``values`` are bound before ``predicate_params``, matching the order their
    placeholders appear in the rendered text.
    """

    verb: Verb
    table: str
    columns: Tuple[str, ...] = ()
    values: Tuple[Any, ...] = ()
    joins: Tuple[str, ...] = ()
    predicates: Tuple[str, ...] = ()
    predicate_params: Tuple[Any, ...] = ()

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @property
    def sql(self) -> str:
        """Render the statement text."""
        if self.verb is Verb.SELECT:
            text = f"SELECT {', '.join(self.columns) or '*'} FROM {self.table}"
            for join in self.joins:
                text += f" {join}"
        elif self.verb is Verb.INSERT:
            placeholders = ", ".join("%s" for _ in self.columns)
            text = f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})"
        elif self.verb is Verb.UPDATE:
            assignments = ", ".join(f"{column} = %s" for column in self.columns)
            text = f"UPDATE {self.table} SET {assignments}"
        else:
            text = f"DELETE FROM {self.table}"
        if self.predicates:
            text += " WHERE " + " AND ".join(self.predicates)
        return text

    @property
    def params(self) -> Tuple[Any, ...]:
        """Values to bind, in placeholder order."""
        return self.values + self.predicate_params

    # Intermediary operations

    def where(self, predicate: str) -> "Statement":
        """Start the WHERE clause with a raw predicate."""
        self._require_verb("where()", Verb.SELECT, Verb.DELETE)
        if self.predicates:
            raise InvalidQueryError(
                "A WHERE clause is already present; use where_and() to extend it",
                self.sql,
            )
        return self.model_copy(update={"predicates": (sanitize_predicate_fragment(predicate),)})

    def where_and(self, predicate: str) -> "Statement":
        """Extend the WHERE clause, starting one if there is none yet."""
        self._require_verb("where_and()", Verb.SELECT, Verb.DELETE)
        clause = sanitize_predicate_fragment(predicate)
        return self.model_copy(update={"predicates": self.predicates + (clause,)})

    def join_on(self, other_table: str, this_column: str, other_column: str) -> "Statement":
        """Join ``other_table`` on an equality between one column of each table."""
        self._require_verb("join_on()", Verb.SELECT)
        other_table = sanitize_table_name(other_table)
        clause = (
            f"JOIN {other_table} ON ({self.table}.{sanitize_identifier(this_column)}"
            f" = {other_table}.{sanitize_identifier(other_column)})"
        )
        return self.model_copy(update={"joins": self.joins + (clause,)})

    def join_using(self, other_table: str, shared_column: str) -> "Statement":
        """Join ``other_table`` on a column both tables share."""
        self._require_verb("join_using()", Verb.SELECT)
        clause = (
            f"JOIN {sanitize_table_name(other_table)}"
            f" USING ({sanitize_identifier(shared_column)})"
        )
        return self.model_copy(update={"joins": self.joins + (clause,)})

    def _require_verb(self, operation: str, *verbs: Verb) -> None:
        if self.verb not in verbs:
            allowed = " or ".join(verb.value for verb in verbs)
            raise InvalidQueryError(
                f"{operation} only applies to {allowed} statements",
                self.sql,
            )


# Starting operations


def select_all(table: str) -> Statement:
    return Statement(verb=Verb.SELECT, table=sanitize_table_name(table))


def select_by_column(table: str, column: str, value: Any) -> Statement:
    return Statement(
        verb=Verb.SELECT,
        table=sanitize_table_name(table),
        predicates=(f"{sanitize_identifier(column)} = %s",),
        predicate_params=(value,),
    )


def select_columns(table: str, columns: Sequence[str]) -> Statement:
    if not columns:
        raise InvalidColumnsError("At least one column must be given")
    return Statement(
        verb=Verb.SELECT,
        table=sanitize_table_name(table),
        columns=tuple(sanitize_identifier(column) for column in columns),
    )


def insert(table: str, fields: Iterable[Tuple[str, Any]]) -> Statement:
    """
    Build an INSERT of every column in ``fields``.

    Raises
    ------
    InvalidColumnsError
        If ``fields`` is empty.
    """
    fields = tuple(fields)
    if not fields:
        raise InvalidColumnsError("No columns are set")
    return Statement(
        verb=Verb.INSERT,
        table=sanitize_table_name(table),
        columns=tuple(sanitize_identifier(column) for column, _ in fields),
        values=tuple(value for _, value in fields),
    )


def update(table: str, fields: Iterable[Tuple[str, Any]], key_column: str) -> Statement:
    """
    Build an UPDATE setting every column in ``fields`` on the row matching
    ``key_column``. All values, the key included, are bound parameters.

    Raises
    ------
    InvalidColumnsError
        If ``fields`` is empty or holds no value for ``key_column``.
    """
    fields = tuple(fields)
    if not fields:
        raise InvalidColumnsError("No columns are set")
    key_column = sanitize_identifier(key_column)
    key_values = [value for column, value in fields if column.upper() == key_column.upper()]
    if not key_values:
        raise InvalidColumnsError(f"No value is set for key column {key_column}")
    return Statement(
        verb=Verb.UPDATE,
        table=sanitize_table_name(table),
        columns=tuple(sanitize_identifier(column) for column, _ in fields),
        values=tuple(value for _, value in fields),
        predicates=(f"{key_column} = %s",),
        predicate_params=(key_values[0],),
    )


def delete(table: str) -> Statement:
    return Statement(verb=Verb.DELETE, table=sanitize_table_name(table))


__all__ = [
    "Statement",
    "Verb",
    "delete",
    "insert",
    "select_all",
    "select_by_column",
    "select_columns",
    "update",
]
