"""
Record: the base class application objects extend to gain persistence.

A record keeps a table name and a field store of column values. Starting
operations such as ``find_all()`` return a ``Query``, a short-lived value that
intermediary operations refine and ``execute()`` runs::

    class Person(Record):
        __tablename__ = "people"

    adults = Person().find_all().where("age>20").execute()
    Person().set_column("name", "Ada").set_column("age", 36).create()
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from javelin.domain.fields import FieldStore
from javelin.exceptions import InvalidColumnsError, InvalidQueryError
from javelin.query import statement as stmt
from javelin.query.executor import execute
from javelin.query.gate import TableExistenceGate
from javelin.query.sanitizer import sanitize_table_name
from javelin.query.statement import Statement

R = TypeVar("R", bound="Record")
T = TypeVar("T", bound="Record")


def _table_of(other: Union["Record", str]) -> str:
    return other if isinstance(other, str) else other.table_name


class Query(Generic[R]):
    """
    A statement under construction, bound to the record that started it.

    Every intermediary operation returns a new Query; none mutates the
    receiver, so a partially built query can be reused or shared.
    """

    def __init__(self, record: R, statement: Statement) -> None:
        self._record = record
        self._statement = statement

    @property
    def statement(self) -> Statement:
        return self._statement

    @property
    def sql(self) -> str:
        return self._statement.sql

    @property
    def params(self) -> tuple:
        return self._statement.params

    def where(self, predicate: str) -> "Query[R]":
        """Start a WHERE clause, e.g. ``where("age>20")``."""
        return Query(self._record, self._statement.where(predicate))

    def where_and(self, predicate: str) -> "Query[R]":
        """Add an AND condition, starting the WHERE clause if needed."""
        return Query(self._record, self._statement.where_and(predicate))

    def join_on(
        self, other: Union["Record", str], this_column: str, other_column: str
    ) -> "Query[R]":
        """Join another record's table on ``this_column = other_column``."""
        return Query(
            self._record,
            self._statement.join_on(_table_of(other), this_column, other_column),
        )

    def join_using(self, other: Union["Record", str], shared_column: str) -> "Query[R]":
        """Join another record's table on a column both tables share."""
        return Query(self._record, self._statement.join_using(_table_of(other), shared_column))

    def execute(self, expected_type: Optional[Type[T]] = None) -> List[Any]:
        """
        Run the query.

        Parameters
        ----------
        expected_type : type, optional
            Type to materialize rows into; defaults to the originating
            record's own type.
        """
        target = expected_type or type(self._record)
        return execute(self._record, self.sql, self.params, target)

    def __repr__(self) -> str:
        return f"Query({self.sql!r}, params={self.params!r})"


class Record:
    """
    Base class for row-backed objects.

    The table name is the class attribute ``__tablename__`` when set, else the
    class name. Column names are case-insensitive.
    """

    __tablename__: ClassVar[Optional[str]] = None

    def __init__(self) -> None:
        self._fields = FieldStore()
        self._table_name = sanitize_table_name(type(self).__tablename__ or type(self).__name__)
        self.table_gate = TableExistenceGate()

    # Table name

    @property
    def table_name(self) -> str:
        return self._table_name

    def set_table_name(self, table_name: str) -> None:
        """Point the record at another table; a new table is checked again on next use."""
        table_name = sanitize_table_name(table_name)
        if table_name != self._table_name:
            self.table_gate = TableExistenceGate()
        self._table_name = table_name

    # Field store

    @property
    def fields(self) -> Dict[str, Any]:
        """Snapshot of the current column values, keyed by upper-case name."""
        return self._fields.to_dict()

    def get(self, column: str, default: Any = None) -> Any:
        return self._fields.get(column, default)

    def set_column(self: R, column: str, value: Any) -> R:
        """
        Set a column value, keeping its type stable.

        Raises
        ------
        TypeMismatchError
            If the column already holds a value of a different type.
        """
        self._fields.set(column, value)
        return self

    def change_column(self: R, column: str, value: Any) -> R:
        """Set a column value, allowing its type to change."""
        self._fields.change(column, value)
        return self

    def replace_fields(self, values: Mapping[str, Any]) -> None:
        self._fields = FieldStore(values)

    # Starting operations

    def find_all(self: R) -> Query[R]:
        return Query(self, stmt.select_all(self.table_name))

    def find_all_by_id(self: R, id_column: Optional[str], id_value: Any) -> Query[R]:
        """
        Select rows whose ``id_column`` equals ``id_value``.

        When ``id_column`` is None the set column named "ID" is used, else the
        first set column whose name contains "ID".
        """
        column = id_column if id_column is not None else self._detect_id_column()
        return Query(self, stmt.select_by_column(self.table_name, column, id_value))

    def find_all_by_column(self: R, column: str, value: Any) -> Query[R]:
        return Query(self, stmt.select_by_column(self.table_name, column, value))

    def find_columns(self: R, *columns: str) -> Query[R]:
        return Query(self, stmt.select_columns(self.table_name, columns))

    def delete(self: R) -> Query[R]:
        """Start a DELETE; refine it with ``where()`` before executing."""
        return Query(self, stmt.delete(self.table_name))

    # Starting and terminal operations

    def create(self) -> List[Any]:
        """
        Insert the current column values as a new row.

        Raises
        ------
        InvalidColumnsError
            If no column is set.
        ResourcePersistenceError
            If the table is missing or no row was inserted.
        """
        return Query(self, stmt.insert(self.table_name, self._fields.items())).execute()

    def update(self, primary_key_column: Optional[str] = None) -> List[Any]:
        """
        Write the current column values to the row matching the key column.

        Raises
        ------
        InvalidColumnsError
            If no column is set or no key column can be determined.
        ResourcePersistenceError
            If the table is missing or no row matched.
        """
        column = (
            primary_key_column if primary_key_column is not None else self._detect_id_column()
        )
        return Query(self, stmt.update(self.table_name, self._fields.items(), column)).execute()

    # Out-of-order calls

    def where(self, predicate: str) -> Query:
        raise self._no_starting_operation("where()")

    def where_and(self, predicate: str) -> Query:
        raise self._no_starting_operation("where_and()")

    def join_on(self, other: Union["Record", str], this_column: str, other_column: str) -> Query:
        raise self._no_starting_operation("join_on()")

    def join_using(self, other: Union["Record", str], shared_column: str) -> Query:
        raise self._no_starting_operation("join_using()")

    def execute(self, expected_type: Optional[Type[T]] = None) -> List[Any]:
        """Fail: a record on its own holds no statement to run."""
        return execute(self, "", (), expected_type or type(self))

    def _no_starting_operation(self, operation: str) -> InvalidQueryError:
        return InvalidQueryError(
            f"{operation} needs a starting operation such as find_all() or delete()",
            "",
        )

    def _detect_id_column(self) -> str:
        columns = list(self._fields)
        if "ID" in columns:
            return "ID"
        for column in columns:
            if "ID" in column:
                return column
        raise InvalidColumnsError(
            "Could not find an appropriate id column. Set the primary key column "
            'and make sure its name contains "id", or name it explicitly.'
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.table_name!r}, fields={self.fields!r})"


__all__ = ["Query", "Record"]
