"""
Field store: the column values a record currently represents.

Column names are upper-cased on every write and lookup, so comparisons are
case-insensitive by construction. Iteration follows insertion order, which
gives INSERT and UPDATE statements a stable column order.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from javelin.exceptions import TypeMismatchError


def normalize(column: str) -> str:
    """Return the canonical (upper-case) form of a column name."""
    return column.upper()


class FieldStore:
    """Case-insensitive mapping from column name to value."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = {}
        if values:
            for column, value in values.items():
                self._values[normalize(column)] = value

    def get(self, column: str, default: Any = None) -> Any:
        return self._values.get(normalize(column), default)

    def set(self, column: str, value: Any) -> None:
        """
        Set ``column`` to ``value``, refusing to change the value's type.

        ``None`` on either side carries no type, so it never conflicts.

        Raises
        ------
        TypeMismatchError
            If the column already holds a value of another runtime type.
        """
        key = normalize(column)
        current = self._values.get(key)
        if current is not None and value is not None and type(current) is not type(value):
            raise TypeMismatchError(key, type(current), type(value))
        self._values[key] = value

    def change(self, column: str, value: Any) -> None:
        """Set ``column`` to ``value`` without any type check."""
        self._values[normalize(column)] = value

    def items(self) -> Tuple[Tuple[str, Any], ...]:
        return tuple(self._values.items())

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, column: object) -> bool:
        return isinstance(column, str) and normalize(column) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldStore):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"FieldStore({self._values!r})"


__all__ = ["FieldStore", "normalize"]
