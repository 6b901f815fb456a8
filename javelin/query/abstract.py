"""
Capability contract for types the executor can materialize rows into.

Any class satisfying ``Materializable`` and constructible with no arguments can
be passed as the expected type of a query; ``javelin.Record`` subclasses are the
usual implementers.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Materializable(Protocol):
    """
    A row-backed object.

    Attributes
    ----------
    table_name : str
        Table the object is stored in.
    fields : dict
        Snapshot of the object's column values.
    """

    @property
    def table_name(self) -> str:
        ...

    @property
    def fields(self) -> Dict[str, Any]:
        ...

    def replace_fields(self, values: Mapping[str, Any]) -> None:
        """Discard the current column values and adopt ``values``."""
        ...

    def set_table_name(self, table_name: str) -> None:
        ...


__all__ = ["Materializable"]
