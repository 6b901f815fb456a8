"""
Domain package for Javelin.

Exports the record base class, its query descriptor and the field store.
"""

from javelin.domain.fields import FieldStore
from javelin.domain.record import Query, Record

__all__ = [
    "FieldStore",
    "Query",
    "Record",
]
