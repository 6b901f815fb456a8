"""
Query package for Javelin.

Statement descriptors, the identifier/predicate sanitizer, the table existence
gate and the executor that runs statements and materializes rows.
"""

from javelin.query.abstract import Materializable
from javelin.query.executor import execute, leading_verb, materialize
from javelin.query.gate import TableExistenceGate
from javelin.query.sanitizer import (
    sanitize_identifier,
    sanitize_predicate_fragment,
    sanitize_table_name,
)
from javelin.query.statement import Statement, Verb

__all__ = [
    "Materializable",
    "Statement",
    "TableExistenceGate",
    "Verb",
    "execute",
    "leading_verb",
    "materialize",
    "sanitize_identifier",
    "sanitize_predicate_fragment",
    "sanitize_table_name",
]
