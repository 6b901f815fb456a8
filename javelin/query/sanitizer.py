"""
Allow-list validation for text spliced directly into SQL.

Identifiers and predicates cannot travel as bound parameters, so these checks
are the only barrier between caller-supplied text and the statement. They are
character grammars, not a SQL parser: they bound which characters may appear,
never what a predicate means. ``age>0 OR 1=1`` passes the default grammar and
matches every row.
"""

from __future__ import annotations

import re

from javelin.exceptions import InvalidIdentifierError

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_]+")

TABLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Letters, underscore and whitespace only. Cannot express value comparisons
# such as ``age > 20``; kept for callers that want the narrow grammar.
STRICT_PREDICATE_PATTERN = re.compile(r"[A-Za-z_\s]+")

# Default predicate grammar: adds digits, dots for qualified columns and
# comparison operators. Quotes, semicolons, comment markers and parentheses
# stay out.
PREDICATE_PATTERN = re.compile(r"[A-Za-z0-9_\s.<>=!]+")


def sanitize_identifier(name: str) -> str:
    """
    Return ``name`` unchanged if it is a plain column name.

    Raises
    ------
    InvalidIdentifierError
        Unless ``name`` consists solely of ASCII letters and underscores.
    """
    if not isinstance(name, str) or IDENTIFIER_PATTERN.fullmatch(name) is None:
        raise InvalidIdentifierError(f"Invalid column name: {name!r}", str(name))
    return name


def sanitize_table_name(name: str) -> str:
    """Return ``name`` unchanged if it is a valid unqualified table name."""
    if not isinstance(name, str) or TABLE_NAME_PATTERN.fullmatch(name) is None:
        raise InvalidIdentifierError(f"Invalid table name: {name!r}", str(name))
    return name


def sanitize_predicate_fragment(text: str, strict: bool = False) -> str:
    """
    Return ``text`` stripped of surrounding whitespace if every character is allowed.

    Only the character set is checked. A well-formed but permissive predicate
    such as ``age>0 OR 1=1`` is accepted; callers must not pass untrusted text.

    Parameters
    ----------
    text : str
        Raw boolean expression, e.g. ``"age>20"``.
    strict : bool
        Use the letters/underscore/whitespace grammar instead of the default
        one that also admits digits, dots and comparison operators.

    Raises
    ------
    InvalidIdentifierError
        If ``text`` is empty or contains a character outside the grammar.
    """
    pattern = STRICT_PREDICATE_PATTERN if strict else PREDICATE_PATTERN
    if not isinstance(text, str) or not text.strip() or pattern.fullmatch(text) is None:
        raise InvalidIdentifierError(f"Invalid predicate: {text!r}", str(text))
    return text.strip()


__all__ = [
    "IDENTIFIER_PATTERN",
    "PREDICATE_PATTERN",
    "STRICT_PREDICATE_PATTERN",
    "TABLE_NAME_PATTERN",
    "sanitize_identifier",
    "sanitize_predicate_fragment",
    "sanitize_table_name",
]
