"""Enumerations for Firestore structured queries.

Values are the wire names used by the Firestore REST API.
"""

from enum import Enum


class FirestoreOperator(str, Enum):
    """Field filter operators supported by structured queries."""

    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    ARRAY_CONTAINS = "ARRAY_CONTAINS"
    IN = "IN"
    ARRAY_CONTAINS_ANY = "ARRAY_CONTAINS_ANY"
    NOT_IN = "NOT_IN"
    IS_NAN = "IS_NAN"
    IS_NULL = "IS_NULL"
    IS_NOT_NAN = "IS_NOT_NAN"
    IS_NOT_NULL = "IS_NOT_NULL"

    @classmethod
    def values(cls) -> list[str]:
        """Return all operator names as strings."""
        return [op.value for op in cls]


class Direction(str, Enum):
    """Sort direction for orderBy clauses."""

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class CompositeOperator(str, Enum):
    """How filter clauses are combined. Only AND is sent to the server."""

    AND = "AND"
    OR = "OR"
