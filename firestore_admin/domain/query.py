"""Query specification value objects.

A QuerySpec is built per call and discarded afterwards; nothing here holds
state between requests.
"""

from dataclasses import dataclass, field
from typing import Any

from firestore_admin.domain.enums import CompositeOperator, Direction, FirestoreOperator

# (field path, operator, comparison value); field path may be dotted, e.g. "address.city"
FilterClause = tuple[str, FirestoreOperator | str, Any]


@dataclass(frozen=True)
class OrderBy:
    """Sort on a field path; direction defaults to ascending."""

    field: str
    direction: Direction | str = Direction.ASCENDING


@dataclass
class QuerySpec:
    """Filters, ordering and paging for a collection query.

    Filters are combined with AND. ``order_by`` entries may be OrderBy
    instances, (field, direction) tuples, bare field names, or dicts with
    "field" and optional "direction" keys.
    """

    filters: list[FilterClause] = field(default_factory=list)
    operator: CompositeOperator | str = CompositeOperator.AND
    order_by: list[Any] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
