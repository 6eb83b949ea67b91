"""Structured query request bodies and runQuery response handling."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from firestore_admin.domain.enums import CompositeOperator, Direction, FirestoreOperator
from firestore_admin.domain.exceptions import InvalidQueryError, report_remote_error
from firestore_admin.domain.query import OrderBy, QuerySpec
from firestore_admin.infrastructure.firestore._rest_encoding import (
    decode_document,
    encode_value,
)

logger = logging.getLogger(__name__)

# Firestore rejects user field names matching __.*__, so these cannot collide.
ID_KEY = "__id__"
PATH_KEY = "__path__"

_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
    "array_contains_any": "ARRAY_CONTAINS_ANY",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


def resolve_operator(op: FirestoreOperator | str, field: str | None = None) -> FirestoreOperator:
    """Return the FirestoreOperator for an enum member, wire name or symbol.

    Raises:
        InvalidQueryError: If op is not one of the supported operators.
    """
    if isinstance(op, FirestoreOperator):
        return op
    name = _OP_MAP.get(op, op)
    try:
        return FirestoreOperator(name)
    except ValueError:
        raise InvalidQueryError(
            f"Unsupported operator {op!r}; expected one of {FirestoreOperator.values()}",
            field=field,
        ) from None


def _resolve_direction(direction: Direction | str | None, field: str) -> str:
    if direction is None:
        return Direction.ASCENDING.value
    try:
        return Direction(direction).value
    except ValueError:
        raise InvalidQueryError(
            f"Unsupported sort direction {direction!r}", field=field
        ) from None


def _order_clause(entry: Any) -> dict:
    if isinstance(entry, OrderBy):
        field, direction = entry.field, entry.direction
    elif isinstance(entry, str):
        field, direction = entry, None
    elif isinstance(entry, Mapping):
        field, direction = entry["field"], entry.get("direction")
    else:
        field, direction = entry
    return {
        "field": {"fieldPath": field},
        "direction": _resolve_direction(direction, field),
    }


def collection_id(collection_path: str) -> str:
    """Return the last segment of a collection path ('users/u1/orders' -> 'orders')."""
    return collection_path.strip("/").split("/")[-1]


def query_parent(documents_root: str, collection_path: str) -> str:
    """Return the resource that :runQuery is posted to for collection_path.

    Top-level collections are queried from the documents root; subcollections
    from their parent document.
    """
    segments = collection_path.strip("/").split("/")
    if len(segments) <= 1:
        return documents_root
    return f"{documents_root}/{'/'.join(segments[:-1])}"


def build_structured_query(
    collection_path: str,
    spec: QuerySpec | None = None,
    *,
    include_subcollections: bool = False,
) -> dict[str, Any]:
    """Build the runQuery request body for a collection.

    Args:
        collection_path: Collection path; only its last segment is sent.
        spec: Optional filters, ordering, limit and offset.
        include_subcollections: Query every collection with this id
            (collection group) instead of the single collection.

    Returns:
        {"structuredQuery": {...}} ready to POST.

    Raises:
        InvalidQueryError: Unknown operator or sort direction.
        UnsupportedTypeError: A filter value cannot be encoded.
    """
    structured: dict[str, Any] = {
        "from": [
            {
                "collectionId": collection_id(collection_path),
                "allDescendants": include_subcollections,
            }
        ],
    }
    if spec is None:
        return {"structuredQuery": structured}

    if spec.filters:
        try:
            composite = CompositeOperator(spec.operator)
        except ValueError:
            raise InvalidQueryError(
                f"Unsupported composite operator {spec.operator!r}"
            ) from None
        if composite is not CompositeOperator.AND:
            logger.warning(
                "Composite operator %s is not supported; combining filters on %s with AND",
                composite.value,
                collection_path,
            )
        structured["where"] = {
            "compositeFilter": {
                "op": CompositeOperator.AND.value,
                "filters": [
                    {
                        "fieldFilter": {
                            "field": {"fieldPath": field},
                            "op": resolve_operator(op, field).value,
                            "value": encode_value(value),
                        }
                    }
                    for field, op, value in spec.filters
                ],
            }
        }
    if spec.order_by:
        structured["orderBy"] = [_order_clause(entry) for entry in spec.order_by]
    if spec.limit is not None:
        structured["limit"] = spec.limit
    if spec.offset is not None:
        structured["offset"] = spec.offset
    return {"structuredQuery": structured}


def document_id(name: str) -> str:
    """Return the id (last segment) of a fully qualified document name."""
    return name.split("/")[-1] if name else ""


def interpret_query_response(raw: Any, call: str = "runQuery") -> list[dict]:
    """Turn a runQuery response into decoded documents with ids attached.

    Envelopes without a document (e.g. only ``readTime``) are skipped, so a
    query with no matches returns []. An error, top-level or on the first
    envelope, is logged and [] is returned instead of partial results.

    Args:
        raw: Parsed JSON body of the runQuery call.
        call: Label used when reporting an error.

    Returns:
        One dict per matching document, id under ID_KEY.
    """
    if isinstance(raw, Mapping):
        if raw.get("error"):
            report_remote_error(raw["error"], call)
            return []
        items = [raw]
    elif isinstance(raw, list):
        items = raw
    else:
        return []
    if items and isinstance(items[0], Mapping) and items[0].get("error"):
        report_remote_error(items[0]["error"], call)
        return []

    results: list[dict] = []
    for item in items:
        doc = item.get("document") if isinstance(item, Mapping) else None
        if not doc:
            continue
        data = decode_document(doc.get("fields"))
        data[ID_KEY] = document_id(doc.get("name", ""))
        results.append(data)
    logger.debug("%s returned %d document(s)", call, len(results))
    return results
