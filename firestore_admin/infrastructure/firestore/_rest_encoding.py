"""Encode/decode Python values to/from Firestore REST API 'fields' format."""

import math
from collections.abc import Collection, Mapping
from datetime import datetime, timezone
from typing import Any

from firestore_admin.domain.exceptions import UnsupportedTypeError

NULL_VALUE = "NULL_VALUE"

# Tags whose payload is returned as is on decode.
_SCALAR_TAGS = (
    "stringValue",
    "booleanValue",
    "doubleValue",
    "integerValue",
    "timestampValue",
)
VALUE_TAGS = (*_SCALAR_TAGS, "nullValue", "mapValue", "arrayValue")


def _format_timestamp(v: datetime) -> str:
    if v.tzinfo is not None:
        v = v.astimezone(timezone.utc)
    return v.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z"


def _encode_number(v: int | float) -> dict:
    if isinstance(v, int) or v.is_integer():
        return {"integerValue": int(v)}
    return {"doubleValue": v}


def encode_value(v: Any) -> dict:
    """Convert one Python value to a Firestore Value.

    NaN is passed through as a double; only encode_object substitutes it.

    Raises:
        UnsupportedTypeError: For values with no Firestore representation.
    """
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, (int, float)):
        return _encode_number(v)
    if v is None:
        return {"nullValue": NULL_VALUE}
    if isinstance(v, datetime):
        return {"timestampValue": _format_timestamp(v)}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(x) for x in v]}}
    if isinstance(v, Mapping):
        return {"mapValue": {"fields": encode_object(v)}}
    raise UnsupportedTypeError(type(v).__name__)


def _encode_field(v: Any, path: str, integer_fields: Collection[str]) -> dict:
    if isinstance(v, float) and math.isnan(v):
        if path in integer_fields:
            return {"integerValue": 0}
        return {"doubleValue": 0.0}
    if isinstance(v, (list, tuple)):
        # Array elements share the field's path.
        return {
            "arrayValue": {
                "values": [_encode_field(x, path, integer_fields) for x in v]
            }
        }
    if isinstance(v, Mapping):
        return {"mapValue": {"fields": encode_object(v, integer_fields=integer_fields, _prefix=path)}}
    return encode_value(v)


def encode_object(
    data: Mapping[str, Any],
    *,
    integer_fields: Collection[str] = (),
    _prefix: str = "",
) -> dict:
    """Convert a Python mapping to Firestore fields (name -> Value).

    A float NaN anywhere in the object is stored as double 0.0, or as
    integer 0 when its dotted field path is listed in ``integer_fields``.

    Args:
        data: Field name to native value.
        integer_fields: Dotted paths of fields declared as integers.

    Returns:
        Mapping of field name to Firestore Value.

    Raises:
        UnsupportedTypeError: If any nested value cannot be encoded.
    """
    fields: dict[str, dict] = {}
    for key, value in data.items():
        path = f"{_prefix}.{key}" if _prefix else key
        fields[key] = _encode_field(value, path, integer_fields)
    return fields


def encode_document(data: Mapping[str, Any], *, integer_fields: Collection[str] = ()) -> dict:
    """Convert a Python dict to a Firestore REST Document body ({"fields": ...})."""
    return {"fields": encode_object(data, integer_fields=integer_fields)}


def _value_tag(obj: Mapping[str, Any]) -> str | None:
    for tag in VALUE_TAGS:
        if tag in obj:
            return tag
    return None


def decode_value(obj: Any) -> Any:
    """Convert a Firestore Value back to a Python value.

    Scalars come back as sent by the server: timestamps stay ISO-8601
    strings and integers keep whatever JSON type carried them. A mapping
    without a recognized tag is decoded as nested fields. Never raises.
    """
    if not isinstance(obj, Mapping):
        return obj
    tag = _value_tag(obj)
    if tag is None:
        return decode_document(obj)
    payload = obj[tag]
    if tag in _SCALAR_TAGS:
        return payload
    if tag == "nullValue":
        return None
    if tag == "mapValue":
        fields = payload.get("fields") if isinstance(payload, Mapping) else None
        return decode_document(fields or {})
    # arrayValue
    values = payload.get("values") if isinstance(payload, Mapping) else None
    if not values or not isinstance(values, (list, tuple)):
        return []
    return [decode_value(x) for x in values]


def decode_document(fields: Mapping[str, Any] | None) -> dict:
    """Convert Firestore REST Document.fields to a Python dict."""
    if not fields or not isinstance(fields, Mapping):
        return {}
    return {k: decode_value(v) for k, v in fields.items()}
