"""Firestore admin client over the REST API."""

from firestore_admin.core.logging import setup_logging
from firestore_admin.domain.enums import CompositeOperator, Direction, FirestoreOperator
from firestore_admin.domain.exceptions import (
    ConfigurationError,
    FirestoreAdminException,
    InvalidQueryError,
    RemoteError,
    UnsupportedTypeError,
)
from firestore_admin.domain.query import OrderBy, QuerySpec
from firestore_admin.infrastructure.firestore import (
    ID_KEY,
    PATH_KEY,
    AccessTokenSession,
    FirestoreAdminClient,
    build_structured_query,
    create_client,
    decode_document,
    decode_value,
    encode_document,
    encode_object,
    encode_value,
    interpret_query_response,
)

__all__ = [
    "ID_KEY",
    "PATH_KEY",
    "AccessTokenSession",
    "CompositeOperator",
    "ConfigurationError",
    "Direction",
    "FirestoreAdminClient",
    "FirestoreAdminException",
    "FirestoreOperator",
    "InvalidQueryError",
    "OrderBy",
    "QuerySpec",
    "RemoteError",
    "UnsupportedTypeError",
    "build_structured_query",
    "create_client",
    "decode_document",
    "decode_value",
    "encode_document",
    "encode_object",
    "encode_value",
    "interpret_query_response",
    "setup_logging",
]
