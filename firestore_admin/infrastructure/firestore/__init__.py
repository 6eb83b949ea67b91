"""Firestore REST API integration (google-auth + httpx, no firebase-admin)."""

from firestore_admin.infrastructure.firestore._auth import AccessTokenSession
from firestore_admin.infrastructure.firestore._rest_client import FirestoreAdminClient
from firestore_admin.infrastructure.firestore._rest_encoding import (
    decode_document,
    decode_value,
    encode_document,
    encode_object,
    encode_value,
)
from firestore_admin.infrastructure.firestore._rest_query import (
    ID_KEY,
    PATH_KEY,
    build_structured_query,
    interpret_query_response,
)
from firestore_admin.infrastructure.firestore.client import (
    create_client,
    load_service_account_info,
)

__all__ = [
    "ID_KEY",
    "PATH_KEY",
    "AccessTokenSession",
    "FirestoreAdminClient",
    "build_structured_query",
    "create_client",
    "decode_document",
    "decode_value",
    "encode_document",
    "encode_object",
    "encode_value",
    "interpret_query_response",
    "load_service_account_info",
]
