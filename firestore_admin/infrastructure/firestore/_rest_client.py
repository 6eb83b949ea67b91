"""Async Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.

Errors reported by Firestore in a response body are logged through
report_remote_error. Create, read, update, list and delete still return
whatever could be decoded from the body; queries return [] instead.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Collection
from typing import Any
from urllib.parse import quote

import httpx

from firestore_admin.domain.exceptions import report_remote_error
from firestore_admin.domain.query import QuerySpec
from firestore_admin.infrastructure.firestore._auth import AccessTokenSession
from firestore_admin.infrastructure.firestore._rest_encoding import (
    decode_document,
    encode_document,
)
from firestore_admin.infrastructure.firestore._rest_query import (
    ID_KEY,
    PATH_KEY,
    build_structured_query,
    document_id,
    interpret_query_response,
    query_parent,
)

logger = logging.getLogger(__name__)

_BASE = "https://firestore.googleapis.com/v1"


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    params: list[tuple[str, str]] | None = None,
    access_token: str | None = None,
) -> Any:
    """Perform an HTTP request to the Firestore REST API and parse the body.

    The JSON body is returned whatever the status code, so Firestore error
    objects reach the caller. Non-JSON error responses raise
    httpx.HTTPStatusError; an empty success body yields {}.
    """
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method not in ("GET", "POST", "PATCH", "DELETE"):
        raise ValueError(f"Unsupported method: {method!r}")
    logger.debug("%s %s", method, url)
    resp = await client.request(method, url, headers=headers, json=body, params=params)
    raw = resp.content
    if not raw:
        resp.raise_for_status()
        return {}
    try:
        return json.loads(raw.decode())
    except ValueError:
        resp.raise_for_status()
        raise


def _relative_path(name: str) -> str:
    return name.split("documents/", 1)[1] if "documents/" in name else ""


def _with_identity(data: Any) -> dict:
    """Decode a Document body and attach its id and path when the name is present."""
    if not isinstance(data, dict):
        return {}
    out = decode_document(data.get("fields"))
    name = data.get("name")
    if name:
        return {ID_KEY: document_id(name), PATH_KEY: _relative_path(name), **out}
    return out


class FirestoreAdminClient:
    """Firestore document CRUD and queries over the REST API.

    Paths are relative to the database's documents root, e.g.
    "users" (collection) or "users/alice" (document).
    """

    def __init__(
        self,
        project_id: str,
        session: AccessTokenSession,
        *,
        database: str = "(default)",
        base_url: str = _BASE,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        page_size: int = 300,
    ) -> None:
        self._project_id = project_id
        self._session = session
        self._prefix = f"projects/{project_id}/databases/{database}/documents"
        self._documents_url = f"{base_url.rstrip('/')}/{self._prefix}"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._page_size = page_size

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def documents_url(self) -> str:
        return self._documents_url

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "FirestoreAdminClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _url(self, path: str) -> str:
        path = path.strip("/")
        return f"{self._documents_url}/{path}" if path else self._documents_url

    async def _call(
        self,
        url: str,
        method: str = "GET",
        body: dict | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        return await _request_async(
            self._http,
            url,
            method=method,
            body=body,
            params=params,
            access_token=await self._session.get_token(),
        )

    async def create_document(
        self,
        path: str,
        data: dict[str, Any],
        *,
        document_id: str | None = None,
        integer_fields: Collection[str] = (),
    ) -> dict:
        """Create a document in the collection at path.

        Args:
            path: Collection path.
            data: Document data.
            document_id: Optional id; Firestore generates one when omitted.
            integer_fields: Dotted paths whose NaN values are stored as integer 0.

        Returns:
            The created document's data with ID_KEY and PATH_KEY attached.

        Raises:
            UnsupportedTypeError: data holds an unencodable value (nothing is sent).
        """
        body = encode_document(data, integer_fields=integer_fields)
        url = self._url(path)
        if document_id is not None:
            url = f"{url}?documentId={quote(document_id, safe='')}"
        out = await self._call(url, method="POST", body=body)
        if isinstance(out, dict) and out.get("error"):
            report_remote_error(out["error"], "createDocument")
        return _with_identity(out)

    async def _list_raw(self, path: str, call: str) -> list[dict]:
        """Fetch every page of a collection listing."""
        documents: list[dict] = []
        page_token: str | None = None
        while True:
            params = [("pageSize", str(self._page_size))]
            if page_token:
                params.append(("pageToken", page_token))
            out = await self._call(self._url(path), params=params)
            if not isinstance(out, dict):
                break
            if out.get("error"):
                report_remote_error(out["error"], call)
                break
            documents.extend(out.get("documents") or [])
            page_token = out.get("nextPageToken")
            if not page_token:
                break
        return documents

    async def list_documents_in_collection(self, path: str) -> list[str]:
        """Return the ids of all documents directly in the collection at path."""
        docs = await self._list_raw(path, "listDocumentsInCollection")
        return [document_id(doc.get("name", "")) for doc in docs]

    async def get_document(self, path: str) -> dict:
        """Fetch a document's fields; {} when the document has none or on error."""
        out = await self._call(self._url(path))
        if isinstance(out, dict) and out.get("error"):
            report_remote_error(out["error"], "getDocument")
        return decode_document(out.get("fields") if isinstance(out, dict) else None)

    async def get_documents_in_collection(
        self,
        path: str,
        query: QuerySpec | None = None,
        *,
        collection_group: bool = False,
    ) -> list[dict]:
        """Fetch documents of a collection, optionally filtered.

        Without a query this lists the collection. With a query, or for a
        collection group, a structured query is run; a remote error then
        yields [].

        Args:
            path: Collection path.
            query: Optional filters, ordering, limit and offset.
            collection_group: Match same-named subcollections everywhere.

        Returns:
            Decoded documents, each with its id under ID_KEY.
        """
        if query is None and not collection_group:
            docs = await self._list_raw(path, "getDocumentsInCollection")
            return [
                {**decode_document(doc.get("fields")), ID_KEY: document_id(doc.get("name", ""))}
                for doc in docs
            ]

        body = build_structured_query(path, query, include_subcollections=collection_group)
        parent = self._documents_url if collection_group else query_parent(self._documents_url, path)
        url = f"{parent}:runQuery"
        out = await self._call(url, method="POST", body=body)
        return interpret_query_response(out, call=url)

    async def update_document(
        self,
        path: str,
        data: dict[str, Any],
        update_fields: list[str] | None = None,
        *,
        integer_fields: Collection[str] = (),
    ) -> dict:
        """Update a document, optionally only the given (dotted) field paths.

        Without update_fields the document is replaced (and created if missing).

        Returns:
            The updated document's data with ID_KEY and PATH_KEY attached.
        """
        body = encode_document(data, integer_fields=integer_fields)
        params = [("updateMask.fieldPaths", f) for f in update_fields or []]
        logger.info("Updating document %s", path)
        out = await self._call(self._url(path), method="PATCH", body=body, params=params or None)
        if isinstance(out, dict) and out.get("error"):
            report_remote_error(out["error"], "updateDocument")
        return _with_identity(out)

    async def delete_document(self, path: str) -> bool:
        """Delete a document. Returns False when Firestore reported an error."""
        out = await self._call(self._url(path), method="DELETE")
        if isinstance(out, dict) and out.get("error"):
            report_remote_error(out["error"], "deleteDocument")
            return False
        return True
