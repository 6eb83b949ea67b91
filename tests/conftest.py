"""Pytest configuration and fixtures for firestore_admin.

HTTP is faked with httpx.MockTransport and google-auth credentials with a
small stand-in, so no test touches the network.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from firestore_admin.core.config import get_settings
from firestore_admin.infrastructure.firestore._auth import AccessTokenSession
from firestore_admin.infrastructure.firestore._rest_client import FirestoreAdminClient

PROJECT_ID = "test-project"
DOCUMENTS_ROOT = f"projects/{PROJECT_ID}/databases/(default)/documents"
BASE_URL = "https://firestore.test/v1"


class FakeCredentials:
    """Stands in for service_account.Credentials; refresh() hands out numbered tokens."""

    def __init__(self, expiry=None) -> None:
        self.token: str | None = None
        self.expiry = expiry
        self.refresh_count = 0

    def refresh(self, request: Any) -> None:
        self.refresh_count += 1
        self.token = f"token-{self.refresh_count}"


class Recorder:
    """Records requests and answers each with the next queued (status, body)."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[tuple[int, Any]] = []

    def queue(self, body: Any, status: int = 200) -> None:
        self._responses.append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self._responses.pop(0) if self._responses else (200, {})
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


def service_account_info(**overrides: Any) -> dict:
    info = {
        "type": "service_account",
        "project_id": PROJECT_ID,
        "client_email": "test@example.com",
        "private_key": "test-private-key",
    }
    info.update(overrides)
    return info


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def credentials() -> FakeCredentials:
    return FakeCredentials()


@pytest.fixture
def session(credentials: FakeCredentials) -> AccessTokenSession:
    return AccessTokenSession(credentials)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def firestore(recorder: Recorder, session: AccessTokenSession) -> FirestoreAdminClient:
    """FirestoreAdminClient wired to the recorder's MockTransport."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder.handler))
    client = FirestoreAdminClient(PROJECT_ID, session, base_url=BASE_URL, http_client=http)
    yield client
    await http.aclose()


@pytest.fixture
def doc_name() -> Callable[[str], str]:
    """Return a function building fully qualified document names."""
    return lambda path: f"{DOCUMENTS_ROOT}/{path}"
