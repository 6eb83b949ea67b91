"""Build a FirestoreAdminClient from settings.

Credentials come from either FIREBASE_SERVICE_ACCOUNT (JSON string) or
FIREBASE_SERVICE_ACCOUNT_PATH (file path). Unlike a long-lived app
singleton, every call returns a new client with its own token session.
"""

import json
import logging
from pathlib import Path

import httpx

from firestore_admin.core.config import Settings, get_settings
from firestore_admin.domain.exceptions import ConfigurationError
from firestore_admin.infrastructure.firestore._auth import AccessTokenSession
from firestore_admin.infrastructure.firestore._rest_client import FirestoreAdminClient

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ("project_id", "client_email", "private_key")


def load_service_account_info(settings: Settings) -> dict:
    """Return the service account dict from the env key or file path.

    Raises:
        ConfigurationError: Neither source is set, the file is missing, the
            content is not JSON, or required keys are absent.
    """
    key_json = (
        settings.firebase_service_account.get_secret_value()
        if settings.firebase_service_account
        else None
    )
    if key_json:
        try:
            info = json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ConfigurationError("FIREBASE_SERVICE_ACCOUNT is not valid JSON") from e
    elif settings.firebase_service_account_path:
        path = settings.firebase_service_account_path
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            raise ConfigurationError(f"Service account file not found: {path}")
        try:
            with open(resolved, encoding="utf-8") as f:
                info = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Service account file is not valid JSON: {path}") from e
    else:
        raise ConfigurationError(
            "Set FIREBASE_SERVICE_ACCOUNT (full JSON string) "
            "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
        )

    if not isinstance(info, dict):
        raise ConfigurationError("Service account JSON must be an object")
    missing = [k for k in _REQUIRED_KEYS if not info.get(k)]
    if missing:
        raise ConfigurationError(
            f"Service account JSON missing: {', '.join(missing)}"
        )
    return info


def create_client(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    session: AccessTokenSession | None = None,
) -> FirestoreAdminClient:
    """Create a Firestore client from settings (default: get_settings()).

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        http_client: Optional shared httpx client (not closed by aclose()).
        session: Optional token session; built from the service account otherwise.

    Returns:
        A ready FirestoreAdminClient.

    Raises:
        ConfigurationError: Missing or malformed service account.
    """
    settings = settings or get_settings()
    project_id = settings.firestore_project_id
    if session is None or not project_id:
        info = load_service_account_info(settings)
        project_id = project_id or info["project_id"]
        if session is None:
            session = AccessTokenSession.from_service_account_info(
                info, scopes=settings.auth_scopes
            )
    logger.info("Firestore client configured for project %s", project_id)
    return FirestoreAdminClient(
        project_id,
        session,
        database=settings.firestore_database,
        base_url=settings.firestore_base_url,
        http_client=http_client,
        timeout=settings.http_timeout_seconds,
        page_size=settings.list_page_size,
    )
