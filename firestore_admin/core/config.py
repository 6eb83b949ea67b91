"""Library configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The service account itself is only required when a
client is built (see infrastructure.firestore.client), so settings can be
loaded in environments without credentials.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment and .env."""

    debug: bool = False

    # Service account: full JSON string (FIREBASE_SERVICE_ACCOUNT) or file path.
    firebase_service_account: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Firestore REST endpoint. Project id defaults to the service account's project_id.
    firestore_project_id: str | None = None
    firestore_database: str = "(default)"
    firestore_base_url: str = "https://firestore.googleapis.com/v1"
    # Comma-separated OAuth scopes
    firestore_auth_scopes: str = "https://www.googleapis.com/auth/cloud-platform"

    # HTTP
    http_timeout_seconds: float = 30.0
    list_page_size: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def auth_scopes(self) -> list[str]:
        """Return OAuth scopes as a list (split on commas, blanks dropped)."""
        return [s.strip() for s in self.firestore_auth_scopes.split(",") if s.strip()]

    @model_validator(mode="after")
    def validate_endpoint_and_limits(self) -> "Settings":
        """Validate the REST endpoint, scopes and HTTP limits."""
        self.firestore_base_url = self.firestore_base_url.rstrip("/")
        if not self.firestore_base_url.startswith(("https://", "http://")):
            raise ValueError(
                f"FIRESTORE_BASE_URL must be an http(s) URL, got: {self.firestore_base_url!r}"
            )
        if not self.firestore_database:
            raise ValueError("FIRESTORE_DATABASE must not be empty")
        if not self.auth_scopes:
            raise ValueError("FIRESTORE_AUTH_SCOPES must list at least one scope")
        if self.http_timeout_seconds <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        if self.list_page_size <= 0:
            raise ValueError("LIST_PAGE_SIZE must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
