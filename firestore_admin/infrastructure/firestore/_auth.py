"""Service account access tokens for the Firestore REST API.

Each AccessTokenSession owns one set of credentials and its cached token,
so several independently authenticated clients can live in one process.
The clock is injectable so expiry can be tested without waiting.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = ("https://www.googleapis.com/auth/cloud-platform",)
DEFAULT_TOKEN_TTL_SECONDS = 3600
# Refresh slightly before the server-side expiry.
_EXPIRY_SKEW_SECONDS = 60


def _get_credentials(key_dict: dict, scopes: Sequence[str] = DEFAULT_SCOPES):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=list(scopes)
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _refresh(credentials) -> None:
    from google.auth.transport.requests import Request

    credentials.refresh(Request())


class AccessTokenSession:
    """Holds an access token and refreshes it when missing or expired.

    Expiry is tracked on ``clock``. The absolute expiry reported by the
    credentials is converted into a remaining lifetime at refresh time, so a
    fake clock works with real credentials.
    """

    def __init__(
        self,
        credentials: Any,
        *,
        clock: Callable[[], float] = time.time,
        default_ttl: float = DEFAULT_TOKEN_TTL_SECONDS,
    ) -> None:
        self._credentials = credentials
        self._clock = clock
        self._default_ttl = default_ttl
        self._token: str | None = None
        self._expires_at: float = 0.0
        self._lock = asyncio.Lock()

    @classmethod
    def from_service_account_info(
        cls,
        info: dict,
        scopes: Sequence[str] = DEFAULT_SCOPES,
        **kwargs: Any,
    ) -> "AccessTokenSession":
        """Build a session from a parsed service account JSON key."""
        return cls(_get_credentials(info, scopes), **kwargs)

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def is_expired(self) -> bool:
        """True when no token is held or the clock has passed its expiry."""
        return self._token is None or self._clock() >= self._expires_at

    async def get_token(self) -> str:
        """Return a valid access token, refreshing in a worker thread if needed."""
        if not self.is_expired():
            return self._token  # type: ignore[return-value]
        async with self._lock:
            if self.is_expired():
                await self._refresh()
        return self._token  # type: ignore[return-value]

    async def _refresh(self) -> None:
        await asyncio.to_thread(_refresh, self._credentials)
        now = self._clock()
        self._token = self._credentials.token
        expiry = getattr(self._credentials, "expiry", None)
        if expiry is not None:
            # google-auth stores expiry as a naive UTC wall-clock datetime; only
            # the remaining lifetime is carried over to the session clock.
            if expiry.tzinfo is None:
                expiry = expiry.replace(tzinfo=timezone.utc)
            remaining = (expiry - _utcnow()).total_seconds()
            self._expires_at = now + remaining - _EXPIRY_SKEW_SECONDS
        else:
            self._expires_at = now + self._default_ttl
        logger.debug("Refreshed Firestore access token; expires at %s", self._expires_at)
