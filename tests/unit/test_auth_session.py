"""Tests for AccessTokenSession (token caching and expiry-based refresh)."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from firestore_admin.infrastructure.firestore._auth import AccessTokenSession
from tests.conftest import FakeCredentials, service_account_info


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


async def test_first_call_refreshes() -> None:
    """A new session has no token, so the first get_token refreshes."""
    creds = FakeCredentials()
    session = AccessTokenSession(creds, clock=FakeClock())
    assert session.is_expired()
    assert await session.get_token() == "token-1"
    assert creds.refresh_count == 1


async def test_token_reused_until_default_ttl_expires() -> None:
    """Without credentials.expiry the token lives default_ttl seconds on the session clock."""
    creds = FakeCredentials()
    clock = FakeClock(1_000.0)
    session = AccessTokenSession(creds, clock=clock, default_ttl=100)

    assert await session.get_token() == "token-1"
    assert session.expires_at == 1_100.0
    clock.now = 1_099.0
    assert await session.get_token() == "token-1"
    clock.now = 1_100.0
    assert await session.get_token() == "token-2"
    assert creds.refresh_count == 2


async def test_credentials_expiry_mapped_onto_session_clock() -> None:
    """Remaining lifetime from credentials.expiry (minus 60s skew) is measured on the fake clock."""
    wall_now = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    # naive UTC, as google-auth stores it
    creds = FakeCredentials(expiry=(wall_now + timedelta(hours=1)).replace(tzinfo=None))
    clock = FakeClock(1_000.0)
    session = AccessTokenSession(creds, clock=clock)

    with patch(
        "firestore_admin.infrastructure.firestore._auth._utcnow", return_value=wall_now
    ):
        await session.get_token()
        assert session.expires_at == 1_000.0 + 3600 - 60
        clock.now = 1_000.0 + 3600 - 61
        await session.get_token()
        assert creds.refresh_count == 1
        clock.now = 1_000.0 + 3600 - 60
        await session.get_token()
    assert creds.refresh_count == 2


async def test_aware_credentials_expiry_accepted() -> None:
    """A timezone-aware expiry gives the same remaining lifetime as a naive UTC one."""
    wall_now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    creds = FakeCredentials(expiry=wall_now + timedelta(seconds=600))
    session = AccessTokenSession(creds, clock=FakeClock(0.0))
    with patch(
        "firestore_admin.infrastructure.firestore._auth._utcnow", return_value=wall_now
    ):
        await session.get_token()
    assert session.expires_at == 540.0


async def test_concurrent_callers_share_one_refresh() -> None:
    """Concurrent get_token calls on an empty session trigger a single refresh."""
    creds = FakeCredentials()
    session = AccessTokenSession(creds, clock=FakeClock())
    tokens = await asyncio.gather(*(session.get_token() for _ in range(5)))
    assert tokens == ["token-1"] * 5
    assert creds.refresh_count == 1


async def test_independent_sessions_do_not_share_tokens() -> None:
    """Each session owns its own token state."""
    a = AccessTokenSession(FakeCredentials(), clock=FakeClock())
    b = AccessTokenSession(FakeCredentials(), clock=FakeClock())
    await a.get_token()
    assert a.token == "token-1"
    assert b.token is None


def test_from_service_account_info_passes_scopes() -> None:
    """from_service_account_info builds google-auth credentials with the given scopes."""
    info = service_account_info()
    with patch(
        "google.oauth2.service_account.Credentials.from_service_account_info"
    ) as from_info:
        from_info.return_value = FakeCredentials()
        session = AccessTokenSession.from_service_account_info(info, scopes=["scope-a"])
    from_info.assert_called_once_with(info, scopes=["scope-a"])
    assert session.token is None
