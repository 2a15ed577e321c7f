"""Unit tests for resolving sessions from request headers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from app.core.settings import Settings
from app.services.auth_service import AuthService


class FakeSessionStore:
    def __init__(self, sessions: dict[str, dict] | None = None) -> None:
        self.sessions = sessions or {}
        self.lookups: list[str] = []

    async def get_session(self, session_token: str) -> dict | None:
        self.lookups.append(session_token)
        return self.sessions.get(session_token)


def _token(settings: Settings, **overrides) -> str:
    payload = {
        "sub": "user-1",
        "email": "a@example.com",
        "name": "Alice",
        "exp": int((datetime.now(UTC) + timedelta(minutes=5)).timestamp()),
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)


@pytest.mark.asyncio
async def test_bearer_token_wins_over_session_cookie(test_settings) -> None:
    store = FakeSessionStore({"tok": {"user_id": "user-2", "email": "b@example.com", "name": "Bob"}})
    service = AuthService(settings=test_settings, session_store=store)

    principal = await service.session_from_headers(
        {
            "authorization": f"Bearer {_token(test_settings)}",
            "cookie": f"{test_settings.auth_cookie_name}=tok.signature",
        }
    )

    assert principal is not None
    assert principal.user_id == "user-1"
    assert store.lookups == []


@pytest.mark.asyncio
async def test_signed_session_cookie_resolves_through_store(test_settings) -> None:
    store = FakeSessionStore({"tok": {"user_id": "user-2", "email": "b@example.com", "name": "Bob"}})
    service = AuthService(settings=test_settings, session_store=store)

    principal = await service.session_from_headers(
        {"cookie": f"theme=dark; {test_settings.auth_cookie_name}=tok.c2lnbmF0dXJl%3D"}
    )

    assert principal is not None
    assert principal.display_name == "Bob"
    assert store.lookups == ["tok"]


@pytest.mark.asyncio
async def test_invalid_or_expired_bearer_falls_back_to_anonymous(test_settings) -> None:
    service = AuthService(settings=test_settings, session_store=FakeSessionStore())
    expired = _token(test_settings, exp=int((datetime.now(UTC) - timedelta(minutes=1)).timestamp()))

    assert await service.session_from_headers({"authorization": f"Bearer {expired}"}) is None
    assert await service.session_from_headers({"authorization": "Bearer not-a-jwt"}) is None
    assert await service.session_from_headers({}) is None


@pytest.mark.asyncio
async def test_session_without_identity_fields_is_rejected(test_settings) -> None:
    store = FakeSessionStore({"tok": {"user_id": "user-2"}})
    service = AuthService(settings=test_settings, session_store=store)

    assert await service.session_from_headers({"cookie": f"{test_settings.auth_cookie_name}=tok"}) is None


@pytest.mark.asyncio
async def test_session_cookie_after_unparseable_cookie_is_still_found(test_settings) -> None:
    store = FakeSessionStore({"tok": {"user_id": "user-2", "email": "b@example.com", "name": "Bob"}})
    service = AuthService(settings=test_settings, session_store=store)

    principal = await service.session_from_headers(
        {"cookie": f'prefs={{"theme": "dark"}}; {test_settings.auth_cookie_name}=tok.sig'}
    )

    assert principal is not None
    assert principal.user_id == "user-2"
    assert store.lookups == ["tok"]
