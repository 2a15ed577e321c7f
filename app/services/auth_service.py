from collections.abc import Mapping
import logging
from urllib.parse import unquote

import jwt
from starlette.requests import cookie_parser

from app.api.schemas.auth import SessionPrincipal
from app.core.settings import Settings
from app.services.contracts import SessionStoreProtocol

logger = logging.getLogger(__name__)


class JwtTokenValidator:
    """Decodes bearer access tokens signed with the shared auth secret."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def decode(self, token: str) -> SessionPrincipal:
        payload = jwt.decode(
            token,
            self._settings.auth_jwt_secret,
            algorithms=[self._settings.auth_jwt_algorithm],
        )
        return SessionPrincipal(
            user_id=payload["sub"],
            email=payload["email"],
            display_name=payload["name"],
        )


def _bearer_token(headers: Mapping[str, str]) -> str | None:
    auth_header = headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def _cookie_value(headers: Mapping[str, str], cookie_name: str) -> str | None:
    raw_cookie = headers.get("cookie")
    if not raw_cookie:
        return None
    return cookie_parser(raw_cookie).get(cookie_name) or None


class AuthService:
    """Resolves request sessions: bearer JWT first, then the auth provider's session cookie."""

    def __init__(self, settings: Settings, session_store: SessionStoreProtocol) -> None:
        self._settings = settings
        self._session_store = session_store
        self._token_validator = JwtTokenValidator(settings)

    def principal_from_bearer(self, bearer_token: str | None) -> SessionPrincipal | None:
        if not bearer_token:
            return None
        try:
            return self._token_validator.decode(bearer_token)
        except (jwt.PyJWTError, KeyError):
            logger.info("bearer token validation failed")
            return None

    async def principal_from_session(self, session_cookie: str | None) -> SessionPrincipal | None:
        if not session_cookie:
            return None
        # Signed cookies arrive as "<token>.<signature>"; sessions are keyed by the token.
        session_token = unquote(session_cookie).split(".", 1)[0]
        payload = await self._session_store.get_session(session_token)
        if payload is None:
            logger.debug("session missing or expired")
            return None
        try:
            return SessionPrincipal(
                user_id=str(payload["user_id"]),
                email=str(payload["email"]),
                display_name=str(payload.get("name") or payload["email"]),
            )
        except KeyError:
            logger.warning("stored session payload is missing identity fields")
            return None

    async def session_from_headers(self, headers: Mapping[str, str]) -> SessionPrincipal | None:
        principal = self.principal_from_bearer(_bearer_token(headers))
        if principal is not None:
            logger.debug("authenticated via bearer token", extra={"user_id": principal.user_id})
            return principal

        principal = await self.principal_from_session(_cookie_value(headers, self._settings.auth_cookie_name))
        if principal is not None:
            logger.debug("authenticated via session", extra={"user_id": principal.user_id})
        return principal
