"""Identity Provider Auth — verifies bearer tokens against hosted Supabase Auth.

Invariants:
    - Every user-scoped route depends on get_current_user (no anonymous data access)
    - Tokens are verified remotely (GET {supabase_url}/auth/v1/user); never decoded locally
    - 401/403 from the provider -> AuthenticationError (401); provider down -> 503

Design Decisions:
    - httpx.AsyncClient per verification: no shared connection state to manage on shutdown
    - CurrentUser is a frozen dataclass: routes get id/email, never the raw provider payload
"""

import logging
from dataclasses import dataclass

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ruby_tutor.config import get_settings
from ruby_tutor.core.domain_types import UserId
from ruby_tutor.core.errors import (
    AuthenticationError, ErrorCategory, ErrorSeverity, RubyError,
)

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: UserId
    email: str | None = None


class IdentityProviderUnavailable(RubyError):
    """Identity provider could not be reached or answered with a server error."""
    def __init__(self, message: str):
        super().__init__(
            message, "IDENTITY_PROVIDER_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, http_status=503,
        )


async def verify_token(token: str) -> CurrentUser:
    """Ask the identity provider who owns `token`."""
    settings = get_settings()
    url = f"{settings.supabase_url.rstrip('/')}/auth/v1/user"
    headers = {
        "Authorization": f"Bearer {token}",
        "apikey": settings.supabase_anon_key,
    }
    try:
        async with httpx.AsyncClient(timeout=settings.auth_timeout_seconds) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Identity provider unreachable: {e}")
        raise IdentityProviderUnavailable("Identity provider unreachable")

    if response.status_code in (401, 403):
        raise AuthenticationError("Invalid or expired token")
    if response.status_code >= 500:
        logger.error(
            f"Identity provider error: HTTP {response.status_code}",
            extra={"error_code": "IDENTITY_PROVIDER_UNAVAILABLE"},
        )
        raise IdentityProviderUnavailable("Identity provider error")
    if response.status_code != 200:
        raise AuthenticationError(f"Token rejected (HTTP {response.status_code})")

    payload = response.json()
    if not payload.get("id"):
        raise AuthenticationError("Token has no subject")
    return CurrentUser(id=UserId(str(payload["id"])), email=payload.get("email"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> CurrentUser:
    """FastAPI dependency: the authenticated user or 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError()
    if not credentials.credentials:
        raise AuthenticationError()
    return await verify_token(credentials.credentials)
