"""Bearer token verification against the managed credential store.

Provides a FastAPI dependency ``require_auth`` that reads the
``Authorization: Bearer <token>`` header, asks the credential store whether
the token is valid and returns an ``AuthContext`` carrying the verified
subject identifier. Handlers receive that value as an explicit parameter.

Implementation notes:
* The store is a Supabase-compatible auth server. ``GET /auth/v1/user`` with
  the token as bearer and the project's public key as ``apikey`` returns the
  user record when the token is valid.
* Before the network call the token is decoded *without* signature checks
  (python-jose) so that obviously malformed or already-expired tokens are
  rejected locally. Signatures are never checked locally.
* No retries: a verification failure is terminal for the request.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from fastapi import Depends, Header, Request
from jose import jwt
from jose.exceptions import JWTError

from chatapi.core.errors import Unauthenticated

logger = logging.getLogger(__name__)

MISSING_TOKEN = "Authentication required. Please provide a valid token."
BAD_HEADER = "Invalid authorization header format. Expected: Bearer <token>"
INVALID_TOKEN = "Invalid or expired token. Please log in again."
AUTH_FAILED = "Authentication failed. Please try again."


class InvalidTokenError(Exception):
    """The credential store (or the local pre-check) rejected the token."""


class CredentialStoreError(Exception):
    """The credential store could not be reached or answered unexpectedly."""


@dataclass(frozen=True)
class AuthContext:
    """Verified identity of the caller for the duration of one request."""
    subject: str
    token: str


def _precheck(token: str) -> dict[str, Any]:
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise InvalidTokenError("Malformed bearer token") from exc
    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and exp <= time.time():
        raise InvalidTokenError("Token expired")
    return claims


class CredentialStore:
    """Client for the credential store's token verification endpoint.

    One instance per process; it owns a pooled ``httpx.AsyncClient`` that is
    closed by the app lifespan.
    """

    def __init__(
        self,
        base_url: str,
        public_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"apikey": public_key},
            timeout=timeout,
            transport=transport,
        )

    async def verify(self, token: str) -> str:
        """Return the subject identifier for ``token``.

        Raises ``InvalidTokenError`` when the token is rejected and
        ``CredentialStoreError`` when the store cannot give an answer.
        """
        _precheck(token)
        try:
            resp = await self._client.get(
                "/auth/v1/user", headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as exc:
            raise CredentialStoreError(f"Credential store unreachable: {exc!r}") from exc
        if resp.status_code in (401, 403):
            raise InvalidTokenError(f"Credential store rejected token: {resp.status_code}")
        if resp.status_code != 200:
            raise CredentialStoreError(f"Unexpected credential store status: {resp.status_code}")
        try:
            subject = resp.json().get("id")
        except ValueError as exc:
            raise CredentialStoreError("Credential store returned invalid JSON") from exc
        if not subject:
            raise InvalidTokenError("Credential store returned no user")
        return str(subject)

    async def aclose(self) -> None:
        await self._client.aclose()


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization`` header value."""
    if not authorization:
        raise Unauthenticated(MISSING_TOKEN)
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise Unauthenticated(BAD_HEADER)
    return token


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


async def require_auth(
    authorization: Optional[str] = Header(None),
    store: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    """Reject the request with 401 unless it carries a token the store accepts."""
    token = parse_bearer(authorization)
    try:
        subject = await store.verify(token)
    except InvalidTokenError as exc:
        logger.info("bearer token rejected", extra={"reason": str(exc)})
        raise Unauthenticated(INVALID_TOKEN) from exc
    except Exception as exc:
        logger.error("token verification failed", exc_info=exc)
        raise Unauthenticated(AUTH_FAILED) from exc
    return AuthContext(subject=subject, token=token)


__all__ = [
    "AuthContext",
    "CredentialStore",
    "CredentialStoreError",
    "InvalidTokenError",
    "get_credential_store",
    "parse_bearer",
    "require_auth",
]
