"""Sign-up / sign-in against the credential store.

The store owns password hashing and token issuance; this module only forwards
credentials and turns its answers into a cached ``Session`` or a displayable
error message.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from chatapi.client.session import Session

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthError(Exception):
    """Sign-in / sign-up failure with a message fit for the user."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthClient:
    def __init__(
        self,
        base_url: str,
        public_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"apikey": public_key},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "AuthClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def sign_in(self, email: str | None, password: str | None) -> Session:
        if not email or not password:
            raise AuthError("Email and password are required")
        resp = await self._client.post(
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code != 200:
            logger.info("sign-in rejected", extra={"status": resp.status_code})
            raise AuthError("Invalid email or password")
        return Session.from_auth_response(resp.json())

    async def sign_up(
        self, email: str | None, password: str | None, confirm_password: str | None
    ) -> None:
        if not email or not password or not confirm_password:
            raise AuthError("All fields are required")
        if password != confirm_password:
            raise AuthError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        resp = await self._client.post("/auth/v1/signup", json={"email": email, "password": password})
        if resp.status_code >= 400:
            raise AuthError(_error_message(resp, "Registration failed"))

    async def sign_out(self, session: Session) -> None:
        """Revoke the session server side; an already invalid token is not an error."""
        resp = await self._client.post(
            "/auth/v1/logout",
            headers={"Authorization": f"Bearer {session.access_token}"},
        )
        if resp.status_code >= 400 and resp.status_code != 401:
            raise AuthError(_error_message(resp, "Sign out failed"))


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return fallback
