"""Authenticated access to the chat API.

``ApiClient.fetch`` is the single entry point for every call: it attaches the
cached access token and converts a 401 into ``SessionExpiredError`` so callers
can send the user back through sign-in. ``ChatClient`` layers typed helpers on
top and turns other failures into ``ApiError`` with a displayable message.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from chatapi.client.session import SessionStore

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 50


class SessionExpiredError(Exception):
    """The API answered 401; ``redirect_to`` is the login target with the return path."""

    def __init__(self, redirect_to: str):
        self.redirect_to = redirect_to
        super().__init__(f"Session expired, sign in again: {redirect_to}")


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class ApiClient:
    def __init__(
        self,
        base_url: str,
        sessions: SessionStore,
        *,
        login_path: str = "/login",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.sessions = sessions
        self.login_path = login_path
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def login_redirect(self, current_path: str) -> str:
        return f"{self.login_path}?redirect={quote(current_path, safe='')}"

    async def fetch(
        self,
        path: str,
        method: str = "GET",
        *,
        headers: Optional[Mapping[str, str]] = None,
        current_path: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue a request with the cached bearer token merged into ``headers``.

        Without a cached session the request goes out without an
        ``Authorization`` header. A 401 raises ``SessionExpiredError`` pointing
        at the login path, preserving ``current_path`` (default: ``path``) as the
        return target; every other response is returned as is.
        """
        merged = dict(headers or {})
        token = self.sessions.access_token()
        if token:
            merged["Authorization"] = f"Bearer {token}"
        resp = await self._client.request(method, path, headers=merged, **kwargs)
        if resp.status_code == 401:
            logger.info("session expired", extra={"path": path})
            raise SessionExpiredError(self.login_redirect(current_path or path))
        return resp


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def title_from_content(content: str) -> str:
    """Derive a thread title from its first message."""
    trimmed = content.strip()
    if len(trimmed) > TITLE_MAX_LENGTH:
        return trimmed[:TITLE_MAX_LENGTH] + "..."
    return trimmed


class ChatClient:
    """Typed helpers over ``ApiClient`` for the thread endpoints."""

    def __init__(self, api: ApiClient, prefix: str = "/api") -> None:
        self.api = api
        self.prefix = prefix.rstrip("/")

    async def _json(self, resp: httpx.Response, expected: int, fallback: str) -> Any:
        if resp.status_code != expected:
            raise ApiError(resp.status_code, _error_message(resp, f"{fallback}: {resp.status_code}"))
        return resp.json()

    async def list_threads(self) -> list[dict]:
        resp = await self.api.fetch(f"{self.prefix}/threads")
        return await self._json(resp, 200, "Failed to fetch threads")

    async def get_thread(self, thread_id: int) -> dict:
        resp = await self.api.fetch(f"{self.prefix}/threads/{thread_id}")
        return await self._json(resp, 200, "Failed to fetch thread")

    async def list_messages(self, thread_id: int) -> list[dict]:
        resp = await self.api.fetch(f"{self.prefix}/threads/{thread_id}/messages")
        return await self._json(resp, 200, "Failed to fetch messages")

    async def send_message(self, thread_id: int, content: str | None, type: str = "user") -> dict:
        if not content or not content.strip():
            raise ApiError(400, "Message cannot be empty")
        resp = await self.api.fetch(
            f"{self.prefix}/threads/{thread_id}/messages",
            "POST",
            json={"type": type, "content": content.strip()},
        )
        return await self._json(resp, 201, "Failed to create message")

    async def start_thread(self, content: str | None, title: str | None = None) -> dict:
        """Create a thread from its first message; the title defaults to the message."""
        if not content or not content.strip():
            raise ApiError(400, "Message cannot be empty")
        resp = await self.api.fetch(
            f"{self.prefix}/threads",
            "POST",
            json={"title": title or title_from_content(content), "content": content.strip()},
        )
        return await self._json(resp, 201, "Failed to create thread")

    async def rename_thread(self, thread_id: int, title: str) -> dict:
        resp = await self.api.fetch(
            f"{self.prefix}/threads/{thread_id}", "PATCH", json={"title": title}
        )
        return await self._json(resp, 200, "Failed to update thread")

    async def delete_thread(self, thread_id: int) -> dict:
        resp = await self.api.fetch(f"{self.prefix}/threads/{thread_id}", "DELETE")
        return await self._json(resp, 200, "Failed to delete thread")
