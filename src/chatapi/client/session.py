"""Local cache of the signed-in session.

Plays the role a browser's storage plays for a web client: the access token
obtained at sign-in is written to a small JSON file and read back before every
API call.
"""
from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class Session(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user_id: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_auth_response(cls, data: dict) -> "Session":
        """Build a session from a credential store token response."""
        user = data.get("user") or {}
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = int(time.time()) + int(data["expires_in"])
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            user_id=user.get("id"),
            email=user.get("email"),
        )


class SessionStore:
    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> Optional[Session]:
        """Return the cached session, or None when there is none (or it is unreadable)."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            return Session.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            logger.warning("ignoring unreadable session file", extra={"path": str(self.path)})
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(session.model_dump_json(), encoding="utf-8")
        # the file holds a bearer credential
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

    def access_token(self) -> Optional[str]:
        session = self.load()
        return session.access_token if session else None
