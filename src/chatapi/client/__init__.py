from .api import ApiClient, ApiError, ChatClient, SessionExpiredError, title_from_content
from .auth import AuthClient, AuthError
from .session import Session, SessionStore

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthClient",
    "AuthError",
    "ChatClient",
    "Session",
    "SessionExpiredError",
    "SessionStore",
    "title_from_content",
]
