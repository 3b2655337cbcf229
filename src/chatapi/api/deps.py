"""Centralized FastAPI dependency definitions for the API layer.

Routers should import dependencies from here instead of directly from
their underlying implementation modules. This provides:

* A stable import surface (refactors in lower layers don't ripple up)
* Easier test overrides via ``app.dependency_overrides[deps.require_auth]``
"""

from chatapi.db.session import get_db
from chatapi.core.auth import AuthContext, get_credential_store, require_auth

__all__ = ["AuthContext", "get_db", "get_credential_store", "require_auth"]
