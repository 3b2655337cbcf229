import time

import httpx
import pytest
from jose import jwt

from chatapi.core.auth import (
    CredentialStore,
    CredentialStoreError,
    InvalidTokenError,
    parse_bearer,
)
from chatapi.core.errors import Unauthenticated


def _token(exp_offset: int = 3600, sub: str = "user-1") -> str:
    return jwt.encode({"sub": sub, "exp": int(time.time()) + exp_offset}, "test-secret", algorithm="HS256")


def _store(handler) -> CredentialStore:
    return CredentialStore("https://auth.test/", "anon-key", transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_parse_bearer():
    assert parse_bearer("Bearer abc.def.ghi") == "abc.def.ghi"
    assert parse_bearer("  bearer tok  ") == "tok"
    with pytest.raises(Unauthenticated) as missing:
        parse_bearer(None)
    assert missing.value.message.startswith("Authentication required")
    for bad in ("", "Token abc", "Bearer", "Bearer a b"):
        with pytest.raises(Unauthenticated):
            parse_bearer(bad)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_verify_returns_subject_and_sends_keys():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "user-1", "email": "a@example.com"})

    store = _store(handler)
    token = _token()
    assert await store.verify(token) == "user-1"
    await store.aclose()

    (request,) = seen
    assert request.url == "https://auth.test/auth/v1/user"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == f"Bearer {token}"


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("status_code", [401, 403])
async def test_verify_rejected_by_store(status_code):
    store = _store(lambda request: httpx.Response(status_code, json={"msg": "invalid JWT"}))
    with pytest.raises(InvalidTokenError):
        await store.verify(_token())
    await store.aclose()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_expired_or_malformed_token_never_reaches_store():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"id": "user-1"})

    store = _store(handler)
    with pytest.raises(InvalidTokenError):
        await store.verify(_token(exp_offset=-60))
    with pytest.raises(InvalidTokenError):
        await store.verify("not-a-jwt")
    await store.aclose()
    assert calls == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_store_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)
    with pytest.raises(CredentialStoreError):
        await store.verify(_token())
    await store.aclose()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_store_server_error():
    store = _store(lambda request: httpx.Response(502, text="bad gateway"))
    with pytest.raises(CredentialStoreError):
        await store.verify(_token())
    await store.aclose()
