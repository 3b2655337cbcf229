import pytest
from sqlalchemy import func, select

from chatapi.core.auth import CredentialStoreError
from chatapi.models.thread import Thread
from conftest import ALICE_TOKEN, EXPIRED_TOKEN, bearer

PROTECTED = [
    ("GET", "/api/threads", None),
    ("GET", "/api/threads/1", None),
    ("GET", "/api/threads/1/messages", None),
    ("POST", "/api/threads/1/messages", {"type": "user", "content": "hi"}),
    ("POST", "/api/threads", {"title": "t", "content": "hi"}),
    ("PATCH", "/api/threads/1", {"title": "t"}),
    ("DELETE", "/api/threads/1", None),
]


async def _thread_count(app) -> int:
    async with app.state.sessionmaker() as session:
        return (await session.execute(select(func.count()).select_from(Thread))).scalar_one()


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("method, path, body", PROTECTED)
async def test_missing_header_is_401(client, app, credential_store, method, path, body):
    resp = await client.request(method, path, json=body)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication required. Please provide a valid token."}
    assert credential_store.calls == []
    assert await _thread_count(app) == 0


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("header", ["Basic abc", "Bearer", "Bearer ", ALICE_TOKEN, "Bearer a b"])
async def test_malformed_header_is_401(client, credential_store, header):
    resp = await client.get("/api/threads", headers={"Authorization": header})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid authorization header format. Expected: Bearer <token>"}
    assert credential_store.calls == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_rejected_token_is_401_without_side_effect(client, app, credential_store):
    resp = await client.post(
        "/api/threads", json={"title": "t", "content": "hi"}, headers=bearer(EXPIRED_TOKEN)
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token. Please log in again."}
    assert credential_store.calls == [EXPIRED_TOKEN]
    assert await _thread_count(app) == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unreachable_store_is_401(client, credential_store, monkeypatch):
    async def unreachable(token):
        raise CredentialStoreError("connect timeout")

    monkeypatch.setattr(credential_store, "verify", unreachable)
    resp = await client.get("/api/threads", headers=bearer(ALICE_TOKEN))
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication failed. Please try again."}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_lowercase_scheme_accepted(client):
    resp = await client.get("/api/threads", headers={"Authorization": f"bearer {ALICE_TOKEN}"})
    assert resp.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_public_endpoints_need_no_token(client):
    root = await client.get("/")
    assert root.status_code == 200
    assert root.json()["status"] == "ok"
    assert (await client.get("/api/health/liveness")).json() == {"status": "ok"}
    assert (await client.get("/api/health/readiness")).json() == {"status": "ready"}
