import json
import os

import httpx
import pytest

from chatapi.client import AuthClient, AuthError, Session, SessionStore


@pytest.mark.unit
def test_session_store_roundtrip(tmp_path):
    store = SessionStore(tmp_path / "nested" / "session.json")
    assert store.load() is None
    assert store.access_token() is None

    store.save(Session(access_token="tok", email="a@example.com"))
    assert store.access_token() == "tok"
    assert store.load().email == "a@example.com"
    assert oct(os.stat(store.path).st_mode & 0o777) == oct(0o600)

    store.clear()
    assert store.load() is None
    store.clear()


@pytest.mark.unit
def test_unreadable_session_file_is_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert SessionStore(path).load() is None
    path.write_text(json.dumps({"email": "no token"}), encoding="utf-8")
    assert SessionStore(path).load() is None


@pytest.mark.unit
def test_session_from_auth_response():
    s = Session.from_auth_response({
        "access_token": "a",
        "refresh_token": "r",
        "expires_in": 3600,
        "user": {"id": "u1", "email": "a@example.com"},
    })
    assert (s.access_token, s.refresh_token, s.user_id, s.email) == ("a", "r", "u1", "a@example.com")
    assert s.expires_at is not None


def _auth(handler) -> AuthClient:
    return AuthClient("https://auth.test", "anon", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sign_in_success():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={
            "access_token": "jwt", "expires_in": 3600, "user": {"id": "u1", "email": "a@example.com"},
        })

    async with _auth(handler) as auth:
        session = await auth.sign_in("a@example.com", "secret1")
    assert session.access_token == "jwt"
    request = seen[0]
    assert request.url.path == "/auth/v1/token"
    assert request.url.params["grant_type"] == "password"
    assert request.headers["apikey"] == "anon"
    assert json.loads(request.content) == {"email": "a@example.com", "password": "secret1"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sign_in_failures():
    async with _auth(lambda r: httpx.Response(400, json={"error": "invalid_grant"})) as auth:
        with pytest.raises(AuthError) as exc:
            await auth.sign_in("a@example.com", "wrong")
        assert exc.value.message == "Invalid email or password"
        with pytest.raises(AuthError) as exc:
            await auth.sign_in("", "pw")
        assert exc.value.message == "Email and password are required"


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "email, password, confirm, message",
    [
        ("a@example.com", "", "", "All fields are required"),
        ("a@example.com", "secret1", "secret2", "Passwords do not match"),
        ("a@example.com", "abc", "abc", "Password must be at least 6 characters"),
    ],
)
async def test_sign_up_local_checks(email, password, confirm, message):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    async with _auth(handler) as auth:
        with pytest.raises(AuthError) as exc:
            await auth.sign_up(email, password, confirm)
    assert exc.value.message == message
    assert calls == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sign_up_reports_store_message():
    async with _auth(lambda r: httpx.Response(422, json={"msg": "User already registered"})) as auth:
        with pytest.raises(AuthError) as exc:
            await auth.sign_up("a@example.com", "secret1", "secret1")
    assert exc.value.message == "User already registered"
