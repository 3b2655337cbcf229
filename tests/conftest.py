import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator

from chatapi.api.main import create_app
from chatapi.core.auth import InvalidTokenError
from chatapi.core.config import Settings
from chatapi.db.session import Base
import chatapi.models  # noqa: F401 ensure model metadata is loaded

ALICE = "alice-subject"
BOB = "bob-subject"
ALICE_TOKEN = "alice-token"
BOB_TOKEN = "bob-token"
EXPIRED_TOKEN = "expired-token"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class FakeCredentialStore:
    """In-memory stand-in for the credential store: token -> subject."""

    def __init__(self, tokens: dict[str, str]):
        self.tokens = dict(tokens)
        self.calls: list[str] = []
        self.closed = False

    async def verify(self, token: str) -> str:
        self.calls.append(token)
        try:
            return self.tokens[token]
        except KeyError:
            raise InvalidTokenError("unknown or expired token")

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings for a throwaway SQLite database; ignores any local .env file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("SUPABASE_URL", "https://auth.test")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return Settings(_env_file=None)


@pytest.fixture()
def credential_store() -> FakeCredentialStore:
    return FakeCredentialStore({ALICE_TOKEN: ALICE, BOB_TOKEN: BOB})


@pytest_asyncio.fixture()
async def app(settings, credential_store):
    app = create_app(settings, credential_store=credential_store)
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def db_session(app) -> AsyncGenerator[AsyncSession, None]:
    async with app.state.sessionmaker() as session:
        yield session


@pytest_asyncio.fixture()
async def client(app):
    # httpx >=0.28 removed the 'app=' shortcut; use ASGITransport explicitly
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
