"""Shared fixtures: in-memory database, vault, and an HTTP client on the app."""
import os

# Set before any app import so module-level settings pick them up
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app import models  # noqa: F401
from backend.app.core.config import VaultConfig
from backend.app.db.base import Base, get_db
from backend.app.db.session import enable_sqlite_foreign_keys
from backend.app.main import create_app
from backend.app.models.platform import Platform
from backend.app.models.user import User
from backend.app.repositories.bindings import SqlAlchemyBindingStore
from backend.app.services.vault import BindingVault

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
MASTER_KEY = b"0123456789abcdef0123456789abcdef"

# RFC 6238 appendix B seed ("12345678901234567890") in base32
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
DEMO_SECRET = "JBSWY3DPEHPK3PXP"


class FakeClock:
    """Settable replacement for time.time."""

    def __init__(self, now: float = 59):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def master_key() -> bytes:
    return MASTER_KEY


@pytest.fixture
def vault_config(master_key) -> VaultConfig:
    return VaultConfig(master_key=master_key, verify_window=1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def db_engine():
    engine = enable_sqlite_foreign_keys(create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def vault(db_session, vault_config, clock) -> BindingVault:
    return BindingVault(SqlAlchemyBindingStore(db_session), vault_config, clock=clock)


@pytest_asyncio.fixture
async def alice(db_session) -> User:
    user = User(username="alice", hashed_password="x")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def bob(db_session) -> User:
    user = User(username="bob", hashed_password="x")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def github(db_session) -> Platform:
    platform = Platform(name="GitHub")
    db_session.add(platform)
    await db_session.commit()
    return platform


# ─────────────────────────────────────────────────────────────
# HTTP
# ─────────────────────────────────────────────────────────────
@pytest_asyncio.fixture
async def app(db_session, vault_config):
    application = create_app(create_tables=False)

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    # The lifespan does not run under ASGITransport
    application.state.vault_config = vault_config
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


async def register_and_login(http: httpx.AsyncClient, username: str, password: str = "password123") -> dict:
    """Register a user and return login tokens plus an Authorization header."""
    response = await http.post("/api/v1/auth/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    response = await http.post("/api/v1/auth/login", data={"username": username, "password": password})
    assert response.status_code == 200, response.text
    tokens = response.json()
    tokens["headers"] = {"Authorization": f"Bearer {tokens['access_token']}"}
    return tokens
