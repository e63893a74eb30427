"""Test configuration"""
from typing import AsyncGenerator
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pocket_trader.api.dependencies import get_current_user
from pocket_trader.config import settings
from pocket_trader.db import get_db
from pocket_trader.main import app
from pocket_trader.models.database import Base, User
from pocket_trader.services.realtime import ChangeFeed


# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """In-memory database shared by every session of one test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
async def user(db_session) -> User:
    user = User(email="trader@example.com", hashed_password="not-a-real-hash")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def other_user(db_session) -> User:
    user = User(email="other@example.com", hashed_password="not-a-real-hash")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def client(session_factory, user) -> AsyncGenerator[AsyncClient, None]:
    """API client authenticated as ``user``"""
    async def override_get_db():
        async with session_factory() as session:
            yield session
    
    async def override_get_current_user():
        return user
    
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def anonymous_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """API client without auth overrides"""
    async def override_get_db():
        async with session_factory() as session:
            yield session
    
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings with test secrets"""
    monkeypatch.setattr(settings, "jwt_secret_key", "test-jwt-secret")
    monkeypatch.setattr(settings, "telegram_webhook_secret", "")
    monkeypatch.setattr(settings, "extension_api_key", "")
    return settings
