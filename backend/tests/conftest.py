"""Pytest configuration and fixtures for Attendly tests."""

import os

# Must be set before attendly modules build the global engine
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["APP_ENV"] = "testing"

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from attendly.core.database import build_engine, build_session_maker, get_db
from attendly.main import app
from attendly.models import Base, Organization, User
from attendly.services.attendance import AttendanceRepository
from attendly.services.organizations import OrganizationDirectory
from attendly.services.statistics import StatisticsService


# ============================================================================
# Database Engine and Session Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables, one per test."""
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return build_session_maker(test_engine)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    async with session_maker() as session:
        yield session


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def directory(db_session) -> OrganizationDirectory:
    return OrganizationDirectory(db_session)


@pytest_asyncio.fixture
async def repository(db_session) -> AttendanceRepository:
    return AttendanceRepository(db_session)


@pytest_asyncio.fixture
async def statistics(repository) -> StatisticsService:
    return StatisticsService(repository)


# ============================================================================
# Test Data Fixtures - Users
# ============================================================================

@pytest_asyncio.fixture
async def test_user_1(directory) -> User:
    """Owner of the first organization."""
    return await directory.create_user("pastor@grace-fellowship.org", "Pastor James Mwangi")


@pytest_asyncio.fixture
async def test_user_2(directory) -> User:
    """Owner of the second organization."""
    return await directory.create_user("admin@hope-chapel.org", "Sarah Collins")


# ============================================================================
# Test Data Fixtures - Organizations
# ============================================================================

@pytest_asyncio.fixture
async def test_org_1(directory, test_user_1) -> Organization:
    """Kenyan church (KES, Africa/Nairobi)."""
    return await directory.create_organization(
        owner_id=test_user_1.id,
        name="Grace Fellowship Nairobi",
        type="Church",
        country="Kenya",
        phone="+254700000001",
    )


@pytest_asyncio.fixture
async def test_org_2(directory, test_user_2) -> Organization:
    """US church (USD, America/New_York)."""
    return await directory.create_organization(
        owner_id=test_user_2.id,
        name="Hope Chapel",
        type="Church",
        country="United States",
        phone="+12125550100",
    )



# ============================================================================
# API Client Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, with get_db bound to the test engine."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {user.id}"}


@pytest_asyncio.fixture
async def auth_user_1(test_user_1) -> dict[str, str]:
    return auth_headers(test_user_1)


@pytest_asyncio.fixture
async def auth_user_2(test_user_2) -> dict[str, str]:
    return auth_headers(test_user_2)
