"""Database connection and session management with tenant isolation."""

from typing import Any, AsyncGenerator
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from attendly.core.config import settings


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool sizing only applies to server databases. SQLite (used by the test
    suite and local experiments) gets a single shared connection so that an
    in-memory database survives across sessions.
    """
    if url.startswith("sqlite"):
        options: dict[str, Any] = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    else:
        options = {
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_pre_ping": True,  # Verify connections before using them
        }
    options["echo"] = settings.DB_ECHO
    # Keep bound values (visitor names and contacts) out of error messages
    options["hide_parameters"] = True
    options.update(overrides)
    return create_async_engine(url, **options)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by the app and by tests with their own engine."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.DATABASE_URL)
async_session_maker = build_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session (FastAPI dependency).

    Tenant isolation is applied by the repositories, which filter every
    query on an explicit organization_id.

    Usage:
        @router.get("/organizations")
        async def list_orgs(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        yield session


async def set_tenant_context(session: AsyncSession, organization_id: UUID) -> None:
    """
    Set tenant context for an existing session.

    On PostgreSQL ``app.organization_id`` is applied with
    ``set_config(..., true)`` (transaction-scoped, same as SET LOCAL) so the
    row-level-security policies created by the migrations act as a second
    line of defense behind the explicit organization_id filters. It resets
    when the transaction commits. No-op on SQLite.

    Raises:
        ValueError: If organization_id is invalid
    """
    if not isinstance(organization_id, UUID):
        raise ValueError(f"Invalid organization_id type: {type(organization_id)}")

    if session.get_bind().dialect.name != "postgresql":
        return

    await session.execute(
        text("SELECT set_config('app.organization_id', :organization_id, true)"),
        {"organization_id": str(organization_id)},
    )
