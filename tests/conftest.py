"""Pytest configuration and fixtures for the editorial workflow engine.

DATABASE_URL defaults to an in-memory SQLite database so app.main imports
without a .env. Repository and API tests get their own file-backed SQLite
database per test (schema from Base.metadata, foreign keys on). Set
TEST_DATABASE_URL to run them against another database instead.
All imports use app.*.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.limiter import limiter
from app.infrastructure.persistence import models  # noqa: F401  (registers tables)
from app.infrastructure.persistence.database import (
    Base,
    build_session_factory,
    get_db,
    get_db_transactional,
)
from app.main import app



def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    """Session factory over a fresh database with the full schema.

    Sessions from this factory behave like the app's (no expire on commit,
    no autoflush). Tables are dropped after the test.
    """
    url = os.environ.get("TEST_DATABASE_URL") or (
        f"sqlite+aiosqlite:///{tmp_path / 'workflow.db'}"
    )
    engine = create_async_engine(url)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Use @pytest.mark.requires_db on tests that need it; run without a
    database via: pytest -m 'not requires_db'.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI). No database wired."""
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_client(session_factory) -> AsyncClient:
    """HTTP client whose get_db / get_db_transactional use the test database."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    limiter.reset()
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
