from __future__ import annotations

import os
import uuid

# Settings are read at import time; give the app a throwaway database before
# anything under runi is imported.
os.environ.setdefault("DATABASE_URL_ASYNC", "sqlite+aiosqlite://")
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite://")
os.environ.setdefault("SEED_PERMISSIONS_ON_STARTUP", "false")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from runi.crud.permission import seed_permissions
from runi.db.session import get_db

# Ensure Base + models are registered before create_all
from runi.db.base import Base  # noqa: F401
import runi.models  # noqa: F401
from runi.models.owner import Owner


# ---------------------------------------------------------
# Database config
# ---------------------------------------------------------
@pytest.fixture()
def database_url_async(tmp_path) -> str:
    """
    TEST_DATABASE_URL_ASYNC points the suite at a real server (e.g. Postgres);
    otherwise every test gets its own SQLite file.
    """
    url = os.getenv("TEST_DATABASE_URL_ASYNC")
    if url:
        return url
    return f"sqlite+aiosqlite:///{tmp_path / 'runi_test.db'}"


# ---------------------------------------------------------
# Engine + schema lifecycle
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(database_url_async: str):
    engine = create_async_engine(database_url_async, future=True, echo=False, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ---------------------------------------------------------
# DB session for setup / assertions
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture()
async def seeded(db) -> int:
    """Default permission catalog."""
    return await seed_permissions(db)


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker):
    from runi.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------
# HTTP client
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------
# Owners
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def owner(db) -> Owner:
    o = Owner(email=f"owner_{uuid.uuid4().hex[:8]}@example.com", full_name="Test Owner", is_active=True)
    db.add(o)
    await db.commit()
    return o


@pytest_asyncio.fixture()
async def other_owner(db) -> Owner:
    o = Owner(email=f"other_{uuid.uuid4().hex[:8]}@example.com", full_name="Other Owner", is_active=True)
    db.add(o)
    await db.commit()
    return o
