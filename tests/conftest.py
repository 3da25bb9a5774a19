from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from clubsite_backend.core.database import init_db
from clubsite_backend.services.match_store import MatchStore


@pytest.fixture
def engine(tmp_path):
    # NullPool: every session gets a fresh connection, so the engine can be
    # used from several event loops (asyncio.run per test step, TestClient).
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clubsite_test.db'}", poolclass=NullPool)
    asyncio.run(init_db(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_maker):
    return MatchStore(session_maker)
