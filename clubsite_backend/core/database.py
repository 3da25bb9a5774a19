from sqlmodel import SQLModel, Session
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy import create_engine as create_sync_engine

from clubsite_backend.core.config import DATABASE_URL, SQL_ECHO

# --- Database URLs ---
# Async engine (routes), sync engine (seeding/scripts)
SYNC_DATABASE_URL = DATABASE_URL.replace("+aiosqlite", "").replace("+asyncpg", "+psycopg2")

# --- Engines ---
engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO, future=True)          # Async
sync_engine = create_sync_engine(SYNC_DATABASE_URL, echo=SQL_ECHO, future=True)  # Sync

# --- Async session maker ---
async_session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# --- Initialize DB tables ---
async def init_db(bind=None):
    """Create tables asynchronously if they don't exist."""
    # Register every table on the metadata before create_all
    from clubsite_backend import models  # noqa: F401

    async with (bind if bind is not None else engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# --- Sync session for seeding/scripts ---
def get_sync_session(bind=None):
    return Session(bind if bind is not None else sync_engine)


# --- Match store (used in routes) ---
def get_store():
    from clubsite_backend.services.match_store import MatchStore

    return MatchStore(async_session_maker)
