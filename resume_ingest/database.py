"""
Async engine and session factory for the resume record store.
SQLite (aiosqlite) for local runs and tests, PostgreSQL (asyncpg) in production.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from .config import get_settings

IN_MEMORY_URLS = ("sqlite+aiosqlite://", "sqlite+aiosqlite:///:memory:")


def engine_options(database_url: str) -> dict:
    """Driver-specific keyword arguments for create_async_engine()."""
    if "postgresql" in database_url:
        return {
            # Supabase/PgBouncer in transaction mode can't reuse prepared statements
            "connect_args": {
                "statement_cache_size": 0,
                "prepared_statement_cache_size": 0,
            },
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
            "pool_recycle": 300,  # seconds
        }
    if database_url in IN_MEMORY_URLS:
        # One shared connection, otherwise every session sees an empty database
        return {"poolclass": StaticPool}
    return {"pool_pre_ping": True}


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo, **engine_options(database_url))


settings = get_settings()

engine = create_engine_for(settings.database_url, echo=settings.debug)
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    """Request-scoped session. The repository commits its own inserts."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: Optional[AsyncEngine] = None):
    # Register models on Base.metadata before creating tables
    from . import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
