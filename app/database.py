"""Async database access for users, portfolios and holdings."""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.config import get_settings

settings = get_settings()

engine_kwargs = {
    "echo": settings.debug and settings.is_development,
}

# Pooled PostgreSQL (pgbouncer) can't keep prepared statements across transactions
if "postgresql" in settings.database_url:
    engine_kwargs["poolclass"] = NullPool
    engine_kwargs["connect_args"] = {
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
    }

engine = create_async_engine(settings.database_url, **engine_kwargs)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


async def get_db() -> AsyncSession:
    """Dependency to get a read session for the request."""
    async with async_session_maker() as session:
        yield session


async def init_db():
    """Create tables for local SQLite development.

    Deployed databases are managed by the portfolio service's migrations.
    """
    if settings.is_development and "sqlite" in settings.database_url:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
