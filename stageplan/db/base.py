"""Declarative base plus the process-wide async engine.

The API lifespan and the admin scripts call init_db() once at startup and
close_db() on the way out. Everything in between borrows sessions from
get_session_factory().
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from stageplan.core.config import get_settings


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(url: str | None = None) -> None:
    """Open the engine for `url` (default: settings.database_url).

    A second call is a no-op. Missing tables are created from the model
    metadata; alembic owns schema changes after that.
    """
    global _engine, _session_factory

    if _engine is not None:
        return

    settings = get_settings()
    db_url = url or settings.database_url

    _engine = create_async_engine(db_url, echo=settings.debug, pool_pre_ping=True)
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # create_all only sees tables whose model modules have been imported
    import stageplan.db.models  # noqa: F401

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Drop pooled connections so the next init_db() starts clean."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the engine opened by init_db().

    Raises:
        RuntimeError: init_db() has not run in this process.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory


async def get_db_session():
    """Request-scoped session for route dependencies."""
    async with get_session_factory()() as session:
        yield session
