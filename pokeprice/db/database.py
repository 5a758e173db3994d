"""
Cache database wiring.

One async engine per process backs both the DatabaseCacheStore (through
async_session_factory) and the readiness check (through get_session).
"""

from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pokeprice.config import settings
from pokeprice.models.db import Base

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Cached rows are read after commit by the cache store.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a cache database session.

    Commits when the request handler returns, rolls back on a database
    error. The /ready endpoint uses it to run its connectivity check:

        async def ready(session: Annotated[AsyncSession, Depends(get_session)]):
            await session.execute(text("SELECT 1"))
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create the cache_entries table if it does not exist. Run once at startup."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_db() -> None:
    """Close pooled connections. Called once at application shutdown or job exit."""
    await engine.dispose()
