"""Async database engine and session management.

A single engine is shared by every request for the lifetime of the process;
each request gets its own session from the factory.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from clubhouse.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 20, "max_overflow": 10, "pool_pre_ping": True}


engine = create_async_engine(
    settings.sqlalchemy_url,
    echo=settings.database_echo,
    **_engine_options(settings.sqlalchemy_url),
)

async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session. Used as a FastAPI dependency."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all() -> None:
    """Create any missing tables. There are no migrations; this is the schema."""
    from clubhouse.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
