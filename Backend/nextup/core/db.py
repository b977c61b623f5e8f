from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import get_settings


class Base(DeclarativeBase):
    pass


@lru_cache
def get_engine() -> AsyncEngine:
    settings = get_settings()
    options = {"echo": False, "future": True, "pool_pre_ping": True}
    if not settings.database_url.startswith("sqlite"):
        options.update(pool_recycle=3600, pool_size=10, max_overflow=20)
    return create_async_engine(settings.database_url, **options)


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_engine(), expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine | None = None) -> None:
    # Register the tables on Base.metadata before creating them.
    from .. import models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
