"""
Database engine, session factory and declarative base.
"""
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from fitledger.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all models."""
    pass


engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables on the given engine (the application engine by default)."""
    # Register models on the metadata
    from fitledger import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Request-scoped session.

    Commits when the request handler returns normally and rolls back
    everything the request wrote if it raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
