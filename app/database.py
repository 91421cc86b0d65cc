"""Async database engine, session factory and transaction helpers"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session per request"""
    async with SessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker:
    """
    Session factory for work that outlives the request, such as
    deferred interaction handling. Overridden in tests.
    """
    return SessionLocal


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Unit of work around one logical mutation.

    Commits when the block exits cleanly; rolls back and re-raises otherwise,
    so a store write and its audit entry land together or not at all.
    """
    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise
