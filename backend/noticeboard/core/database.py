"""Async SQLAlchemy engine, session factory and request-scoped session dependency."""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from noticeboard.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session for the current request.

    The session factory is read from ``app.state.session_maker`` so the
    authentication middleware and the route handlers share one database.
    """
    session_maker = request.app.state.session_maker
    async with session_maker() as session:
        yield session


async def init_models(bind=None) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register on Base.metadata
    import noticeboard.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
