"""Pytest configuration and fixtures for NoticeBoard tests."""

import os

# Must be set before the application settings are imported
os.environ["APP_ENV"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-for-noticeboard")

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from noticeboard.core.database import init_models
from noticeboard.core.security import get_password_hash
from noticeboard.main import app
from noticeboard.models.member import Member, RoleType
from noticeboard.services.jwt_service import JwtService

USERNAME = "kdzero"
PASSWORD = "123456789"


@pytest.fixture
async def engine(tmp_path):
    """Create an async engine on a throwaway SQLite file, one connection per session."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )

    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def async_client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Async test client whose middleware and routes use the test database."""
    original_session_maker = app.state.session_maker
    app.state.session_maker = session_maker

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.state.session_maker = original_session_maker


@pytest.fixture
def jwt_service() -> JwtService:
    """The token service the application runs with."""
    return app.state.jwt_service


@pytest.fixture
async def test_member(db_session: AsyncSession) -> Member:
    """Create the member used by authentication tests."""
    member = Member(
        username=USERNAME,
        password=get_password_hash(PASSWORD),
        email="kdzero0317@gmail.com",
        nickname="NickName1",
        role=RoleType.USER,
    )
    db_session.add(member)
    await db_session.commit()
    await db_session.refresh(member)
    return member


@pytest.fixture
async def other_member(db_session: AsyncSession) -> Member:
    """A second member, for ownership checks."""
    member = Member(
        username="other",
        password=get_password_hash("other-password"),
        email="other@example.com",
        nickname="NickName2",
        role=RoleType.USER,
    )
    db_session.add(member)
    await db_session.commit()
    await db_session.refresh(member)
    return member


async def login(client: AsyncClient, username: str = USERNAME, password: str = PASSWORD):
    """POST JSON credentials to /login."""
    return await client.post("/login", json={"username": username, "password": password})


@pytest.fixture
async def login_tokens(
    async_client: AsyncClient, test_member: Member, jwt_service: JwtService
) -> dict[str, str]:
    """Log the test member in and return the tokens from the response headers."""
    response = await login(async_client)
    assert response.status_code == 200
    return {
        "access": response.headers[jwt_service.access_header],
        "refresh": response.headers[jwt_service.refresh_header],
    }


async def stored_refresh_token(session_maker, username: str = USERNAME) -> str | None:
    """Read the refresh token currently stored for ``username`` in a new session."""
    from noticeboard.crud import member as member_crud

    async with session_maker() as session:
        member = await member_crud.get_member_by_username(session, username)
        return member.refresh_token if member else None
