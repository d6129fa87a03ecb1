"""Tests for Member CRUD operations."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.core.security import verify_password
from noticeboard.crud import member as member_crud
from noticeboard.models.member import Member, RoleType
from noticeboard.schemas.member import MemberCreate


class TestMemberCRUD:
    """Test CRUD operations for Member model."""

    @pytest.mark.asyncio
    async def test_create_member(self, db_session: AsyncSession):
        """Test creating a new member."""
        member_in = MemberCreate(
            username="newbie",
            password="secret-pass",
            email="newbie@example.com",
            nickname="Newbie",
        )

        member = await member_crud.create_member(db_session, member_in)

        assert member.id is not None
        assert member.role == RoleType.USER
        assert member.refresh_token is None
        assert member.password != "secret-pass"  # Password should be hashed
        assert verify_password("secret-pass", member.password)

    @pytest.mark.asyncio
    async def test_create_admin(self, db_session: AsyncSession):
        member_in = MemberCreate(
            username="admin",
            password="secret-pass",
            email="admin@example.com",
            nickname="Admin",
        )

        member = await member_crud.create_member(db_session, member_in, role=RoleType.ADMIN)

        assert member.role == RoleType.ADMIN

    @pytest.mark.asyncio
    async def test_get_member(self, db_session: AsyncSession, test_member: Member):
        """Test retrieving a member by ID and by username."""
        by_id = await member_crud.get_member_by_id(db_session, test_member.id)
        by_username = await member_crud.get_member_by_username(db_session, test_member.username)

        assert by_id is not None
        assert by_username is not None
        assert by_id.id == by_username.id == test_member.id

    @pytest.mark.asyncio
    async def test_get_member_not_found(self, db_session: AsyncSession):
        assert await member_crud.get_member_by_id(db_session, 999) is None
        assert await member_crud.get_member_by_username(db_session, "nobody") is None

    @pytest.mark.asyncio
    async def test_exists(self, db_session: AsyncSession, test_member: Member):
        assert await member_crud.exists_by_username(db_session, test_member.username) is True
        assert await member_crud.exists_by_username(db_session, "nobody") is False
        assert await member_crud.exists_by_nickname(db_session, test_member.nickname) is True
        assert await member_crud.exists_by_nickname(db_session, "Nobody") is False

    @pytest.mark.asyncio
    async def test_delete_member(self, db_session: AsyncSession, test_member: Member):
        """Test deleting a member."""
        await member_crud.delete_member(db_session, test_member)

        assert await member_crud.get_member_by_username(db_session, "kdzero") is None
