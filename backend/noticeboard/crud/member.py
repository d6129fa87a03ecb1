"""CRUD operations for Member model."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.core.security import get_password_hash
from noticeboard.models.member import Member, RoleType
from noticeboard.schemas.member import MemberCreate


async def get_member_by_id(db: AsyncSession, member_id: int) -> Member | None:
    """
    Get member by ID.

    Args:
        db: Database session
        member_id: Member primary key

    Returns:
        Member object or None if not found
    """
    result = await db.execute(select(Member).where(Member.id == member_id))
    return result.scalar_one_or_none()


async def get_member_by_username(db: AsyncSession, username: str) -> Member | None:
    """
    Get member by username.

    Args:
        db: Database session
        username: Login identifier

    Returns:
        Member object or None if not found
    """
    result = await db.execute(select(Member).where(Member.username == username))
    return result.scalar_one_or_none()


async def exists_by_username(db: AsyncSession, username: str) -> bool:
    result = await db.execute(select(Member.id).where(Member.username == username))
    return result.first() is not None


async def exists_by_nickname(db: AsyncSession, nickname: str) -> bool:
    result = await db.execute(select(Member.id).where(Member.nickname == nickname))
    return result.first() is not None


async def create_member(
    db: AsyncSession,
    member_in: MemberCreate,
    role: RoleType = RoleType.USER,
) -> Member:
    """
    Create new member with a hashed password.

    Args:
        db: Database session
        member_in: Signup schema
        role: Authority of the new member

    Returns:
        Created member object
    """
    db_member = Member(
        username=member_in.username,
        password=get_password_hash(member_in.password),
        email=member_in.email,
        nickname=member_in.nickname,
        role=role,
    )
    db.add(db_member)
    await db.commit()
    await db.refresh(db_member)
    return db_member


async def delete_member(db: AsyncSession, db_member: Member) -> None:
    """Delete member permanently."""
    await db.delete(db_member)
    await db.commit()
