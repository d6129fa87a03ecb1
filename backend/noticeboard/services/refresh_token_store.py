"""Single-slot refresh token storage on the member record."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.core.exceptions import AccountNotFound
from noticeboard.models.member import Member

logger = structlog.get_logger(__name__)


class RefreshTokenStore:
    """
    Map each account to the one refresh token currently accepted for it.

    Writes lock the member row (``SELECT ... FOR UPDATE``) and commit in the
    same transaction, so a rotation racing a logout on the same account is
    serialised by the database rather than interleaved.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def _lock_member(self, username: str) -> Member:
        result = await self._db.execute(
            select(Member)
            .where(Member.username == username)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        member = result.scalar_one_or_none()
        if member is None:
            await self._db.rollback()
            raise AccountNotFound(f"No account named {username!r}")
        return member

    async def set(self, username: str, refresh_token: str) -> None:
        """Replace the stored refresh token, invalidating the previous one."""
        member = await self._lock_member(username)
        member.refresh_token = refresh_token
        await self._db.commit()
        logger.info("auth.refresh_token_rotated", username=username)

    async def clear(self, username: str) -> None:
        """Forget the stored refresh token."""
        member = await self._lock_member(username)
        member.refresh_token = None
        await self._db.commit()
        logger.info("auth.refresh_token_destroyed", username=username)

    async def lookup_by_token(self, refresh_token: str | None) -> Member | None:
        """Return the account whose stored refresh token equals ``refresh_token``."""
        if not refresh_token:
            return None
        result = await self._db.execute(
            select(Member)
            .where(Member.refresh_token == refresh_token)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
