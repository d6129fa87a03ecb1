"""Credential login: verify a username/password pair and issue a token pair."""

from typing import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.core.exceptions import AccountNotFound, CredentialInvalid
from noticeboard.core.security import verify_password
from noticeboard.crud import member as member_crud
from noticeboard.schemas.token import TokenPair
from noticeboard.services.jwt_service import JwtService

logger = structlog.get_logger(__name__)

PasswordVerifier = Callable[[str, str], bool]


class LoginService:
    """
    Authenticate credentials and start a session.

    The password check is delegated to ``password_verifier(plain, hashed)``,
    bcrypt by default.
    """

    def __init__(
        self,
        jwt_service: JwtService,
        password_verifier: PasswordVerifier = verify_password,
    ) -> None:
        self._jwt_service = jwt_service
        self._verify = password_verifier

    async def login(self, db: AsyncSession, username: str, password: str) -> TokenPair:
        """
        Verify credentials, then issue and persist a fresh token pair.

        The new refresh token replaces whatever the account held before.

        Raises:
            AccountNotFound: unknown username
            CredentialInvalid: wrong password
        """
        member = await member_crud.get_member_by_username(db, username)
        if member is None:
            raise AccountNotFound(f"No account named {username!r}")
        if not self._verify(password, member.password):
            raise CredentialInvalid(f"Wrong password for {username!r}")

        access_token = self._jwt_service.create_access_token(member.username)
        refresh_token = self._jwt_service.create_refresh_token()
        await self._jwt_service.update_refresh_token(db, member.username, refresh_token)

        logger.info("auth.login_succeeded", username=member.username)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)
