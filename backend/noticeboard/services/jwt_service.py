"""Token issuance, extraction and refresh token bookkeeping."""

from fastapi import Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.core.config import JwtConfig
from noticeboard.core.exceptions import (
    RefreshTokenMismatch,
    TokenInvalidSignature,
    TokenMalformed,
)
from noticeboard.core.security import (
    ACCESS_TOKEN_SUBJECT,
    REFRESH_TOKEN_SUBJECT,
    USERNAME_CLAIM,
    TokenCodec,
)
from noticeboard.models.member import Member
from noticeboard.services.refresh_token_store import RefreshTokenStore

BEARER = "Bearer "


class JwtService:
    """Orchestrates the token codec and the refresh token store."""

    def __init__(self, config: JwtConfig, codec: TokenCodec | None = None) -> None:
        self.config = config
        self.codec = codec or TokenCodec(config)

    @property
    def access_header(self) -> str:
        return self.config.access_header

    @property
    def refresh_header(self) -> str:
        return self.config.refresh_header

    def create_access_token(self, username: str) -> str:
        return self.codec.issue_access(username)

    def create_refresh_token(self) -> str:
        return self.codec.issue_refresh()

    async def update_refresh_token(self, db: AsyncSession, username: str, refresh_token: str) -> None:
        await RefreshTokenStore(db).set(username, refresh_token)

    async def destroy_refresh_token(self, db: AsyncSession, username: str) -> None:
        await RefreshTokenStore(db).clear(username)

    @staticmethod
    def _extract_bearer(request: Request, header: str) -> str | None:
        """Return the raw token from ``header`` or None when missing or not Bearer-prefixed."""
        value = request.headers.get(header)
        if not value or not value.startswith(BEARER):
            return None
        token = value[len(BEARER):].strip()
        return token or None

    def extract_access_token(self, request: Request) -> str | None:
        return self._extract_bearer(request, self.access_header)

    def extract_refresh_token(self, request: Request) -> str | None:
        return self._extract_bearer(request, self.refresh_header)

    def extract_username(self, access_token: str) -> str:
        """
        Verify an access token and return its ``username`` claim.

        Raises:
            AuthenticationError: token invalid, expired, or not an access token
        """
        decoded = self.codec.verify(access_token)
        if decoded.subject != ACCESS_TOKEN_SUBJECT:
            raise TokenInvalidSignature(f"Expected {ACCESS_TOKEN_SUBJECT}, got {decoded.subject!r}")
        username = decoded.claim(USERNAME_CLAIM)
        if not username:
            raise TokenMalformed("Access token has no username claim")
        return str(username)

    async def verify_refresh_token(self, db: AsyncSession, refresh_token: str) -> Member:
        """
        Verify a refresh token and resolve the account it currently belongs to.

        A token that verifies but is not the stored one for any account has
        been superseded or destroyed and is rejected like an expired one.
        """
        decoded = self.codec.verify(refresh_token)
        if decoded.subject != REFRESH_TOKEN_SUBJECT:
            raise TokenInvalidSignature(f"Expected {REFRESH_TOKEN_SUBJECT}, got {decoded.subject!r}")
        member = await RefreshTokenStore(db).lookup_by_token(refresh_token)
        if member is None:
            raise RefreshTokenMismatch("Refresh token is not the current one for any account")
        return member

    def send_access_token(self, response: Response, access_token: str) -> None:
        """Write only the access token header (reissue response)."""
        response.headers[self.access_header] = access_token

    def send_token(self, response: Response, access_token: str, refresh_token: str | None = None) -> None:
        """Write the access token header, and the refresh token header when given."""
        self.send_access_token(response, access_token)
        if refresh_token is not None:
            response.headers[self.refresh_header] = refresh_token
