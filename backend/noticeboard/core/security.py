"""Security utilities: password hashing and the JWT token codec."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import bcrypt as _bcrypt
from jose import JWTError, jwt

from noticeboard.core.config import JwtConfig
from noticeboard.core.exceptions import (
    TokenExpired,
    TokenInvalidSignature,
    TokenMalformed,
)

ACCESS_TOKEN_SUBJECT = "AccessToken"
REFRESH_TOKEN_SUBJECT = "RefreshToken"
USERNAME_CLAIM = "username"

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a login password against the hash stored on the member.

    Args:
        plain_password: Password as submitted at login
        hashed_password: ``Member.password``

    Returns:
        True on a match; False on a mismatch or when the stored value is
        not a bcrypt hash
    """
    try:
        return _bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash a signup password for storage on ``Member.password``."""
    hashed = _bcrypt.hashpw(_password_bytes(password), _bcrypt.gensalt(rounds=12))
    return hashed.decode("utf-8")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DecodedToken:
    """Verified token contents."""

    subject: str
    claims: dict[str, Any] = field(default_factory=dict)

    def claim(self, name: str) -> Any:
        return self.claims.get(name)


class TokenCodec:
    """
    Encode and verify HMAC-signed JWTs.

    Pure: depends only on the configured secret and the clock. Access and
    refresh tokens share the secret and algorithm and differ in subject,
    claims and time-to-live.
    """

    def __init__(
        self,
        config: JwtConfig,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._clock = clock

    def _encode(self, subject: str, ttl_seconds: int, extra: dict[str, Any] | None = None) -> str:
        issued_at = self._clock()
        to_encode: dict[str, Any] = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=ttl_seconds),
            # Unique per token so a rotated refresh token never equals its predecessor
            "jti": uuid.uuid4().hex,
        }
        if extra:
            to_encode.update(extra)
        return jwt.encode(to_encode, self._config.secret_key, algorithm=self._config.algorithm)

    def issue_access(self, username: str) -> str:
        """Create an access token carrying the ``username`` claim."""
        return self._encode(
            ACCESS_TOKEN_SUBJECT,
            self._config.access_token_ttl_seconds,
            {USERNAME_CLAIM: username},
        )

    def issue_refresh(self) -> str:
        """Create a refresh token; it carries no username."""
        return self._encode(REFRESH_TOKEN_SUBJECT, self._config.refresh_token_ttl_seconds)

    def verify(self, token: str) -> DecodedToken:
        """
        Verify signature and expiry and return the token contents.

        Expiry is judged against the codec's clock, the same clock that
        stamps ``iat`` and ``exp`` at issuance.

        Raises:
            TokenMalformed: token cannot be decoded at all
            TokenExpired: signature valid, expiry passed
            TokenInvalidSignature: signature does not verify
        """
        if not token:
            raise TokenMalformed("Empty token")
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise TokenMalformed(str(e)) from e

        try:
            payload = jwt.decode(
                token,
                self._config.secret_key,
                algorithms=[self._config.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise TokenInvalidSignature(str(e)) from e

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)):
            raise TokenMalformed("Token has no numeric exp claim")
        if self._clock().timestamp() > expires_at:
            raise TokenExpired("Signature has expired")

        return DecodedToken(subject=str(payload.get("sub") or ""), claims=payload)
