"""Tests for security utilities (password hashing and the JWT token codec)."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from noticeboard.core.config import JwtConfig
from noticeboard.core.exceptions import (
    AuthenticationError,
    TokenExpired,
    TokenInvalidSignature,
    TokenMalformed,
)
from noticeboard.core.security import (
    ACCESS_TOKEN_SUBJECT,
    REFRESH_TOKEN_SUBJECT,
    USERNAME_CLAIM,
    TokenCodec,
    get_password_hash,
    verify_password,
)


def make_config(secret_key: str = "codec-test-secret", **overrides) -> JwtConfig:
    values = {
        "secret_key": secret_key,
        "algorithm": "HS512",
        "access_token_ttl_seconds": 3600,
        "refresh_token_ttl_seconds": 1209600,
        "access_header": "Authorization",
        "refresh_header": "Authorization-refresh",
    }
    values.update(overrides)
    return JwtConfig(**values)


class TestPasswordHashing:
    """Test bcrypt password hashing and verification."""

    def test_get_password_hash(self):
        """Test that password hashing returns a valid bcrypt hash."""
        hashed = get_password_hash("123456789")

        assert hashed.startswith("$2")
        assert len(hashed) == 60

    def test_verify_password(self):
        """Test that only the original password verifies."""
        hashed = get_password_hash("123456789")

        assert verify_password("123456789", hashed) is True
        assert verify_password("1234567890", hashed) is False

    def test_password_72_byte_limit(self):
        """Test that passwords longer than 72 bytes are truncated (bcrypt limitation)."""
        hashed = get_password_hash("A" * 80)

        assert verify_password("A" * 80, hashed) is True
        assert verify_password("A" * 72, hashed) is True

    def test_verify_against_non_bcrypt_value(self):
        """A stored value that is not a bcrypt hash never verifies."""
        assert verify_password("123456789", "plaintext") is False


class TestTokenCodec:
    """Test token issuance and verification."""

    def test_issue_access_carries_subject_and_username(self):
        """Access tokens are HS512 with the AccessToken subject and a username claim."""
        config = make_config()
        token = TokenCodec(config).issue_access("kdzero")

        assert jwt.get_unverified_header(token)["alg"] == "HS512"
        payload = jwt.decode(token, config.secret_key, algorithms=["HS512"])
        assert payload["sub"] == ACCESS_TOKEN_SUBJECT
        assert payload[USERNAME_CLAIM] == "kdzero"
        assert payload["exp"] - payload["iat"] == 3600

    def test_issue_refresh_has_no_username(self):
        """Refresh tokens carry the RefreshToken subject and no username."""
        config = make_config()
        token = TokenCodec(config).issue_refresh()

        payload = jwt.decode(token, config.secret_key, algorithms=["HS512"])
        assert payload["sub"] == REFRESH_TOKEN_SUBJECT
        assert USERNAME_CLAIM not in payload
        assert payload["exp"] - payload["iat"] == 1209600

    def test_refresh_tokens_are_unique(self):
        """Two refresh tokens issued in the same second still differ."""
        codec = TokenCodec(make_config())

        assert codec.issue_refresh() != codec.issue_refresh()

    def test_verify_round_trip(self):
        """A freshly issued token verifies and exposes its claims."""
        codec = TokenCodec(make_config())

        decoded = codec.verify(codec.issue_access("kdzero"))

        assert decoded.subject == ACCESS_TOKEN_SUBJECT
        assert decoded.claim(USERNAME_CLAIM) == "kdzero"
        assert decoded.claim("missing") is None

    def test_verify_expired_token(self):
        """A token whose expiry has passed raises TokenExpired."""
        config = make_config()
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = TokenCodec(config, clock=lambda: past).issue_access("kdzero")

        with pytest.raises(TokenExpired):
            TokenCodec(config).verify(token)

    def test_verify_uses_codec_clock(self):
        """Expiry is judged against the same clock that issued the token."""
        config = make_config()
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        stale_codec = TokenCodec(config, clock=lambda: past)

        decoded = stale_codec.verify(stale_codec.issue_access("kdzero"))

        assert decoded.claim(USERNAME_CLAIM) == "kdzero"

    def test_verify_after_clock_passes_expiry(self):
        """A fresh token is expired for a codec whose clock is past its ttl."""
        config = make_config()
        token = TokenCodec(config).issue_access("kdzero")
        later = datetime.now(timezone.utc) + timedelta(seconds=config.access_token_ttl_seconds + 60)

        with pytest.raises(TokenExpired):
            TokenCodec(config, clock=lambda: later).verify(token)

    def test_verify_token_without_expiry(self):
        """A correctly signed token with no exp claim is malformed."""
        config = make_config()
        token = jwt.encode({"sub": ACCESS_TOKEN_SUBJECT}, config.secret_key, algorithm="HS512")

        with pytest.raises(TokenMalformed):
            TokenCodec(config).verify(token)

    def test_verify_foreign_secret(self):
        """A token signed with another secret raises TokenInvalidSignature."""
        token = TokenCodec(make_config("other-secret")).issue_access("kdzero")

        with pytest.raises(TokenInvalidSignature):
            TokenCodec(make_config()).verify(token)

    def test_verify_tampered_token(self):
        """Changing the signature segment invalidates the token."""
        codec = TokenCodec(make_config())
        header, payload, signature = codec.issue_access("kdzero").split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

        with pytest.raises(TokenInvalidSignature):
            codec.verify(".".join([header, payload, flipped]))

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "invalid.jwt.token"])
    def test_verify_malformed_token(self, token):
        """Values that are not JWTs at all raise TokenMalformed."""
        with pytest.raises(TokenMalformed):
            TokenCodec(make_config()).verify(token)

    def test_failures_share_a_base_class(self):
        """Every verification failure is an AuthenticationError."""
        for error in (TokenMalformed, TokenInvalidSignature, TokenExpired):
            assert issubclass(error, AuthenticationError)
