"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from noticeboard.core.config import (
    AnonymousEndpoint,
    JwtConfig,
    Settings,
    parse_anonymous_endpoints,
)


class TestAnonymousEndpoints:
    """Test the anonymous endpoint allow-list."""

    def test_default_allow_list(self):
        """Login and signup are reachable without tokens by default."""
        endpoints = parse_anonymous_endpoints(Settings().ANONYMOUS_ENDPOINTS)

        assert AnonymousEndpoint("POST", "/login") in endpoints
        assert AnonymousEndpoint("POST", "/signUp") in endpoints
        assert AnonymousEndpoint("GET", "/login") not in endpoints

    def test_parse_normalises_method(self):
        """Methods are compared upper-case."""
        assert AnonymousEndpoint.parse("post /login") == AnonymousEndpoint("POST", "/login")

    def test_comma_separated_string(self):
        """A comma-separated value is split into entries."""
        settings = Settings(ANONYMOUS_ENDPOINTS="POST /login, GET /health")

        assert settings.ANONYMOUS_ENDPOINTS == ["POST /login", "GET /health"]

    @pytest.mark.parametrize("entry", ["/login", "POST login", "POST /login extra"])
    def test_reject_malformed_entry(self, entry):
        """Entries must read METHOD /path."""
        with pytest.raises(ValidationError):
            Settings(ANONYMOUS_ENDPOINTS=[entry])


class TestJwtConfig:
    """Test the token configuration derived from settings."""

    def test_from_settings(self):
        """Every JWT setting is carried over."""
        settings = Settings(
            JWT_SECRET_KEY="config-secret",
            JWT_ACCESS_TOKEN_EXPIRE_SECONDS=60,
            JWT_REFRESH_TOKEN_EXPIRE_SECONDS=120,
            JWT_ACCESS_HEADER="X-Access",
            JWT_REFRESH_HEADER="X-Refresh",
        )

        config = JwtConfig.from_settings(settings)

        assert config == JwtConfig(
            secret_key="config-secret",
            algorithm="HS512",
            access_token_ttl_seconds=60,
            refresh_token_ttl_seconds=120,
            access_header="X-Access",
            refresh_header="X-Refresh",
        )

    def test_default_headers(self):
        """Tokens travel in Authorization and Authorization-refresh by default."""
        config = JwtConfig.from_settings(Settings())

        assert config.access_header == "Authorization"
        assert config.refresh_header == "Authorization-refresh"


class TestCORSOriginValidation:
    """Test CORS origin validation in Settings."""

    def test_valid_origins_development(self):
        """Plain HTTP origins are accepted outside production."""
        settings = Settings(
            APP_ENV="development",
            ALLOWED_ORIGINS=["http://localhost:3000", "http://board.example.com"],
        )

        assert len(settings.ALLOWED_ORIGINS) == 2

    def test_reject_wildcard(self):
        """Wildcard origins are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(ALLOWED_ORIGINS=["*"])

        assert "wildcard" in str(exc_info.value).lower()

    def test_reject_http_in_production(self):
        """Production origins must use HTTPS unless they are local."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(APP_ENV="production", ALLOWED_ORIGINS=["http://board.example.com"])

        assert "https" in str(exc_info.value).lower()
