"""Application Configuration using Pydantic Settings."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_env_file() -> str:
    """
    Determine which .env file to load based on APP_ENV.

    Returns:
        Path to the .env file to load
    """
    app_env = os.getenv("APP_ENV", "development")
    base_dir = Path(__file__).parent.parent.parent  # backend/

    if app_env == "test":
        env_file = base_dir / ".env.test"
        if env_file.exists():
            return str(env_file)

    if app_env == "production":
        env_file = base_dir / ".env.production"
        if env_file.exists():
            return str(env_file)

    # Default to .env
    return str(base_dir / ".env")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=get_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "NoticeBoard"
    APP_ENV: str = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # JWT
    JWT_SECRET_KEY: str = "dev-insecure-jwt-secret-change-me"
    JWT_ALGORITHM: str = "HS512"
    JWT_ACCESS_TOKEN_EXPIRE_SECONDS: int = 3600  # 1 hour
    JWT_REFRESH_TOKEN_EXPIRE_SECONDS: int = 1209600  # 14 days
    JWT_ACCESS_HEADER: str = "Authorization"
    JWT_REFRESH_HEADER: str = "Authorization-refresh"

    # Endpoints reachable without tokens, as "METHOD /path"
    ANONYMOUS_ENDPOINTS: List[str] = [
        "POST /login",
        "POST /signUp",
        "GET /",
        "GET /api/docs",
        "GET /api/redoc",
        "GET /api/openapi.json",
    ]

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./noticeboard.db"
    DATABASE_ECHO: bool = False

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_MAX_AGE: int = 600  # Preflight cache duration in seconds

    # Error Tracking (Sentry)
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_AUTH_LOGIN: str = "5/minute"  # Login attempts (brute-force protection)
    RATE_LIMIT_AUTH_SIGNUP: str = "3/minute"  # Signup (spam prevention)
    RATE_LIMIT_API_DEFAULT: str = "100/minute"

    @field_validator("ANONYMOUS_ENDPOINTS", mode="before")
    @classmethod
    def parse_anonymous_endpoints(cls, v: str | List[str]) -> List[str]:
        """Parse anonymous endpoints from a comma-separated string or list."""
        if isinstance(v, str):
            return [entry.strip() for entry in v.split(",") if entry.strip()]
        return v

    @field_validator("ANONYMOUS_ENDPOINTS", mode="after")
    @classmethod
    def validate_anonymous_endpoints(cls, entries: List[str]) -> List[str]:
        """Every entry must read "METHOD /path"."""
        for entry in entries:
            parts = entry.split()
            if len(parts) != 2 or not parts[1].startswith("/"):
                raise ValueError(
                    f"Anonymous endpoint '{entry}' must look like 'POST /login'"
                )
        return entries

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: str | List[str]) -> List[str]:
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("ALLOWED_ORIGINS", mode="after")
    @classmethod
    def validate_cors_origins(cls, origins: List[str], info) -> List[str]:
        """
        Check the origins the board frontend may call from.

        Browsers read the token headers only from listed origins, so each
        entry must be an exact scheme://host[:port]. Production accepts
        plain HTTP only for localhost and 127.0.0.1.
        """
        if not origins:
            raise ValueError("ALLOWED_ORIGINS needs at least one origin")

        production = info.data.get("APP_ENV", "development") == "production"
        cleaned = []

        for raw in origins:
            origin = raw.strip()
            if not origin:
                raise ValueError("CORS origin cannot be blank")
            if "*" in origin:
                raise ValueError(f"CORS origin '{origin}' contains a wildcard; list exact origins")

            parsed = urlparse(origin)
            if not parsed.scheme or not parsed.netloc:
                raise ValueError(f"CORS origin '{origin}' must look like scheme://host[:port]")

            local = parsed.hostname in ("localhost", "127.0.0.1")
            if production and parsed.scheme != "https" and not local:
                raise ValueError(f"CORS origin '{origin}' must use https in production")

            cleaned.append(origin)

        return cleaned


@dataclass(frozen=True)
class JwtConfig:
    """Signing and transport parameters for access/refresh tokens."""

    secret_key: str
    algorithm: str
    access_token_ttl_seconds: int
    refresh_token_ttl_seconds: int
    access_header: str
    refresh_header: str

    @classmethod
    def from_settings(cls, source: Settings) -> "JwtConfig":
        return cls(
            secret_key=source.JWT_SECRET_KEY,
            algorithm=source.JWT_ALGORITHM,
            access_token_ttl_seconds=source.JWT_ACCESS_TOKEN_EXPIRE_SECONDS,
            refresh_token_ttl_seconds=source.JWT_REFRESH_TOKEN_EXPIRE_SECONDS,
            access_header=source.JWT_ACCESS_HEADER,
            refresh_header=source.JWT_REFRESH_HEADER,
        )


@dataclass(frozen=True)
class AnonymousEndpoint:
    """An endpoint that bypasses token authentication."""

    method: str
    path: str

    @classmethod
    def parse(cls, entry: str) -> "AnonymousEndpoint":
        method, path = entry.split()
        return cls(method=method.upper(), path=path)


def parse_anonymous_endpoints(entries: List[str]) -> frozenset[AnonymousEndpoint]:
    """Build the allow-list used by the authentication middleware."""
    return frozenset(AnonymousEndpoint.parse(entry) for entry in entries)


# Create global settings instance
settings = Settings()
