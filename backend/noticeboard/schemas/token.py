"""Token schemas for authentication."""

from pydantic import BaseModel


class TokenPair(BaseModel):
    """Tokens issued at login; ``refresh_token`` is omitted on reissue."""

    access_token: str
    refresh_token: str | None = None


class LoginResponse(BaseModel):
    """Body of a successful login; the tokens travel in headers."""

    username: str
