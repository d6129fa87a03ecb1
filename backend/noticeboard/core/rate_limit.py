"""Rate limiting configuration using SlowAPI."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from noticeboard.core.config import settings


def get_principal_identifier(request: Request) -> str:
    """
    Get rate limit identifier from request.

    Priority order:
    1. Username of the authenticated principal
    2. IP address (for anonymous requests)

    Args:
        request: FastAPI request object

    Returns:
        Unique identifier string for rate limiting
    """
    principal = getattr(request.state, "principal", None)
    if principal is not None:
        return f"user:{principal.username}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_principal_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
    default_limits=[settings.RATE_LIMIT_API_DEFAULT],
    headers_enabled=True,  # Add X-RateLimit-* headers to responses
)

# Anonymous authentication endpoints (brute-force and spam protection)
auth_login_limit = limiter.limit(settings.RATE_LIMIT_AUTH_LOGIN)
auth_signup_limit = limiter.limit(settings.RATE_LIMIT_AUTH_SIGNUP)
