"""JWT authentication middleware.

Every request that is not on the anonymous allow-list is classified by the
tokens it presents:

    access   refresh   outcome
    ------   -------   -------
    absent   absent    reject
    invalid  absent    reject
    valid    absent    authenticate as the access token's username
    any      invalid   reject
    any      valid     reissue an access token for the refresh token's
                       owner and authenticate as that account

A refresh header that is present but not Bearer-prefixed counts as invalid.
The refresh token itself is never sent back and the store is never written
here; rotation only happens at login and logout.
"""

from dataclasses import dataclass

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from noticeboard.core.config import AnonymousEndpoint
from noticeboard.core.exceptions import AuthenticationError, TokenMalformed
from noticeboard.services.jwt_service import JwtService

logger = structlog.get_logger(__name__)

NOT_AUTHENTICATED = "Not authenticated"


@dataclass(frozen=True)
class Principal:
    """Authenticated identity attached to ``request.state.principal``."""

    username: str


@dataclass(frozen=True)
class AuthResult:
    """Successful authentication decision."""

    principal: Principal
    reissued_access_token: str | None = None


async def authenticate_request(
    request: Request,
    jwt_service: JwtService,
    db: AsyncSession,
) -> AuthResult:
    """
    Decide who is making ``request``.

    Args:
        request: Incoming request
        jwt_service: Token service
        db: Session used to look up the stored refresh token

    Returns:
        The principal, plus a fresh access token when one was reissued

    Raises:
        AuthenticationError: the request must be rejected
    """
    if jwt_service.refresh_header in request.headers:
        refresh_token = jwt_service.extract_refresh_token(request)
        if refresh_token is None:
            raise TokenMalformed("Refresh token header is not a Bearer token")
        member = await jwt_service.verify_refresh_token(db, refresh_token)
        access_token = jwt_service.create_access_token(member.username)
        return AuthResult(Principal(member.username), reissued_access_token=access_token)

    if jwt_service.access_header not in request.headers:
        raise TokenMalformed("No token presented")
    access_token = jwt_service.extract_access_token(request)
    if access_token is None:
        raise TokenMalformed("Access token header is not a Bearer token")
    return AuthResult(Principal(jwt_service.extract_username(access_token)))


class JwtAuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Authenticate every request before routing.

    Rejections short-circuit with 403. Accepted requests continue with
    ``request.state.principal`` set; routing alone decides the final status
    (an authenticated request to an unknown path still ends in 404).
    """

    def __init__(
        self,
        app: ASGIApp,
        jwt_service: JwtService,
        anonymous_endpoints: frozenset[AnonymousEndpoint],
    ):
        super().__init__(app)
        self.jwt_service = jwt_service
        self.anonymous_endpoints = anonymous_endpoints
        self.anonymous_paths = frozenset(endpoint.path for endpoint in anonymous_endpoints)

    async def dispatch(self, request: Request, call_next):
        method = request.method.upper()
        path = request.url.path

        if AnonymousEndpoint(method, path) in self.anonymous_endpoints:
            return await call_next(request)

        # Allow-listed path, other method: no principal, routing answers
        if path in self.anonymous_paths:
            return await call_next(request)

        try:
            async with request.app.state.session_maker() as db:
                result = await authenticate_request(request, self.jwt_service, db)
        except AuthenticationError as e:
            logger.info(
                "auth.request_rejected",
                reason=type(e).__name__,
                method=method,
                path=path,
            )
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"detail": NOT_AUTHENTICATED},
            )

        request.state.principal = result.principal
        response = await call_next(request)

        if result.reissued_access_token is not None:
            self.jwt_service.send_access_token(response, result.reissued_access_token)
            logger.info("auth.access_token_reissued", username=result.principal.username)

        return response
