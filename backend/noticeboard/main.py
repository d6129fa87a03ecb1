"""FastAPI Application Entry Point."""

import logging

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from noticeboard import __version__
from noticeboard.core.config import JwtConfig, Settings, parse_anonymous_endpoints, settings
from noticeboard.core.database import AsyncSessionLocal, init_models
from noticeboard.core.rate_limit import limiter
from noticeboard.middleware.jwt_authentication import JwtAuthenticationMiddleware
from noticeboard.services.jwt_service import JwtService
from noticeboard.services.login_service import LoginService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = structlog.get_logger(__name__)


def init_sentry(config: Settings) -> None:
    """Initialize Sentry error tracking when a DSN is configured."""
    if not config.SENTRY_DSN:
        logger.info("sentry.disabled")
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.SENTRY_ENVIRONMENT,
        traces_sample_rate=config.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        send_default_pii=False,
        release=f"noticeboard-backend@{__version__}",
    )
    logger.info("sentry.initialized", environment=config.SENTRY_ENVIRONMENT)


async def method_not_allowed_as_not_found(request: Request, exc: StarletteHTTPException):
    """Report a method a path does not support the same way as an unknown route."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Not Found"},
        )
    return await http_exception_handler(request, exc)


def create_app(config: Settings = settings) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to build from

    Returns:
        Configured application; ``app.state`` carries the session factory,
        the token service and the login service
    """
    init_sentry(config)

    application = FastAPI(
        title=config.APP_NAME,
        description="NoticeBoard - bulletin board API with stateless JWT authentication",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    jwt_service = JwtService(JwtConfig.from_settings(config))
    application.state.session_maker = AsyncSessionLocal
    application.state.jwt_service = jwt_service
    application.state.login_service = LoginService(jwt_service)

    # Configure rate limiting
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_exception_handler(StarletteHTTPException, method_not_allowed_as_not_found)

    # Authentication runs inside CORS so preflight requests never need tokens
    application.add_middleware(
        JwtAuthenticationMiddleware,
        jwt_service=jwt_service,
        anonymous_endpoints=parse_anonymous_endpoints(config.ANONYMOUS_ENDPOINTS),
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
            config.JWT_ACCESS_HEADER,
            config.JWT_REFRESH_HEADER,
        ],
        expose_headers=[config.JWT_ACCESS_HEADER, config.JWT_REFRESH_HEADER],
        max_age=config.CORS_MAX_AGE,
    )

    @application.on_event("startup")
    async def startup_event() -> None:
        """Create missing tables on startup."""
        await init_models()

    @application.get("/", tags=["root"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": f"Welcome to {config.APP_NAME}",
            "docs": "/api/docs",
        }

    from noticeboard.api import auth
    from noticeboard.api.v1 import api_router

    application.include_router(auth.router, tags=["authentication"])
    application.include_router(api_router, prefix=config.API_V1_PREFIX)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "noticeboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
