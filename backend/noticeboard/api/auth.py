"""Authentication endpoints: login, signup and logout."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.api.deps import get_current_principal, get_db, get_jwt_service
from noticeboard.core.exceptions import AccountNotFound, AuthenticationError
from noticeboard.core.rate_limit import auth_login_limit, auth_signup_limit
from noticeboard.crud import member as member_crud
from noticeboard.middleware.jwt_authentication import NOT_AUTHENTICATED, Principal
from noticeboard.models.member import Member
from noticeboard.schemas.member import LoginRequest, MemberCreate
from noticeboard.schemas.member import Member as MemberSchema
from noticeboard.schemas.token import LoginResponse
from noticeboard.services.jwt_service import JwtService
from noticeboard.services.login_service import LoginService

router = APIRouter()
logger = structlog.get_logger()

LOGIN_FAILED = "Login failed"


def get_login_service(request: Request) -> LoginService:
    """Return the application's login service."""
    return request.app.state.login_service


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Login failed"},
        415: {"description": "Body is not JSON"},
    },
)
@auth_login_limit
async def login(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    jwt_service: Annotated[JwtService, Depends(get_jwt_service)],
    login_service: Annotated[LoginService, Depends(get_login_service)],
) -> LoginResponse:
    """
    JSON username/password login.

    On success the access token and the refresh token are returned in the
    configured response headers. Every failure gets the same 401 so callers
    cannot tell an unknown username from a wrong password.

    A body that is not JSON is not a login attempt at all. It is refused
    with 415 rather than passed on as an unauthenticated 200, so a form
    post can never be mistaken for a successful login. No tokens are
    issued and the store is not touched.

    Raises:
        HTTPException: 415 for non-JSON bodies, 401 for any failed login
    """
    if not _is_json(request):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Login requires a JSON body",
        )

    failed = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=LOGIN_FAILED,
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        credentials = LoginRequest.model_validate_json(await request.body())
    except ValidationError:
        logger.info("auth.login_failed", reason="MalformedBody")
        raise failed

    try:
        tokens = await login_service.login(db, credentials.username, credentials.password)
    except AuthenticationError as e:
        logger.info("auth.login_failed", reason=type(e).__name__)
        raise failed

    jwt_service.send_token(response, tokens.access_token, tokens.refresh_token)
    return LoginResponse(username=credentials.username)


@router.post("/signUp", response_model=MemberSchema, status_code=status.HTTP_201_CREATED)
@auth_signup_limit
async def sign_up(
    request: Request,
    response: Response,
    member_in: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Member:
    """
    Register a new member.

    Raises:
        HTTPException: 400 if the username or nickname is taken
    """
    if await member_crud.exists_by_username(db, member_in.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )
    if await member_crud.exists_by_nickname(db, member_in.nickname):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nickname already in use",
        )

    member = await member_crud.create_member(db, member_in)
    logger.info("member.registered", username=member.username, member_id=member.id)
    return member


@router.post("/logout")
async def logout(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
    jwt_service: Annotated[JwtService, Depends(get_jwt_service)],
) -> dict[str, str]:
    """Destroy the caller's refresh token; only a new login can start a session again."""
    try:
        await jwt_service.destroy_refresh_token(db, principal.username)
    except AccountNotFound:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=NOT_AUTHENTICATED,
        )
    return {"message": "Logged out"}
