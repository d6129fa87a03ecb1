"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.core.database import get_db
from noticeboard.crud import member as member_crud
from noticeboard.middleware.jwt_authentication import NOT_AUTHENTICATED, Principal
from noticeboard.models.member import Member
from noticeboard.services.jwt_service import JwtService

__all__ = [
    "get_db",
    "get_jwt_service",
    "get_current_principal",
    "get_current_member",
]


def get_jwt_service(request: Request) -> JwtService:
    """Return the application's token service."""
    return request.app.state.jwt_service


def get_current_principal(request: Request) -> Principal:
    """
    Return the principal set by the authentication middleware.

    Raises:
        HTTPException: 403 when the request reached the route unauthenticated
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=NOT_AUTHENTICATED,
        )
    return principal


async def get_current_member(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Member:
    """Load the member record of the authenticated principal."""
    member = await member_crud.get_member_by_username(db, principal.username)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=NOT_AUTHENTICATED,
        )
    return member
