"""Member endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from noticeboard.api.deps import get_current_member
from noticeboard.models.member import Member
from noticeboard.schemas.member import Member as MemberSchema

router = APIRouter()


@router.get("/me", response_model=MemberSchema)
async def read_current_member(
    current_member: Annotated[Member, Depends(get_current_member)],
) -> Member:
    """Return the authenticated member."""
    return current_member
