"""Post endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.api.deps import get_current_member, get_db
from noticeboard.crud import post as post_crud
from noticeboard.models.member import Member
from noticeboard.models.post import Post
from noticeboard.schemas.post import Post as PostSchema
from noticeboard.schemas.post import PostCreate

router = APIRouter()


@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(get_current_member)],
) -> Post:
    """Publish a post as the authenticated member."""
    return await post_crud.create_post(db, post_in, current_member)


@router.get("", response_model=list[PostSchema])
async def list_posts(
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: int = 0,
    limit: int = 100,
) -> list[Post]:
    """List posts, newest first."""
    return await post_crud.get_posts(db, skip=skip, limit=limit)


@router.get("/{post_id}", response_model=PostSchema)
async def read_post(
    post_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Post:
    """Get one post."""
    post = await post_crud.get_post(db, post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    return post
