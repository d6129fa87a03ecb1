"""Comment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.api.deps import get_current_member, get_db
from noticeboard.crud import comment as comment_crud
from noticeboard.crud import post as post_crud
from noticeboard.crud.comment import CommentNotFound
from noticeboard.models.comment import Comment
from noticeboard.models.member import Member
from noticeboard.schemas.comment import Comment as CommentSchema
from noticeboard.schemas.comment import CommentCreate

router = APIRouter()


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    comment_in: CommentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(get_current_member)],
) -> Comment:
    """
    Comment on a post, or reply to a comment when ``parent_id`` is given.

    Raises:
        HTTPException: 404 if the post or the parent comment does not exist
    """
    post = await post_crud.get_post(db, post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    try:
        return await comment_crud.create_comment(db, comment_in, writer=current_member, post=post)
    except CommentNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/comments", response_model=list[CommentSchema])
async def list_comments(
    db: Annotated[AsyncSession, Depends(get_db)],
    post_id: int | None = None,
) -> list[Comment]:
    """List comments, optionally for a single post."""
    return await comment_crud.get_comments(db, post_id=post_id)


@router.get("/comments/{comment_id}", response_model=CommentSchema)
async def read_comment(
    comment_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Comment:
    """Get one comment; removed comments are still returned while replies exist."""
    try:
        return await comment_crud.get_comment(db, comment_id)
    except CommentNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.delete("/comments/{comment_id}")
async def remove_comment(
    comment_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(get_current_member)],
) -> dict[str, list[int]]:
    """
    Remove a comment written by the authenticated member.

    Returns:
        IDs of the comments that were deleted from the database

    Raises:
        HTTPException: 404 if missing, 403 if written by someone else
    """
    try:
        comment = await comment_crud.get_comment(db, comment_id)
    except CommentNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    if comment.writer_id != current_member.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the writer can remove this comment",
        )

    deleted = await comment_crud.remove_comment(db, comment_id)
    return {"deleted": deleted}
