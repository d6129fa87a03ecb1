"""CRUD operations for Comment model."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from noticeboard.models.comment import Comment
from noticeboard.models.member import Member
from noticeboard.models.post import Post
from noticeboard.schemas.comment import CommentCreate

logger = structlog.get_logger(__name__)


class CommentNotFound(Exception):
    """Raised when a comment does not exist."""


async def create_comment(
    db: AsyncSession,
    comment_in: CommentCreate,
    writer: Member | None = None,
    post: Post | None = None,
) -> Comment:
    """
    Write a comment, or a reply when ``comment_in.parent_id`` is set.

    Args:
        db: Database session
        comment_in: Comment content and optional parent
        writer: Author
        post: Post the comment belongs to

    Returns:
        Created comment

    Raises:
        CommentNotFound: If the parent comment does not exist
    """
    parent_id = None
    if comment_in.parent_id is not None:
        parent = await get_comment(db, comment_in.parent_id)
        if post is not None and parent.post_id != post.id:
            raise CommentNotFound("Parent comment belongs to another post")
        parent_id = parent.id

    db_comment = Comment(
        content=comment_in.content,
        writer_id=writer.id if writer is not None else None,
        post_id=post.id if post is not None else None,
        parent_id=parent_id,
    )
    db.add(db_comment)
    await db.commit()
    await db.refresh(db_comment)
    return db_comment


async def get_comment(db: AsyncSession, comment_id: int) -> Comment:
    """
    Get comment by ID with its replies and its parent's replies loaded.

    Raises:
        CommentNotFound: If no such comment exists
    """
    result = await db.execute(
        select(Comment)
        .where(Comment.id == comment_id)
        .options(
            selectinload(Comment.children),
            selectinload(Comment.parent).selectinload(Comment.children),
        )
        .execution_options(populate_existing=True)
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise CommentNotFound("Comment not found")
    return comment


async def get_comments(db: AsyncSession, post_id: int | None = None) -> list[Comment]:
    """List comments, optionally restricted to one post."""
    query = select(Comment).order_by(Comment.id)
    if post_id is not None:
        query = query.where(Comment.post_id == post_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def remove_comment(db: AsyncSession, comment_id: int) -> list[int]:
    """
    Flag a comment as removed and delete whatever no longer needs to stay.

    Returns:
        IDs of the comments deleted from the database
    """
    comment = await get_comment(db, comment_id)
    comment.remove()

    removable = comment.find_removable_list()
    deleted_ids = [removable_comment.id for removable_comment in removable]
    for removable_comment in removable:
        await db.delete(removable_comment)
    await db.commit()

    logger.info("comment.removed", comment_id=comment_id, deleted=deleted_ids)
    return deleted_ids
