"""CRUD operations for Post model."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from noticeboard.models.member import Member
from noticeboard.models.post import Post
from noticeboard.schemas.post import PostCreate


async def create_post(db: AsyncSession, post_in: PostCreate, writer: Member) -> Post:
    """Create a post written by ``writer``."""
    db_post = Post(title=post_in.title, content=post_in.content, writer_id=writer.id)
    db.add(db_post)
    await db.commit()
    await db.refresh(db_post)
    return db_post


async def get_post(db: AsyncSession, post_id: int) -> Post | None:
    result = await db.execute(select(Post).where(Post.id == post_id))
    return result.scalar_one_or_none()


async def get_posts(db: AsyncSession, skip: int = 0, limit: int = 100) -> list[Post]:
    """List posts, newest first."""
    result = await db.execute(
        select(Post).order_by(Post.id.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all())
