"""SQLAlchemy database models."""

from noticeboard.models.member import Member, RoleType
from noticeboard.models.post import Post
from noticeboard.models.comment import Comment

__all__ = [
    "Member",
    "RoleType",
    "Post",
    "Comment",
]
