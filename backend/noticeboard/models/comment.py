"""Comment database model."""

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from noticeboard.core.database import Base


class Comment(Base):
    """Comment on a post; a comment with a parent is a reply.

    Removing a comment only flags it while replies still depend on it, see
    ``find_removable_list``.
    """

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    writer_id: Mapped[int | None] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    post_id: Mapped[int | None] = mapped_column(
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("comment.id"),
        nullable=True,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_removed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    writer: Mapped["Member | None"] = relationship(  # type: ignore
        "Member",
        back_populates="comments",
    )
    post: Mapped["Post | None"] = relationship(  # type: ignore
        "Post",
        back_populates="comments",
    )
    parent: Mapped["Comment | None"] = relationship(
        "Comment",
        back_populates="children",
        remote_side="Comment.id",
    )
    children: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="parent",
        order_by="Comment.id",
    )

    def remove(self) -> None:
        """Flag the comment as removed."""
        self.is_removed = True

    def is_all_children_removed(self) -> bool:
        return all(child.is_removed for child in self.children)

    def find_removable_list(self) -> list["Comment"]:
        """
        Return the comments that can be deleted from the database.

        A top-level comment goes away together with its replies once every
        reply is removed. A reply takes its parent and siblings with it only
        when the parent is removed and every sibling is removed too.

        Children and parent must already be loaded.
        """
        result: list[Comment] = []
        if self.parent is not None:
            parent = self.parent
            if parent.is_removed and parent.is_all_children_removed():
                result.extend(parent.children)
                result.append(parent)
        elif self.is_all_children_removed():
            result.append(self)
            result.extend(self.children)
        return result

    def __repr__(self) -> str:
        """String representation."""
        return f"<Comment {self.id}>"
