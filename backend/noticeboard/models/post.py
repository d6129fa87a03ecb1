"""Post database model."""

from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from noticeboard.core.database import Base


class Post(Base):
    """Bulletin board post."""

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    writer_id: Mapped[int | None] = mapped_column(
        ForeignKey("member.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(40), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
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
        back_populates="posts",
    )
    comments: Mapped[list["Comment"]] = relationship(  # type: ignore
        "Comment",
        back_populates="post",
        cascade="all, delete",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Post {self.id} {self.title!r}>"
