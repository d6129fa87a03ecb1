"""Member (account) database model."""

import enum
from datetime import datetime

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from noticeboard.core.database import Base


class RoleType(str, enum.Enum):
    """Member authority."""

    USER = "USER"
    ADMIN = "ADMIN"


class Member(Base):
    """Member account model.

    ``refresh_token`` holds the single refresh token currently accepted for
    this account. It is written only through the refresh token store.
    """

    __tablename__ = "member"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        index=True,
        nullable=False,
    )
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )
    nickname: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
    )
    role: Mapped[RoleType] = mapped_column(
        Enum(RoleType, name="role_type"),
        default=RoleType.USER,
        nullable=False,
    )
    refresh_token: Mapped[str | None] = mapped_column(
        String(1000),
        index=True,
        nullable=True,
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
    posts: Mapped[list["Post"]] = relationship(  # type: ignore
        "Post",
        back_populates="writer",
        cascade="all, delete",
    )
    comments: Mapped[list["Comment"]] = relationship(  # type: ignore
        "Comment",
        back_populates="writer",
        cascade="all, delete",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Member {self.username}>"
