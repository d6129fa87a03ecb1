"""Comment Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Schema for writing a comment or a reply."""

    content: str = Field(..., min_length=1)
    parent_id: int | None = None


class Comment(BaseModel):
    """Comment schema for API responses."""

    id: int
    writer_id: int | None
    post_id: int | None
    parent_id: int | None
    content: str
    is_removed: bool
    created_at: datetime

    model_config = {"from_attributes": True}
