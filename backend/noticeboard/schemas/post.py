"""Post Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """Schema for creating a post."""

    title: str = Field(..., min_length=1, max_length=40)
    content: str = Field(..., min_length=1)


class Post(BaseModel):
    """Post schema for API responses."""

    id: int
    writer_id: int | None
    title: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
