"""Member Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from noticeboard.models.member import RoleType


class LoginRequest(BaseModel):
    """JSON body accepted by the login endpoint."""

    username: str = Field(..., min_length=1, max_length=30)
    password: str = Field(..., min_length=1)


class MemberCreate(BaseModel):
    """Schema for member signup."""

    username: str = Field(..., min_length=1, max_length=30)
    password: str = Field(..., min_length=4, max_length=100)
    email: EmailStr
    nickname: str = Field(..., min_length=1, max_length=30)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str) -> str:
        """The member table stores at most 30 characters."""
        if len(v) > 30:
            raise ValueError("Email must be at most 30 characters")
        return v


class Member(BaseModel):
    """Member schema for API responses."""

    id: int
    username: str
    email: str
    nickname: str
    role: RoleType
    created_at: datetime

    model_config = {"from_attributes": True}
