"""
User schemas: full record for /auth/me and admin lists, public card for other members.
"""
from datetime import datetime
from pydantic import BaseModel


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    role: str
    university_id: str | None = None
    graduation_year: int | None = None
    major: str | None = None
    is_mentor: bool = False
    status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class UserCard(BaseModel):
    """What one member sees of another."""
    id: str
    name: str
    avatar: str | None = None
    university_id: str | None = None
    graduation_year: int | None = None
    major: str | None = None
    is_mentor: bool = False

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    page: int
    page_size: int


class ToggleMentorResponse(BaseModel):
    is_mentor: bool
    mentor_id: str | None = None
