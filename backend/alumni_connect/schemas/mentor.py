"""
Mentor profile and mentorship request schemas.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from alumni_connect.schemas.user import UserCard


class MentorResponse(BaseModel):
    id: str
    user_id: str
    name: str
    avatar: str | None = None
    university_id: str | None = None
    title: str | None = None
    company: str | None = None
    location: str | None = None
    bio: str | None = None
    expertise: list[str] = []
    availability: str | None = None
    years_experience: int = 0
    mentees_count: int = 0
    status: str
    match_score: int = Field(ge=0, le=100)


class MentorListResponse(BaseModel):
    items: list[MentorResponse]
    total: int
    page: int
    page_size: int


class MentorProfileUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    expertise: list[str] | None = None
    availability: str | None = Field(default=None, max_length=100)
    years_experience: int | None = Field(default=None, ge=0, le=80)


class MentorshipRequestCreate(BaseModel):
    message: str | None = Field(default=None, max_length=2000)


class MentorshipRequestResponse(BaseModel):
    id: str
    mentor_id: str
    mentee_id: str
    message: str | None = None
    status: str
    created_at: datetime | None = None
    mentor_name: str | None = None
    mentee: UserCard | None = None
