"""
Auth request/response schemas.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator

from alumni_connect.schemas.university import UniversityResponse
from alumni_connect.schemas.user import UserResponse


def _bcrypt_length(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes (bcrypt limit)")
    return v


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=255)
    university_id: str
    graduation_year: int | None = Field(default=None, ge=1900, le=2100)
    major: str | None = None

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _bcrypt_length(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _bcrypt_length(v)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    university: UniversityResponse | None = None
    # superadmin login only
    universities: list[UniversityResponse] | None = None
