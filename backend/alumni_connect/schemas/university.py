"""
University (tenant) schemas.
"""
from pydantic import BaseModel, Field


class UniversityResponse(BaseModel):
    id: str
    name: str
    logo: str | None = None
    colors: dict | None = None
    is_enabled: bool = True

    class Config:
        from_attributes = True


class UniversityAdminResponse(UniversityResponse):
    user_count: int = 0


class UniversityCreate(BaseModel):
    id: str = Field(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")
    name: str = Field(min_length=1, max_length=255)
    logo: str | None = None
    colors: dict | None = None


class UniversityUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    logo: str | None = None
    colors: dict | None = None
    is_enabled: bool | None = None
