"""
University: the tenant. id is a stable slug (e.g. "mit"), not a surrogate key.
is_enabled gates login for its alumni and admins; disabling never deletes data.
"""
from datetime import datetime
from sqlalchemy import String, Text, Boolean, DateTime
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from alumni_connect.database import Base

DEFAULT_COLORS = {
    "light": {"primary": "#3B82F6", "secondary": "#6B7280", "accent": "#2563EB"},
    "dark": {"primary": "#60A5FA", "secondary": "#9CA3AF", "accent": "#3B82F6"},
}


class University(Base):
    __tablename__ = "universities"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    colors: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=lambda: dict(DEFAULT_COLORS))
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    users = relationship("User", back_populates="university", passive_deletes=True)
