"""
User model: auth (email + password), role (alumni | admin | superadmin), tenant (university_id).
Alumni and admins belong to exactly one university; only a superadmin may have none.
Deactivation is status = deactivated, never a delete.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, Text, Integer, Boolean, DateTime, CheckConstraint, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from alumni_connect.database import Base
from alumni_connect.models.enums import UserRole, UserStatus, check_in
from alumni_connect.models.types import UuidType


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)  # stored lower-cased
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    university_id: Mapped[str | None] = mapped_column(
        String(50), ForeignKey("universities.id", ondelete="CASCADE"), nullable=True, index=True
    )
    graduation_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    major: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.ALUMNI.value, index=True)
    is_mentor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=UserStatus.ACTIVE.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(check_in("role", UserRole), name="users_role_check"),
        CheckConstraint(check_in("status", UserStatus), name="users_status_check"),
        CheckConstraint("role = 'superadmin' OR university_id IS NOT NULL", name="users_tenant_check"),
    )

    university = relationship("University", back_populates="users")
    mentor_profile = relationship("Mentor", back_populates="user", uselist=False)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN.value
