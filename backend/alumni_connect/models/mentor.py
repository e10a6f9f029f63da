"""
Mentor: 1:1 extension of a User with is_mentor on. Created lazily on first toggle,
set inactive (never deleted) on toggle-off so request history and mentees_count survive.
Expertise is a set of tags in mentor_expertise.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, Text, Integer, DateTime, CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from alumni_connect.database import Base
from alumni_connect.models.enums import MentorStatus, RequestStatus, check_in
from alumni_connect.models.types import UuidType


class Mentor(Base):
    __tablename__ = "mentors"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    availability: Mapped[str | None] = mapped_column(String(100), nullable=True)
    years_experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mentees_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=MentorStatus.ACTIVE.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(check_in("status", MentorStatus), name="mentors_status_check"),
        CheckConstraint("mentees_count >= 0", name="mentors_mentees_count_check"),
    )

    user = relationship("User", back_populates="mentor_profile")
    expertise_tags = relationship(
        "MentorExpertise",
        back_populates="mentor",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="MentorExpertise.tag",
    )

    @property
    def expertise(self) -> list[str]:
        return [t.tag for t in self.expertise_tags]

    def set_expertise(self, tags: list[str]) -> None:
        """
        Replace the tag set; blanks and case-insensitive duplicates are dropped.
        Existing rows are reused and take the casing of the new list.
        """
        seen: dict[str, str] = {}
        for tag in tags or []:
            t = (tag or "").strip()
            if t and t.lower() not in seen:
                seen[t.lower()] = t
        keep = {t.tag.lower(): t for t in self.expertise_tags if t.tag.lower() in seen}
        for low, row in keep.items():
            row.tag = seen[low]
        self.expertise_tags = list(keep.values()) + [
            MentorExpertise(tag=t) for low, t in seen.items() if low not in keep
        ]

    @property
    def is_active(self) -> bool:
        return self.status == MentorStatus.ACTIVE.value


class MentorExpertise(Base):
    __tablename__ = "mentor_expertise"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    mentor_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("mentors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    __table_args__ = (UniqueConstraint("mentor_id", "tag", name="mentor_expertise_tag_key"),)

    mentor = relationship("Mentor", back_populates="expertise_tags")


class MentorshipRequest(Base):
    __tablename__ = "mentorship_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    mentor_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("mentors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    mentee_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RequestStatus.PENDING.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("mentor_id", "mentee_id", name="mentorship_requests_pair_key"),
        CheckConstraint(check_in("status", RequestStatus), name="mentorship_requests_status_check"),
    )

    mentor = relationship("Mentor")
    mentee = relationship("User")
