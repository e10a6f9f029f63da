"""
Shared fixtures. DATABASE_URL points at a throwaway SQLite file before alumni_connect is imported;
the schema is dropped and recreated for every test.
"""
import os
import tempfile
import uuid

_TMP_DIR = tempfile.mkdtemp(prefix="alumni-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ.setdefault("RANKING_STRATEGY", "random")

import pytest
from fastapi.testclient import TestClient

from alumni_connect.database import Base, SessionLocal, engine, init_db
from alumni_connect.main import app
from alumni_connect.models.enums import UserRole
from alumni_connect.models.mentor import Mentor
from alumni_connect.models.university import University
from alumni_connect.models.user import User
from alumni_connect.services.auth import hash_password
from alumni_connect.services.identity import actor_from_user, issue_token

PASSWORD = "testpass123"
_PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    """Fresh schema and a session on it."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_university(db, university_id: str = "mit", name: str | None = None, enabled: bool = True) -> University:
    uni = University(id=university_id, name=name or university_id.upper(), is_enabled=enabled)
    db.add(uni)
    db.commit()
    return uni


def make_user(
    db,
    university_id: str | None = "mit",
    role: str = UserRole.ALUMNI.value,
    name: str | None = None,
    major: str | None = None,
    graduation_year: int | None = None,
    email: str | None = None,
) -> User:
    suffix = uuid.uuid4().hex[:8]
    user = User(
        email=email or f"user-{suffix}@example.com",
        password_hash=_PASSWORD_HASH,
        name=name or f"User {suffix}",
        role=role,
        university_id=university_id,
        major=major,
        graduation_year=graduation_year,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_mentor(db, user: User, expertise: list[str] | None = None, **fields) -> Mentor:
    user.is_mentor = True
    mentor = Mentor(user_id=user.id, **fields)
    mentor.set_expertise(expertise or [])
    db.add(mentor)
    db.commit()
    db.refresh(mentor)
    return mentor


def actor(user: User):
    return actor_from_user(user)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
