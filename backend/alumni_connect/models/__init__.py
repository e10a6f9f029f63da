"""
SQLAlchemy models. Import here so Alembic and app can use them.
"""
from alumni_connect.models.university import University
from alumni_connect.models.user import User
from alumni_connect.models.connection import Connection, ConnectionRequest
from alumni_connect.models.mentor import Mentor, MentorExpertise, MentorshipRequest
from alumni_connect.models.notification import Notification

__all__ = [
    "University",
    "User",
    "Connection",
    "ConnectionRequest",
    "Mentor",
    "MentorExpertise",
    "MentorshipRequest",
    "Notification",
]
