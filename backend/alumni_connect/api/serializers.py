"""
Row -> response schema mapping shared by the routers.
"""
from alumni_connect.models.connection import Connection, ConnectionRequest
from alumni_connect.models.mentor import Mentor, MentorshipRequest
from alumni_connect.models.notification import Notification
from alumni_connect.models.user import User
from alumni_connect.schemas.connection import ConnectionRequestResponse, ConnectionResponse
from alumni_connect.schemas.mentor import MentorResponse, MentorshipRequestResponse
from alumni_connect.schemas.notification import NotificationResponse
from alumni_connect.schemas.user import UserCard, UserResponse
from alumni_connect.services.notifications import format_relative_time


def user_response(u: User) -> UserResponse:
    return UserResponse(
        id=str(u.id),
        email=u.email,
        name=u.name,
        avatar=u.avatar,
        role=u.role,
        university_id=u.university_id,
        graduation_year=u.graduation_year,
        major=u.major,
        is_mentor=u.is_mentor,
        status=u.status,
        created_at=u.created_at,
    )


def user_card(u: User) -> UserCard:
    return UserCard(
        id=str(u.id),
        name=u.name,
        avatar=u.avatar,
        university_id=u.university_id,
        graduation_year=u.graduation_year,
        major=u.major,
        is_mentor=u.is_mentor,
    )


def connection_response(c: Connection, other: User) -> ConnectionResponse:
    return ConnectionResponse(id=str(c.id), user=user_card(other), connected_at=c.connected_at)


def request_response(r: ConnectionRequest, other: User | None = None) -> ConnectionRequestResponse:
    return ConnectionRequestResponse(
        id=str(r.id),
        from_user_id=str(r.from_user_id),
        to_user_id=str(r.to_user_id),
        status=r.status,
        created_at=r.created_at,
        user=user_card(other) if other is not None else None,
    )


def mentor_response(m: Mentor, score: int) -> MentorResponse:
    u = m.user
    return MentorResponse(
        id=str(m.id),
        user_id=str(m.user_id),
        name=u.name,
        avatar=u.avatar,
        university_id=u.university_id,
        title=m.title,
        company=m.company,
        location=m.location,
        bio=m.bio,
        expertise=m.expertise,
        availability=m.availability,
        years_experience=m.years_experience,
        mentees_count=m.mentees_count,
        status=m.status,
        match_score=score,
    )


def mentorship_request_response(r: MentorshipRequest) -> MentorshipRequestResponse:
    mentor_name = r.mentor.user.name if r.mentor is not None and r.mentor.user is not None else None
    return MentorshipRequestResponse(
        id=str(r.id),
        mentor_id=str(r.mentor_id),
        mentee_id=str(r.mentee_id),
        message=r.message,
        status=r.status,
        created_at=r.created_at,
        mentor_name=mentor_name,
        mentee=user_card(r.mentee) if r.mentee is not None else None,
    )


def notification_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(n.id),
        type=n.type,
        title=n.title,
        message=n.message,
        avatar=n.avatar,
        is_read=n.is_read,
        action_url=n.action_url,
        related_id=str(n.related_id) if n.related_id else None,
        created_at=n.created_at,
        time=format_relative_time(n.created_at),
    )
