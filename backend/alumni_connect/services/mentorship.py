"""
Mentorship matching engine: mentor profiles, mentorship requests (mentee -> mentor,
pending -> accepted | rejected) and the mentor directory.

Accepting flips the request with a conditional UPDATE and bumps mentees_count by exactly one in
the same transaction, along with the mentee's notification. A second accept finds no pending
row and gets NotFound. Rejecting never touches the counter.

One request per (mentor, mentee) ever: a rejected mentee cannot ask the same mentor again.
Kept as-is pending a product call.
"""
import logging
import uuid

from sqlalchemy import exists, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from alumni_connect import metrics
from alumni_connect.database import transaction
from alumni_connect.errors import Conflict, Forbidden, InvalidOperation, NotFound
from alumni_connect.models.enums import MentorStatus, NotificationType, RequestStatus, UserStatus
from alumni_connect.models.mentor import Mentor, MentorExpertise, MentorshipRequest
from alumni_connect.models.user import User
from alumni_connect.services.identity import Actor, get_active_user, resolve_tenant_scope, same_tenant
from alumni_connect.services.notifications import notify
from alumni_connect.services.ranking import MAX_SCORE, RankingStrategy, get_ranking_strategy

logger = logging.getLogger(__name__)

PENDING = RequestStatus.PENDING.value

# Fields a mentor may edit on their own profile
PROFILE_FIELDS = ("title", "company", "location", "bio", "availability", "years_experience")


def toggle_mentor(db: Session, actor: Actor) -> tuple[User, Mentor | None]:
    """
    Flip is_mentor. Turning it on creates the mentor profile or reactivates the existing one;
    turning it off marks the profile inactive. Returns (user, profile or None).
    """
    with transaction(db):
        user = get_active_user(db, actor.user_id)
        if not user:
            raise NotFound("User not found")
        user.is_mentor = not user.is_mentor
        mentor = db.execute(select(Mentor).where(Mentor.user_id == user.id)).scalar_one_or_none()
        if user.is_mentor:
            if mentor is None:
                mentor = Mentor(user_id=user.id, status=MentorStatus.ACTIVE.value)
                db.add(mentor)
                try:
                    db.flush()
                except IntegrityError as e:
                    raise Conflict("Mentor status changed concurrently, try again") from e
            else:
                mentor.status = MentorStatus.ACTIVE.value
        elif mentor is not None:
            mentor.status = MentorStatus.INACTIVE.value
    logger.info("Mentor status for %s -> %s", actor.user_id, user.is_mentor)
    return user, mentor


def get_my_profile(db: Session, actor: Actor) -> Mentor:
    mentor = db.execute(
        select(Mentor).options(selectinload(Mentor.user)).where(Mentor.user_id == actor.user_id)
    ).scalar_one_or_none()
    if mentor is None:
        raise NotFound("Mentor profile not found")
    return mentor


def update_my_profile(db: Session, actor: Actor, changes: dict) -> Mentor:
    """Partial update: keys absent or None keep their value. 'expertise' replaces the tag set."""
    with transaction(db):
        mentor = get_my_profile(db, actor)
        for field in PROFILE_FIELDS:
            value = changes.get(field)
            if value is not None:
                setattr(mentor, field, value)
        if changes.get("expertise") is not None:
            mentor.set_expertise(changes["expertise"])
    db.refresh(mentor)
    return mentor


def _active_mentor_query():
    return (
        select(Mentor)
        .join(User, User.id == Mentor.user_id)
        .options(selectinload(Mentor.user))
        .where(
            Mentor.status == MentorStatus.ACTIVE.value,
            User.is_mentor.is_(True),
            User.status == UserStatus.ACTIVE.value,
        )
    )


def get_mentor(
    db: Session,
    actor: Actor,
    mentor_id: uuid.UUID,
    ranking: RankingStrategy | None = None,
) -> tuple[Mentor, int]:
    """Active mentor visible to the actor, with its match score."""
    mentor = db.execute(_active_mentor_query().where(Mentor.id == mentor_id)).scalar_one_or_none()
    if mentor is None or not same_tenant(actor, mentor.user):
        raise NotFound("Mentor not found")
    return mentor, _score(db, actor, mentor, ranking or get_ranking_strategy())


def _score(db: Session, actor: Actor, mentor: Mentor, ranking: RankingStrategy) -> int:
    if mentor.user_id == actor.user_id:
        return MAX_SCORE
    mentee = db.get(User, actor.user_id)
    return ranking.match_score(mentee, mentor)


def list_mentors(
    db: Session,
    actor: Actor,
    expertise: str | None = None,
    availability: str | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 20,
    university_id: str | None = None,
    ranking: RankingStrategy | None = None,
) -> tuple[list[tuple[Mentor, int]], int]:
    """
    Active mentors in the actor's university (superadmin: chosen scope), most experienced first.
    expertise is a case-insensitive tag membership test; search matches name, bio and title.
    match_score is computed per call and never stored.
    """
    scope = resolve_tenant_scope(actor, university_id)
    ranking = ranking or get_ranking_strategy()
    conditions = []
    if scope is not None:
        conditions.append(User.university_id == scope)
    if expertise and expertise.strip():
        conditions.append(
            exists().where(
                MentorExpertise.mentor_id == Mentor.id,
                func.lower(MentorExpertise.tag) == expertise.strip().lower(),
            )
        )
    if availability and availability.strip():
        conditions.append(Mentor.availability == availability.strip())
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        conditions.append(or_(User.name.ilike(pattern), Mentor.bio.ilike(pattern), Mentor.title.ilike(pattern)))

    base = _active_mentor_query().where(*conditions)
    total = db.execute(select(func.count()).select_from(base.subquery())).scalar_one()
    mentors = db.execute(
        base.order_by(Mentor.years_experience.desc(), Mentor.id)
        .limit(page_size)
        .offset((page - 1) * page_size)
    ).scalars().all()
    return [(m, _score(db, actor, m, ranking)) for m in mentors], total


def request_mentorship(
    db: Session,
    actor: Actor,
    mentor_id: uuid.UUID,
    message: str | None = None,
) -> MentorshipRequest:
    with transaction(db):
        existing = db.execute(
            select(MentorshipRequest.id).where(
                MentorshipRequest.mentor_id == mentor_id, MentorshipRequest.mentee_id == actor.user_id
            )
        ).first()
        if existing:
            raise Conflict("Request already sent")
        mentor = db.execute(_active_mentor_query().where(Mentor.id == mentor_id)).scalar_one_or_none()
        if mentor is None:
            raise NotFound("Mentor not found")
        if mentor.user_id == actor.user_id:
            raise InvalidOperation("Cannot request mentorship from yourself")
        if not same_tenant(actor, mentor.user):
            raise Forbidden("Mentor belongs to another university")
        req = MentorshipRequest(
            mentor_id=mentor.id,
            mentee_id=actor.user_id,
            message=message,
            status=PENDING,
        )
        db.add(req)
        try:
            db.flush()
        except IntegrityError as e:
            raise Conflict("Request already sent") from e
        notify(
            db,
            user_id=mentor.user_id,
            type=NotificationType.MENTORSHIP_REQUEST.value,
            title="New Mentorship Request",
            message=f"{actor.name} wants to be your mentee",
            action_url="/mentorship",
            related_id=req.id,
            avatar=actor.avatar,
        )
    logger.info("Mentorship request %s: %s -> mentor %s", req.id, actor.user_id, mentor_id)
    return req


def _owned_request(db: Session, actor: Actor, request_id: uuid.UUID) -> tuple[MentorshipRequest, Mentor]:
    row = db.execute(
        select(MentorshipRequest, Mentor)
        .join(Mentor, Mentor.id == MentorshipRequest.mentor_id)
        .where(MentorshipRequest.id == request_id)
    ).first()
    if row is None:
        raise NotFound("Request not found or already processed")
    req, mentor = row
    if mentor.user_id != actor.user_id:
        raise Forbidden("Not authorized to act on this request")
    return req, mentor


def _flip(db: Session, request_id: uuid.UUID, new_status: RequestStatus) -> None:
    result = db.execute(
        update(MentorshipRequest)
        .where(MentorshipRequest.id == request_id, MentorshipRequest.status == PENDING)
        .values(status=new_status.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        metrics.increment("request_transition_conflicts_total")
        raise NotFound("Request not found or already processed")


def accept_mentorship(db: Session, actor: Actor, request_id: uuid.UUID) -> MentorshipRequest:
    with transaction(db):
        req, mentor = _owned_request(db, actor, request_id)
        _flip(db, request_id, RequestStatus.ACCEPTED)
        db.execute(
            update(Mentor)
            .where(Mentor.id == mentor.id)
            .values(mentees_count=Mentor.mentees_count + 1)
            .execution_options(synchronize_session=False)
        )
        notify(
            db,
            user_id=req.mentee_id,
            type=NotificationType.MENTORSHIP_ACCEPTED.value,
            title="Mentorship Request Accepted",
            message=f"{actor.name} accepted your mentorship request",
            action_url="/mentorship",
            related_id=req.id,
            avatar=actor.avatar,
        )
    db.refresh(req)
    logger.info("Mentorship request %s accepted by %s", request_id, actor.user_id)
    return req


def reject_mentorship(db: Session, actor: Actor, request_id: uuid.UUID) -> MentorshipRequest:
    with transaction(db):
        req, _ = _owned_request(db, actor, request_id)
        _flip(db, request_id, RequestStatus.REJECTED)
    db.refresh(req)
    logger.info("Mentorship request %s rejected by %s", request_id, actor.user_id)
    return req


def list_my_requests(db: Session, actor: Actor) -> list[MentorshipRequest]:
    """Requests the actor sent as mentee, any status, newest first."""
    return list(
        db.execute(
            select(MentorshipRequest)
            .options(selectinload(MentorshipRequest.mentor).selectinload(Mentor.user))
            .where(MentorshipRequest.mentee_id == actor.user_id)
            .order_by(MentorshipRequest.created_at.desc(), MentorshipRequest.id)
        ).scalars().all()
    )


def list_incoming_requests(db: Session, actor: Actor) -> list[MentorshipRequest]:
    """Pending requests addressed to the actor's mentor profile, newest first."""
    return list(
        db.execute(
            select(MentorshipRequest)
            .join(Mentor, Mentor.id == MentorshipRequest.mentor_id)
            .options(selectinload(MentorshipRequest.mentee))
            .where(Mentor.user_id == actor.user_id, MentorshipRequest.status == PENDING)
            .order_by(MentorshipRequest.created_at.desc(), MentorshipRequest.id)
        ).scalars().all()
    )
