"""
Universities (tenants). Anyone may read enabled universities; only a superadmin creates,
edits, enables/disables or deletes them. Disabling blocks member login but keeps all data.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from alumni_connect.database import transaction
from alumni_connect.errors import Conflict, Forbidden, NotFound
from alumni_connect.models.university import DEFAULT_COLORS, University
from alumni_connect.models.user import User
from alumni_connect.services.identity import Actor

logger = logging.getLogger(__name__)


def _require_superadmin(actor: Actor) -> None:
    if not actor.is_superadmin:
        raise Forbidden("Super admin access required")


def list_enabled(db: Session) -> list[University]:
    return list(
        db.execute(select(University).where(University.is_enabled.is_(True)).order_by(University.name)).scalars().all()
    )


def get_university(db: Session, university_id: str) -> University:
    uni = db.get(University, university_id)
    if uni is None:
        raise NotFound("University not found")
    return uni


def list_all(db: Session, actor: Actor) -> list[tuple[University, int]]:
    """Every university with its member count (superadmin console)."""
    _require_superadmin(actor)
    counts = (
        select(User.university_id, func.count(User.id).label("n"))
        .group_by(User.university_id)
        .subquery()
    )
    rows = db.execute(
        select(University, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.university_id == University.id)
        .order_by(University.name)
    ).all()
    return [(u, n) for u, n in rows]


def create_university(
    db: Session,
    actor: Actor,
    university_id: str,
    name: str,
    logo: str | None = None,
    colors: dict | None = None,
) -> University:
    _require_superadmin(actor)
    slug = university_id.strip().lower()
    with transaction(db):
        if db.get(University, slug) is not None:
            raise Conflict("University ID already exists")
        uni = University(id=slug, name=name.strip(), logo=logo, colors=colors or dict(DEFAULT_COLORS), is_enabled=True)
        db.add(uni)
        try:
            db.flush()
        except IntegrityError as e:
            raise Conflict("University ID already exists") from e
    db.refresh(uni)
    logger.info("University created: %s by %s", slug, actor.user_id)
    return uni


def update_university(db: Session, actor: Actor, university_id: str, changes: dict) -> University:
    """Partial update of name, logo, colors, is_enabled (None keeps the current value)."""
    _require_superadmin(actor)
    with transaction(db):
        uni = get_university(db, university_id)
        for field in ("name", "logo", "colors", "is_enabled"):
            value = changes.get(field)
            if value is not None:
                setattr(uni, field, value)
    db.refresh(uni)
    return uni


def toggle_status(db: Session, actor: Actor, university_id: str) -> University:
    _require_superadmin(actor)
    with transaction(db):
        uni = get_university(db, university_id)
        uni.is_enabled = not uni.is_enabled
    db.refresh(uni)
    logger.info("University %s enabled=%s by %s", university_id, uni.is_enabled, actor.user_id)
    return uni


def delete_university(db: Session, actor: Actor, university_id: str) -> None:
    """Refused while the university still has users."""
    _require_superadmin(actor)
    with transaction(db):
        uni = get_university(db, university_id)
        members = db.execute(
            select(func.count()).select_from(User).where(User.university_id == university_id)
        ).scalar_one()
        if members:
            raise Conflict("Cannot delete university with existing users")
        db.delete(uni)
    logger.info("University deleted: %s by %s", university_id, actor.user_id)
