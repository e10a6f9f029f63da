"""
Notification fan-out: notify() adds one row to the caller's session without committing, so
the row commits or rolls back together with the mutation that caused it.
Read side: paginated list, unread counter, mark read, delete. Always scoped to the actor.
"""
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from alumni_connect.database import transaction
from alumni_connect.errors import NotFound
from alumni_connect.models.notification import Notification
from alumni_connect.services.identity import Actor

logger = logging.getLogger(__name__)


def notify(
    db: Session,
    user_id: uuid.UUID,
    type: str,
    title: str,
    message: str,
    action_url: str | None = None,
    related_id: uuid.UUID | None = None,
    avatar: str | None = None,
) -> Notification:
    """Stage one notification in the current transaction. Caller commits."""
    n = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        action_url=action_url,
        related_id=related_id,
        avatar=avatar,
        is_read=False,
    )
    db.add(n)
    logger.debug("Notification staged: user=%s type=%s related=%s", user_id, type, related_id)
    return n


def format_relative_time(created_at: datetime | None, now: datetime | None = None) -> str:
    """'Just now', '5m ago', '3h ago', '2d ago', else an ISO date."""
    if created_at is None:
        return ""
    now = now or datetime.now(timezone.utc)
    c = created_at
    if c.tzinfo is None:
        # SQLite returns naive UTC
        c = c.replace(tzinfo=timezone.utc)
    minutes = int((now - c).total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return c.date().isoformat()


def list_notifications(
    db: Session,
    actor: Actor,
    page: int = 1,
    page_size: int = 20,
    unread_only: bool = False,
) -> tuple[list[Notification], int, int]:
    """Return (items newest first, total, unread_count). total and unread_count ignore unread_only."""
    total = db.execute(
        select(func.count()).select_from(Notification).where(Notification.user_id == actor.user_id)
    ).scalar_one()
    unread = unread_count(db, actor)
    stmt = select(Notification).where(Notification.user_id == actor.user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = (
        stmt.order_by(Notification.created_at.desc(), Notification.id)
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    items = list(db.execute(stmt).scalars().all())
    return items, total, unread


def unread_count(db: Session, actor: Actor) -> int:
    return db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == actor.user_id, Notification.is_read.is_(False))
    ).scalar_one()


def mark_read(db: Session, actor: Actor, notification_id: uuid.UUID) -> None:
    with transaction(db):
        result = db.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == actor.user_id)
            .values(is_read=True)
        )
        if result.rowcount == 0:
            raise NotFound("Notification not found")


def mark_all_read(db: Session, actor: Actor) -> int:
    with transaction(db):
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == actor.user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
    return result.rowcount


def delete_notification(db: Session, actor: Actor, notification_id: uuid.UUID) -> None:
    with transaction(db):
        result = db.execute(
            delete(Notification).where(
                Notification.id == notification_id, Notification.user_id == actor.user_id
            )
        )
        if result.rowcount == 0:
            raise NotFound("Notification not found")


def clear_all(db: Session, actor: Actor) -> int:
    with transaction(db):
        result = db.execute(delete(Notification).where(Notification.user_id == actor.user_id))
    return result.rowcount
