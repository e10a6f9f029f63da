"""
Admin console over users: tenant-scoped listing and soft (de)activation.
Every call goes through the tenant predicate before touching storage.
"""
import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from alumni_connect.database import transaction
from alumni_connect.errors import Forbidden, InvalidOperation, NotFound
from alumni_connect.models.enums import UserRole, UserStatus
from alumni_connect.models.user import User
from alumni_connect.services.identity import Actor, require_tenant_access, resolve_tenant_scope

logger = logging.getLogger(__name__)


def list_users(
    db: Session,
    actor: Actor,
    search: str | None = None,
    role: str | None = None,
    is_mentor: bool | None = None,
    status: str | None = None,
    page: int = 1,
    page_size: int = 20,
    university_id: str | None = None,
) -> tuple[list[User], int]:
    """Users of one university (superadmin: chosen scope), newest first. Admins and superadmins only."""
    if not (actor.is_admin or actor.is_superadmin):
        raise Forbidden("Admin access required")
    scope = resolve_tenant_scope(actor, university_id)
    conditions = []
    if scope is not None:
        conditions.append(User.university_id == scope)
    if not actor.is_superadmin:
        conditions.append(User.role != UserRole.SUPERADMIN.value)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        conditions.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    if role:
        conditions.append(User.role == role)
    if is_mentor is not None:
        conditions.append(User.is_mentor.is_(is_mentor))
    if status:
        conditions.append(User.status == status)
    total = db.execute(select(func.count()).select_from(User).where(*conditions)).scalar_one()
    users = db.execute(
        select(User)
        .where(*conditions)
        .order_by(User.created_at.desc(), User.id)
        .limit(page_size)
        .offset((page - 1) * page_size)
    ).scalars().all()
    return list(users), total


def set_user_status(db: Session, actor: Actor, user_id: uuid.UUID, status: UserStatus) -> User:
    """Activate/deactivate a user of a university the actor administers. Never deletes."""
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    require_tenant_access(actor, user.university_id)
    if user.id == actor.user_id:
        raise InvalidOperation("You cannot change your own status")
    if user.is_superadmin and not actor.is_superadmin:
        raise Forbidden("Cannot change a superadmin")
    with transaction(db):
        user.status = status.value
    db.refresh(user)
    logger.info("User %s status -> %s by %s", user.id, status.value, actor.user_id)
    return user
