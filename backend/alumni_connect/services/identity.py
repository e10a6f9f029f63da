"""
Tenant & identity model.

A request's bearer token resolves to an Actor (user id, role, university). The Actor is
passed explicitly into every service call; nothing reads the caller from ambient state.

Tenant rule: alumni and admins see only their own university; a superadmin spans all
universities but only gets a cross-tenant view when it asks for one (ALL_TENANTS).
"""
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from alumni_connect.database import transaction
from alumni_connect.errors import Conflict, Forbidden, InvalidOperation, Unauthorized
from alumni_connect.models.enums import UserRole, UserStatus
from alumni_connect.models.university import University
from alumni_connect.models.user import User
from alumni_connect.services.auth import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

# Scope value a superadmin passes to query every university at once
ALL_TENANTS = "*"


@dataclass(frozen=True)
class Actor:
    user_id: uuid.UUID
    role: str
    university_id: str | None
    name: str
    email: str
    avatar: str | None = None

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def actor_from_user(user: User) -> Actor:
    return Actor(
        user_id=user.id,
        role=user.role,
        university_id=user.university_id,
        name=user.name,
        email=user.email,
        avatar=user.avatar,
    )


def can_access_tenant(actor: Actor, tenant_id: str | None, owner_id: uuid.UUID | None = None) -> bool:
    """
    True iff the actor is a superadmin, an admin of tenant_id, or the resource is the
    actor's own (owner_id == actor.user_id).
    """
    if actor.is_superadmin:
        return True
    if owner_id is not None and owner_id == actor.user_id:
        return True
    return actor.is_admin and tenant_id is not None and actor.university_id == tenant_id


def require_tenant_access(actor: Actor, tenant_id: str | None, owner_id: uuid.UUID | None = None) -> None:
    if not can_access_tenant(actor, tenant_id, owner_id):
        logger.info("Tenant access denied: user=%s role=%s tenant=%s", actor.user_id, actor.role, tenant_id)
        raise Forbidden("Access denied to this university")


def resolve_tenant_scope(actor: Actor, requested: str | None = None) -> str | None:
    """
    Return the university id a list query must filter on, or None for "all universities".

    - alumni/admin: always their own university; asking for another one is Forbidden.
    - superadmin: the requested university, ALL_TENANTS for no filter, or its own
      university when nothing is requested. A superadmin without a university must ask.
    """
    requested = (requested or "").strip() or None
    if actor.is_superadmin:
        if requested == ALL_TENANTS:
            return None
        if requested:
            return requested
        if actor.university_id:
            return actor.university_id
        raise InvalidOperation(f"university_id is required (use '{ALL_TENANTS}' for all universities)")
    if requested is None or requested == actor.university_id:
        # an actor's own university directory is self-service
        return actor.university_id
    if requested == ALL_TENANTS:
        raise Forbidden("Only a superadmin can query all universities")
    require_tenant_access(actor, requested)
    return requested


def same_tenant(actor: Actor, user: User) -> bool:
    return actor.is_superadmin or (actor.university_id is not None and actor.university_id == user.university_id)


def get_active_user(db: Session, user_id: uuid.UUID) -> User | None:
    return db.execute(
        select(User).where(User.id == user_id, User.status == UserStatus.ACTIVE.value)
    ).scalar_one_or_none()


def resolve_actor(db: Session, token: str) -> Actor:
    """Bearer token -> Actor. Unauthorized when the token is bad or the account/university is off."""
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        raise Unauthorized("Invalid or expired token")
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise Unauthorized("Invalid or expired token")
    user = get_active_user(db, user_id)
    if not user:
        raise Unauthorized("User not found or inactive")
    if not user.is_superadmin and user.university is not None and not user.university.is_enabled:
        raise Unauthorized("University is currently disabled")
    return actor_from_user(user)


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Login rules: unknown email or bad password, deactivated account, and (for anyone but a
    superadmin) a disabled university are all Unauthorized.
    """
    user = db.execute(select(User).where(User.email == email.strip().lower())).scalar_one_or_none()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Login rejected: bad credentials for %s", email)
        raise Unauthorized("Invalid email or password")
    if not user.is_active:
        logger.info("Login rejected: deactivated account %s", user.id)
        raise Unauthorized("Account is deactivated")
    if not user.is_superadmin and user.university is not None and not user.university.is_enabled:
        logger.info("Login rejected: university %s disabled (user %s)", user.university_id, user.id)
        raise Unauthorized("University is currently disabled")
    return user


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role, user.university_id)


def email_taken(db: Session, email: str) -> bool:
    return db.execute(
        select(func.count()).select_from(User).where(User.email == email.strip().lower())
    ).scalar_one() > 0


def create_user(
    db: Session,
    *,
    email: str,
    password: str,
    name: str,
    role: str = UserRole.ALUMNI.value,
    university_id: str | None = None,
    graduation_year: int | None = None,
    major: str | None = None,
) -> User:
    """Insert a user in its own transaction. Email uniqueness is case-insensitive."""
    if role != UserRole.SUPERADMIN.value and not university_id:
        raise InvalidOperation("Alumni and admins must belong to a university")
    if university_id:
        uni = db.get(University, university_id)
        if not uni or not uni.is_enabled:
            raise InvalidOperation("Invalid or disabled university")
    if email_taken(db, email):
        raise Conflict("Email already registered")
    normalized = email.strip().lower()
    user = User(
        email=normalized,
        password_hash=hash_password(password),
        name=name.strip(),
        avatar=f"https://api.dicebear.com/7.x/avataaars/svg?seed={normalized}",
        role=role,
        university_id=university_id,
        graduation_year=graduation_year,
        major=major,
    )
    with transaction(db):
        db.add(user)
        try:
            db.flush()
        except IntegrityError as e:
            # lost a race on the unique email index
            raise Conflict("Email already registered") from e
    db.refresh(user)
    logger.info("User created: %s role=%s university=%s", user.id, role, university_id)
    return user
