"""
Relationship engine: connection requests (directional, pending -> accepted | rejected) and
connections (symmetric, one row per pair).

Every mutation runs inside one transaction together with its notification. Accept and reject
flip the status with a conditional UPDATE (status = 'pending' re-checked by the database), so of
two concurrent accepts exactly one matches a row; the other gets NotFound.

A request row blocks any new request between the same two users whatever its status, so a
rejected (or accepted-then-removed) pair cannot request again. Kept as-is pending a product call.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from alumni_connect import metrics
from alumni_connect.database import transaction
from alumni_connect.errors import Conflict, Forbidden, InvalidOperation, NotFound
from alumni_connect.models.connection import Connection, ConnectionRequest, canonical_pair, pair_key
from alumni_connect.models.enums import NotificationType, RequestStatus, UserRole, UserStatus
from alumni_connect.models.user import User
from alumni_connect.services.identity import Actor, get_active_user, resolve_tenant_scope, same_tenant
from alumni_connect.services.notifications import notify
from alumni_connect.services.ranking import RankingStrategy, get_ranking_strategy

logger = logging.getLogger(__name__)

PENDING = RequestStatus.PENDING.value


@dataclass(frozen=True)
class ConnectionStatus:
    status: str  # connected | pending | none
    request_status: str | None = None
    direction: str | None = None  # outgoing | incoming, for pending requests
    request_id: uuid.UUID | None = None

    @property
    def is_connected(self) -> bool:
        return self.status == "connected"


def _pair_filter(model_a, model_b, a: uuid.UUID, b: uuid.UUID):
    return or_(and_(model_a == a, model_b == b), and_(model_a == b, model_b == a))


def find_connection(db: Session, a: uuid.UUID, b: uuid.UUID) -> Connection | None:
    low, high = canonical_pair(a, b)
    return db.execute(
        select(Connection).where(Connection.user_a_id == low, Connection.user_b_id == high)
    ).scalar_one_or_none()


def find_request(db: Session, a: uuid.UUID, b: uuid.UUID) -> ConnectionRequest | None:
    """The request between a and b in either direction (at most one exists)."""
    return db.execute(
        select(ConnectionRequest).where(
            _pair_filter(ConnectionRequest.from_user_id, ConnectionRequest.to_user_id, a, b)
        )
    ).scalars().first()


def send_request(db: Session, actor: Actor, to_user_id: uuid.UUID) -> ConnectionRequest:
    if to_user_id == actor.user_id:
        raise InvalidOperation("Cannot connect to yourself")
    with transaction(db):
        target = get_active_user(db, to_user_id)
        if not target:
            raise NotFound("User not found")
        if not same_tenant(actor, target):
            raise Forbidden("Cannot connect with members of another university")
        if find_connection(db, actor.user_id, to_user_id):
            raise Conflict("Already connected")
        if find_request(db, actor.user_id, to_user_id):
            raise Conflict("Request already exists")
        req = ConnectionRequest(
            from_user_id=actor.user_id,
            to_user_id=to_user_id,
            pair_key=pair_key(actor.user_id, to_user_id),
            status=PENDING,
        )
        db.add(req)
        try:
            db.flush()
        except IntegrityError as e:
            # concurrent sender inserted the same pair first
            raise Conflict("Request already exists") from e
        notify(
            db,
            user_id=to_user_id,
            type=NotificationType.CONNECTION_REQUEST.value,
            title="New Connection Request",
            message=f"{actor.name} wants to connect with you",
            action_url="/connections",
            related_id=req.id,
            avatar=actor.avatar,
        )
    logger.info("Connection request %s: %s -> %s", req.id, actor.user_id, to_user_id)
    return req


def _transition(db: Session, actor: Actor, request_id: uuid.UUID, new_status: RequestStatus) -> ConnectionRequest:
    """Flip a pending request addressed to the actor. Must run inside transaction()."""
    result = db.execute(
        update(ConnectionRequest)
        .where(
            ConnectionRequest.id == request_id,
            ConnectionRequest.to_user_id == actor.user_id,
            ConnectionRequest.status == PENDING,
        )
        .values(status=new_status.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        metrics.increment("request_transition_conflicts_total")
        logger.info("Connection request %s not actionable for %s", request_id, actor.user_id)
        raise NotFound("Request not found or already processed")
    req = db.get(ConnectionRequest, request_id)
    db.refresh(req)
    return req


def accept_request(db: Session, actor: Actor, request_id: uuid.UUID) -> Connection:
    with transaction(db):
        req = _transition(db, actor, request_id, RequestStatus.ACCEPTED)
        low, high = canonical_pair(req.from_user_id, req.to_user_id)
        conn = Connection(user_a_id=low, user_b_id=high)
        db.add(conn)
        try:
            db.flush()
        except IntegrityError as e:
            raise Conflict("Already connected") from e
        notify(
            db,
            user_id=req.from_user_id,
            type=NotificationType.CONNECTION_ACCEPTED.value,
            title="Connection Accepted",
            message=f"{actor.name} accepted your connection request",
            action_url="/connections",
            related_id=req.id,
            avatar=actor.avatar,
        )
    logger.info("Connection request %s accepted by %s", request_id, actor.user_id)
    return conn


def reject_request(db: Session, actor: Actor, request_id: uuid.UUID) -> ConnectionRequest:
    with transaction(db):
        req = _transition(db, actor, request_id, RequestStatus.REJECTED)
    logger.info("Connection request %s rejected by %s", request_id, actor.user_id)
    return req


def remove_connection(db: Session, actor: Actor, other_user_id: uuid.UUID) -> bool:
    """Delete the connection with other_user_id if there is one. Idempotent; returns whether a row went."""
    with transaction(db):
        conn = find_connection(db, actor.user_id, other_user_id)
        if conn is None:
            return False
        db.delete(conn)
    logger.info("Connection removed: %s <-> %s", actor.user_id, other_user_id)
    return True


def check_status(db: Session, actor: Actor, other_user_id: uuid.UUID) -> ConnectionStatus:
    """connected, else pending (with direction), else none. Terminal requests still report request_status."""
    if find_connection(db, actor.user_id, other_user_id):
        return ConnectionStatus(status="connected")
    req = find_request(db, actor.user_id, other_user_id)
    if req is None:
        return ConnectionStatus(status="none")
    if req.status == PENDING:
        direction = "outgoing" if req.from_user_id == actor.user_id else "incoming"
        return ConnectionStatus(status="pending", request_status=req.status, direction=direction, request_id=req.id)
    return ConnectionStatus(status="none", request_status=req.status, request_id=req.id)


def _connected_user_ids(user_id: uuid.UUID):
    return (
        select(Connection.user_b_id).where(Connection.user_a_id == user_id),
        select(Connection.user_a_id).where(Connection.user_b_id == user_id),
    )


def list_suggestions(
    db: Session,
    actor: Actor,
    limit: int = 10,
    university_id: str | None = None,
    ranking: RankingStrategy | None = None,
    pool_size: int = 200,
) -> list[User]:
    """
    Active alumni of the actor's university (or the superadmin's chosen scope) that the actor is
    not connected to and has no pending outbound request to. Order comes from the ranking strategy.
    """
    scope = resolve_tenant_scope(actor, university_id)
    ranking = ranking or get_ranking_strategy()
    as_b, as_a = _connected_user_ids(actor.user_id)
    pending_out = select(ConnectionRequest.to_user_id).where(
        ConnectionRequest.from_user_id == actor.user_id, ConnectionRequest.status == PENDING
    )
    stmt = select(User).where(
        User.id != actor.user_id,
        User.status == UserStatus.ACTIVE.value,
        User.role == UserRole.ALUMNI.value,
        User.id.not_in(as_b),
        User.id.not_in(as_a),
        User.id.not_in(pending_out),
    )
    if scope is not None:
        stmt = stmt.where(User.university_id == scope)
    stmt = stmt.order_by(User.created_at.desc(), User.id).limit(max(pool_size, limit))
    candidates: Sequence[User] = db.execute(stmt).scalars().all()
    actor_user = db.get(User, actor.user_id)
    return ranking.order_suggestions(actor_user, candidates)[:limit]


def list_connections(
    db: Session,
    actor: Actor,
    page: int = 1,
    page_size: int = 20,
    search: str | None = None,
) -> tuple[list[tuple[Connection, User]], int]:
    """The actor's connections as (connection, other user) newest first, plus total."""
    other = or_(
        and_(Connection.user_a_id == actor.user_id, User.id == Connection.user_b_id),
        and_(Connection.user_b_id == actor.user_id, User.id == Connection.user_a_id),
    )
    conditions = [User.status == UserStatus.ACTIVE.value]
    if search and search.strip():
        conditions.append(User.name.ilike(f"%{search.strip()}%"))
    total = db.execute(
        select(func.count()).select_from(Connection).join(User, other).where(*conditions)
    ).scalar_one()
    rows = db.execute(
        select(Connection, User)
        .join(User, other)
        .where(*conditions)
        .order_by(Connection.connected_at.desc(), User.id)
        .limit(page_size)
        .offset((page - 1) * page_size)
    ).all()
    return [(c, u) for c, u in rows], total


def list_received_requests(db: Session, actor: Actor) -> list[ConnectionRequest]:
    return list(
        db.execute(
            select(ConnectionRequest)
            .options(selectinload(ConnectionRequest.from_user))
            .where(ConnectionRequest.to_user_id == actor.user_id, ConnectionRequest.status == PENDING)
            .order_by(ConnectionRequest.created_at.desc(), ConnectionRequest.id)
        ).scalars().all()
    )


def list_sent_requests(db: Session, actor: Actor) -> list[ConnectionRequest]:
    return list(
        db.execute(
            select(ConnectionRequest)
            .options(selectinload(ConnectionRequest.to_user))
            .where(ConnectionRequest.from_user_id == actor.user_id, ConnectionRequest.status == PENDING)
            .order_by(ConnectionRequest.created_at.desc(), ConnectionRequest.id)
        ).scalars().all()
    )
