"""
Relationship engine: request lifecycle, canonical pairs, permanent block, suggestions, notifications.
Service-level; every call runs as an explicit actor.
"""
import threading
import uuid

import pytest
from sqlalchemy import func, select

from alumni_connect import metrics
from alumni_connect.database import SessionLocal
from alumni_connect.errors import Conflict, Forbidden, InvalidOperation, NotFound
from alumni_connect.models.connection import Connection, ConnectionRequest, canonical_pair, pair_key
from alumni_connect.models.enums import NotificationType, UserRole, UserStatus
from alumni_connect.models.notification import Notification
from alumni_connect.services import connections as svc
from alumni_connect.services.ranking import ProfileRanking, RandomRanking
from conftest import actor, make_university, make_user


@pytest.fixture
def people(db):
    make_university(db, "mit")
    make_university(db, "cmu")
    a = make_user(db, "mit", name="Alice")
    b = make_user(db, "mit", name="Bob")
    c = make_user(db, "cmu", name="Carol")
    return a, b, c


def _count(db, model, *where):
    return db.execute(select(func.count()).select_from(model).where(*where)).scalar_one()


def test_canonical_pair_is_order_independent():
    x, y = uuid.uuid4(), uuid.uuid4()
    assert canonical_pair(x, y) == canonical_pair(y, x)
    assert pair_key(x, y) == pair_key(y, x)


def test_send_accept_creates_single_connection_and_notifications(db, people):
    a, b, _ = people
    req = svc.send_request(db, actor(a), b.id)
    assert req.status == "pending"
    n = db.execute(select(Notification).where(Notification.user_id == b.id)).scalars().all()
    assert [x.type for x in n] == [NotificationType.CONNECTION_REQUEST.value]
    assert n[0].related_id == req.id

    conn = svc.accept_request(db, actor(b), req.id)
    assert {conn.user_a_id, conn.user_b_id} == {a.id, b.id}
    assert _count(db, Connection) == 1
    assert db.get(ConnectionRequest, req.id).status == "accepted"
    accepted = db.execute(
        select(Notification).where(
            Notification.user_id == a.id, Notification.type == NotificationType.CONNECTION_ACCEPTED.value
        )
    ).scalars().all()
    assert len(accepted) == 1

    assert svc.check_status(db, actor(a), b.id).is_connected
    assert svc.check_status(db, actor(b), a.id).is_connected


def test_send_to_self_is_invalid(db, people):
    a, _, _ = people
    with pytest.raises(InvalidOperation):
        svc.send_request(db, actor(a), a.id)


def test_send_to_unknown_or_inactive_user_is_not_found(db, people):
    a, b, _ = people
    with pytest.raises(NotFound):
        svc.send_request(db, actor(a), uuid.uuid4())
    b.status = UserStatus.DEACTIVATED.value
    db.commit()
    with pytest.raises(NotFound):
        svc.send_request(db, actor(a), b.id)


def test_send_across_universities_is_forbidden(db, people):
    a, _, c = people
    with pytest.raises(Forbidden):
        svc.send_request(db, actor(a), c.id)
    assert _count(db, ConnectionRequest) == 0


def test_superadmin_may_connect_across_universities(db, people):
    _, _, c = people
    boss = make_user(db, "mit", role=UserRole.SUPERADMIN.value)
    req = svc.send_request(db, actor(boss), c.id)
    assert req.to_user_id == c.id


def test_duplicate_request_either_direction_conflicts(db, people):
    a, b, _ = people
    svc.send_request(db, actor(a), b.id)
    with pytest.raises(Conflict):
        svc.send_request(db, actor(a), b.id)
    with pytest.raises(Conflict):
        svc.send_request(db, actor(b), a.id)
    assert _count(db, ConnectionRequest) == 1
    # the failed attempts staged no notification
    assert _count(db, Notification) == 1


def test_second_accept_is_not_found(db, people):
    a, b, _ = people
    req = svc.send_request(db, actor(a), b.id)
    svc.accept_request(db, actor(b), req.id)
    before = metrics.get("request_transition_conflicts_total")
    with pytest.raises(NotFound):
        svc.accept_request(db, actor(b), req.id)
    with pytest.raises(NotFound):
        svc.reject_request(db, actor(b), req.id)
    assert metrics.get("request_transition_conflicts_total") == before + 2
    assert _count(db, Connection) == 1


def test_only_recipient_can_accept(db, people):
    a, b, _ = people
    req = svc.send_request(db, actor(a), b.id)
    with pytest.raises(NotFound):
        svc.accept_request(db, actor(a), req.id)
    assert db.get(ConnectionRequest, req.id).status == "pending"


def test_reject_blocks_future_requests(db, people):
    a, b, _ = people
    req = svc.send_request(db, actor(a), b.id)
    rejected = svc.reject_request(db, actor(b), req.id)
    assert rejected.status == "rejected"
    assert _count(db, Connection) == 0
    with pytest.raises(Conflict):
        svc.send_request(db, actor(a), b.id)
    with pytest.raises(Conflict):
        svc.send_request(db, actor(b), a.id)
    st = svc.check_status(db, actor(a), b.id)
    assert st.status == "none"
    assert st.request_status == "rejected"


def test_remove_connection_is_idempotent(db, people):
    a, b, _ = people
    req = svc.send_request(db, actor(a), b.id)
    svc.accept_request(db, actor(b), req.id)
    assert svc.remove_connection(db, actor(b), a.id) is True
    assert svc.remove_connection(db, actor(a), b.id) is False
    assert _count(db, Connection) == 0
    assert not svc.check_status(db, actor(a), b.id).is_connected


def test_check_status_pending_direction(db, people):
    a, b, _ = people
    req = svc.send_request(db, actor(a), b.id)
    out = svc.check_status(db, actor(a), b.id)
    inc = svc.check_status(db, actor(b), a.id)
    assert (out.status, out.direction, out.request_id) == ("pending", "outgoing", req.id)
    assert (inc.status, inc.direction) == ("pending", "incoming")
    assert svc.check_status(db, actor(a), uuid.uuid4()).status == "none"


def test_received_and_sent_lists_only_pending(db, people):
    a, b, _ = people
    d = make_user(db, "mit", name="Dan")
    r1 = svc.send_request(db, actor(a), b.id)
    svc.send_request(db, actor(d), b.id)
    assert {r.from_user_id for r in svc.list_received_requests(db, actor(b))} == {a.id, d.id}
    svc.accept_request(db, actor(b), r1.id)
    assert [r.from_user_id for r in svc.list_received_requests(db, actor(b))] == [d.id]
    assert svc.list_sent_requests(db, actor(a)) == []
    assert [r.to_user_id for r in svc.list_sent_requests(db, actor(d))] == [b.id]


def test_list_connections_with_search(db, people):
    a, b, _ = people
    d = make_user(db, "mit", name="Dora")
    for other in (b, d):
        req = svc.send_request(db, actor(a), other.id)
        svc.accept_request(db, actor(other), req.id)
    rows, total = svc.list_connections(db, actor(a))
    assert total == 2
    assert {u.id for _, u in rows} == {b.id, d.id}
    rows, total = svc.list_connections(db, actor(a), search="dor")
    assert total == 1
    assert rows[0][1].id == d.id
    rows, total = svc.list_connections(db, actor(b))
    assert [u.id for _, u in rows] == [a.id]


def test_suggestions_exclude_self_connected_pending_and_other_tenants(db, people):
    a, b, c = people
    d = make_user(db, "mit", name="Dan")
    e = make_user(db, "mit", name="Eve")
    gone = make_user(db, "mit", name="Gone")
    gone.status = UserStatus.DEACTIVATED.value
    admin = make_user(db, "mit", role=UserRole.ADMIN.value)
    db.commit()
    req = svc.send_request(db, actor(a), b.id)
    svc.accept_request(db, actor(b), req.id)
    svc.send_request(db, actor(a), d.id)

    for ranking in (RandomRanking(), ProfileRanking()):
        ids = {u.id for u in svc.list_suggestions(db, actor(a), limit=10, ranking=ranking)}
        assert ids == {e.id}
        assert a.id not in ids and c.id not in ids and gone.id not in ids and admin.id not in ids


def test_incoming_pending_request_sender_still_suggested(db, people):
    a, b, _ = people
    svc.send_request(db, actor(b), a.id)
    ids = {u.id for u in svc.list_suggestions(db, actor(a), ranking=ProfileRanking())}
    assert b.id in ids


def test_suggestions_respect_limit(db, people):
    a, _, _ = people
    for i in range(5):
        make_user(db, "mit", name=f"Extra {i}")
    assert len(svc.list_suggestions(db, actor(a), limit=3, ranking=ProfileRanking())) == 3


def test_concurrent_senders_create_one_request(db, people):
    a, b, _ = people
    alice, bob = actor(a), actor(b)
    senders = [(alice, b.id), (bob, a.id)] * 3
    barrier = threading.Barrier(len(senders))
    outcomes = []
    lock = threading.Lock()

    def worker(sender, target):
        session = SessionLocal()
        try:
            barrier.wait()
            svc.send_request(session, sender, target)
            result = "ok"
        except Conflict:
            result = "conflict"
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=s) for s in senders]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict"] * 5 + ["ok"]
    assert _count(db, ConnectionRequest) == 1
    assert _count(db, Notification) == 1
