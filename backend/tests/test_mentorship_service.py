"""
Mentorship engine: toggle, profile edits, directory filters, request lifecycle and mentees_count.
"""
import threading
import uuid

import pytest
from sqlalchemy import select

from alumni_connect.database import SessionLocal
from alumni_connect.errors import Conflict, Forbidden, InvalidOperation, NotFound
from alumni_connect.models.enums import NotificationType, UserRole
from alumni_connect.models.mentor import Mentor, MentorshipRequest
from alumni_connect.models.notification import Notification
from alumni_connect.services import mentorship as svc
from alumni_connect.services.identity import ALL_TENANTS
from alumni_connect.services.ranking import MAX_SCORE, MIN_SCORE, ProfileRanking
from conftest import actor, make_mentor, make_university, make_user


@pytest.fixture
def campus(db):
    make_university(db, "mit")
    make_university(db, "cmu")
    mentor_user = make_user(db, "mit", name="Margaret", major="Computer Science")
    mentor = make_mentor(
        db, mentor_user, expertise=["Python", "Machine Learning"], title="Engineer", years_experience=6
    )
    mentee = make_user(db, "mit", name="Mia", major="Python")
    return mentor_user, mentor, mentee


def test_toggle_creates_then_deactivates_then_reactivates(db):
    make_university(db, "mit")
    u = make_user(db, "mit")
    user, mentor = svc.toggle_mentor(db, actor(u))
    assert user.is_mentor and mentor.status == "active"
    first_id = mentor.id
    user, mentor = svc.toggle_mentor(db, actor(u))
    assert not user.is_mentor and mentor.status == "inactive"
    user, mentor = svc.toggle_mentor(db, actor(u))
    assert user.is_mentor and mentor.status == "active"
    assert mentor.id == first_id
    assert len(db.execute(select(Mentor).where(Mentor.user_id == u.id)).scalars().all()) == 1


def test_update_profile_partial_and_expertise_dedupe(db, campus):
    mentor_user, mentor, _ = campus
    updated = svc.update_my_profile(
        db, actor(mentor_user), {"company": "Acme", "expertise": ["python", "Go", " go ", ""], "title": None}
    )
    assert updated.company == "Acme"
    assert updated.title == "Engineer"
    assert sorted(t.lower() for t in updated.expertise) == ["go", "python"]


def test_profile_requires_mentor(db, campus):
    _, _, mentee = campus
    with pytest.raises(NotFound):
        svc.get_my_profile(db, actor(mentee))


def test_request_accept_increments_count_once(db, campus):
    mentor_user, mentor, mentee = campus
    req = svc.request_mentorship(db, actor(mentee), mentor.id, message="Hi")
    assert req.status == "pending"
    n = db.execute(select(Notification).where(Notification.user_id == mentor_user.id)).scalars().one()
    assert n.type == NotificationType.MENTORSHIP_REQUEST.value

    accepted = svc.accept_mentorship(db, actor(mentor_user), req.id)
    assert accepted.status == "accepted"
    db.refresh(mentor)
    assert mentor.mentees_count == 1
    with pytest.raises(NotFound):
        svc.accept_mentorship(db, actor(mentor_user), req.id)
    db.refresh(mentor)
    assert mentor.mentees_count == 1
    got = db.execute(
        select(Notification).where(
            Notification.user_id == mentee.id, Notification.type == NotificationType.MENTORSHIP_ACCEPTED.value
        )
    ).scalars().all()
    assert len(got) == 1


def test_reject_leaves_count_and_blocks_rerequest(db, campus):
    mentor_user, mentor, mentee = campus
    req = svc.request_mentorship(db, actor(mentee), mentor.id)
    assert svc.reject_mentorship(db, actor(mentor_user), req.id).status == "rejected"
    db.refresh(mentor)
    assert mentor.mentees_count == 0
    with pytest.raises(Conflict):
        svc.request_mentorship(db, actor(mentee), mentor.id)


def test_duplicate_request_conflicts(db, campus):
    _, mentor, mentee = campus
    svc.request_mentorship(db, actor(mentee), mentor.id)
    with pytest.raises(Conflict):
        svc.request_mentorship(db, actor(mentee), mentor.id)
    assert len(db.execute(select(MentorshipRequest)).scalars().all()) == 1


def test_request_edge_cases(db, campus):
    mentor_user, mentor, _ = campus
    with pytest.raises(InvalidOperation):
        svc.request_mentorship(db, actor(mentor_user), mentor.id)
    with pytest.raises(NotFound):
        svc.request_mentorship(db, actor(mentor_user), uuid.uuid4())
    outsider = make_user(db, "cmu")
    with pytest.raises(Forbidden):
        svc.request_mentorship(db, actor(outsider), mentor.id)


def test_inactive_mentor_cannot_be_requested(db, campus):
    mentor_user, mentor, mentee = campus
    svc.toggle_mentor(db, actor(mentor_user))
    with pytest.raises(NotFound):
        svc.request_mentorship(db, actor(mentee), mentor.id)


def test_only_mentor_owner_can_decide(db, campus):
    _, mentor, mentee = campus
    req = svc.request_mentorship(db, actor(mentee), mentor.id)
    with pytest.raises(Forbidden):
        svc.accept_mentorship(db, actor(mentee), req.id)
    with pytest.raises(NotFound):
        svc.accept_mentorship(db, actor(mentee), uuid.uuid4())


def test_list_mentors_filters(db, campus):
    mentor_user, mentor, mentee = campus
    other = make_mentor(db, make_user(db, "mit", name="Oscar"), expertise=["Finance"], availability="weekends")
    make_mentor(db, make_user(db, "cmu", name="Cmu Mentor"), expertise=["Python"])

    rows, total = svc.list_mentors(db, actor(mentee), ranking=ProfileRanking())
    assert total == 2
    assert {m.id for m, _ in rows} == {mentor.id, other.id}

    rows, total = svc.list_mentors(db, actor(mentee), expertise="PYTHON", ranking=ProfileRanking())
    assert [m.id for m, _ in rows] == [mentor.id]
    rows, _ = svc.list_mentors(db, actor(mentee), availability="weekends", ranking=ProfileRanking())
    assert [m.id for m, _ in rows] == [other.id]
    rows, _ = svc.list_mentors(db, actor(mentee), search="marg", ranking=ProfileRanking())
    assert [m.id for m, _ in rows] == [mentor.id]

    with pytest.raises(Forbidden):
        svc.list_mentors(db, actor(mentee), university_id="cmu")


def test_list_mentors_superadmin_scope(db, campus):
    make_mentor(db, make_user(db, "cmu", name="Cmu Mentor"), expertise=["Python"])
    boss = make_user(db, None, role=UserRole.SUPERADMIN.value)
    _, total = svc.list_mentors(db, actor(boss), university_id=ALL_TENANTS, ranking=ProfileRanking())
    assert total == 2
    _, total = svc.list_mentors(db, actor(boss), university_id="cmu", ranking=ProfileRanking())
    assert total == 1


def test_match_scores(db, campus):
    mentor_user, mentor, mentee = campus
    rows, _ = svc.list_mentors(db, actor(mentee), ranking=ProfileRanking())
    scores = {m.id: s for m, s in rows}
    # 70 + 6 years * 2 + 14 for the mentee's major in the mentor's expertise
    assert scores[mentor.id] == 96
    assert all(MIN_SCORE <= s <= MAX_SCORE for s in scores.values())
    _, own = svc.get_mentor(db, actor(mentor_user), mentor.id)
    assert own == MAX_SCORE


def test_get_mentor_other_university_not_found(db, campus):
    _, mentor, _ = campus
    outsider = make_user(db, "cmu")
    with pytest.raises(NotFound):
        svc.get_mentor(db, actor(outsider), mentor.id)


def test_request_lists(db, campus):
    mentor_user, mentor, mentee = campus
    req = svc.request_mentorship(db, actor(mentee), mentor.id)
    assert [r.id for r in svc.list_my_requests(db, actor(mentee))] == [req.id]
    assert [r.id for r in svc.list_incoming_requests(db, actor(mentor_user))] == [req.id]
    svc.accept_mentorship(db, actor(mentor_user), req.id)
    assert svc.list_incoming_requests(db, actor(mentor_user)) == []
    assert [r.status for r in svc.list_my_requests(db, actor(mentee))] == ["accepted"]


def test_expertise_update_takes_new_casing(db, campus):
    mentor_user, _, _ = campus
    svc.update_my_profile(db, actor(mentor_user), {"expertise": ["python"]})
    updated = svc.update_my_profile(db, actor(mentor_user), {"expertise": ["Python", "go"]})
    assert sorted(updated.expertise) == ["Python", "go"]


def test_accepting_n_requests_adds_n_mentees(db, campus):
    mentor_user, mentor, first = campus
    mentees = [first] + [make_user(db, "mit", name=f"Mentee {i}") for i in range(2)]
    requests = [svc.request_mentorship(db, actor(m), mentor.id) for m in mentees]
    extra = svc.request_mentorship(db, actor(make_user(db, "mit")), mentor.id)
    for req in requests:
        svc.accept_mentorship(db, actor(mentor_user), req.id)
    svc.reject_mentorship(db, actor(mentor_user), extra.id)
    db.refresh(mentor)
    assert mentor.mentees_count == 3


def test_concurrent_accept_increments_once(db, campus):
    mentor_user, mentor, mentee = campus
    req = svc.request_mentorship(db, actor(mentee), mentor.id)
    request_id, owner = req.id, actor(mentor_user)
    barrier = threading.Barrier(4)
    outcomes = []
    lock = threading.Lock()

    def worker():
        session = SessionLocal()
        try:
            barrier.wait()
            svc.accept_mentorship(session, owner, request_id)
            result = "ok"
        except NotFound:
            result = "not_found"
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["not_found", "not_found", "not_found", "ok"]
    db.refresh(mentor)
    assert mentor.mentees_count == 1
