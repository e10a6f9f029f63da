"""
Mentors API: directory, own profile, mentorship requests.
Static paths (/me, /my-requests, /incoming-requests, /requests/...) are declared before /{mentor_id}.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from alumni_connect.database import get_db
from alumni_connect.schemas.mentor import (
    MentorListResponse,
    MentorProfileUpdate,
    MentorResponse,
    MentorshipRequestCreate,
    MentorshipRequestResponse,
)
from alumni_connect.services import mentorship as mentorship_service
from alumni_connect.services.identity import Actor
from alumni_connect.services.ranking import MAX_SCORE, RankingStrategy
from alumni_connect.api.deps import Page, get_current_actor, get_page, get_ranking, parse_id
from alumni_connect.api.serializers import mentor_response, mentorship_request_response

router = APIRouter(prefix="/mentors", tags=["mentors"])


@router.get("", response_model=MentorListResponse)
def list_mentors(
    expertise: str | None = Query(None),
    availability: str | None = Query(None),
    search: str | None = Query(None),
    university_id: str | None = Query(None),
    paging: Page = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    ranking: RankingStrategy = Depends(get_ranking),
    db: Session = Depends(get_db),
):
    rows, total = mentorship_service.list_mentors(
        db,
        actor,
        expertise=expertise,
        availability=availability,
        search=search,
        page=paging.page,
        page_size=paging.page_size,
        university_id=university_id,
        ranking=ranking,
    )
    return MentorListResponse(
        items=[mentor_response(m, score) for m, score in rows],
        total=total,
        page=paging.page,
        page_size=paging.page_size,
    )


@router.get("/me", response_model=MentorResponse)
def my_profile(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return mentor_response(mentorship_service.get_my_profile(db, actor), MAX_SCORE)


@router.put("/me", response_model=MentorResponse)
def update_my_profile(
    data: MentorProfileUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    mentor = mentorship_service.update_my_profile(db, actor, data.model_dump(exclude_unset=True))
    return mentor_response(mentor, MAX_SCORE)


@router.get("/my-requests", response_model=list[MentorshipRequestResponse])
def my_requests(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Requests the actor sent as mentee, any status."""
    return [mentorship_request_response(r) for r in mentorship_service.list_my_requests(db, actor)]


@router.get("/incoming-requests", response_model=list[MentorshipRequestResponse])
def incoming_requests(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return [mentorship_request_response(r) for r in mentorship_service.list_incoming_requests(db, actor)]


@router.put("/requests/{request_id}/accept", response_model=MentorshipRequestResponse)
def accept_request(request_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    req = mentorship_service.accept_mentorship(db, actor, parse_id(request_id, "Request"))
    return mentorship_request_response(req)


@router.put("/requests/{request_id}/reject", response_model=MentorshipRequestResponse)
def reject_request(request_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    req = mentorship_service.reject_mentorship(db, actor, parse_id(request_id, "Request"))
    return mentorship_request_response(req)


@router.get("/{mentor_id}", response_model=MentorResponse)
def get_mentor(
    mentor_id: str,
    actor: Actor = Depends(get_current_actor),
    ranking: RankingStrategy = Depends(get_ranking),
    db: Session = Depends(get_db),
):
    mentor, score = mentorship_service.get_mentor(db, actor, parse_id(mentor_id, "Mentor"), ranking=ranking)
    return mentor_response(mentor, score)


@router.post("/{mentor_id}/request", response_model=MentorshipRequestResponse, status_code=status.HTTP_201_CREATED)
def request_mentorship(
    mentor_id: str,
    data: MentorshipRequestCreate | None = None,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    message = data.message if data is not None else None
    req = mentorship_service.request_mentorship(db, actor, parse_id(mentor_id, "Mentor"), message=message)
    return mentorship_request_response(req)
