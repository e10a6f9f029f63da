"""
Self-service user routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from alumni_connect.database import get_db
from alumni_connect.schemas.user import ToggleMentorResponse
from alumni_connect.services import mentorship as mentorship_service
from alumni_connect.services.identity import Actor
from alumni_connect.api.deps import get_current_actor

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/me/toggle-mentor", response_model=ToggleMentorResponse)
def toggle_mentor(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Become a mentor (creates or reactivates the profile) or stop being one."""
    user, mentor = mentorship_service.toggle_mentor(db, actor)
    return ToggleMentorResponse(
        is_mentor=user.is_mentor,
        mentor_id=str(mentor.id) if mentor is not None and user.is_mentor else None,
    )
