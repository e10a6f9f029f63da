"""
Auth routes: register (alumni of an enabled university), login (JWT), GET /auth/me.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from alumni_connect.database import get_db
from alumni_connect.models.enums import UserRole
from alumni_connect.models.user import User
from alumni_connect.schemas.auth import RegisterRequest, LoginRequest, TokenResponse
from alumni_connect.schemas.university import UniversityResponse
from alumni_connect.schemas.user import UserResponse
from alumni_connect.services import universities as university_service
from alumni_connect.services.identity import Actor, authenticate, create_user, issue_token
from alumni_connect.api.deps import get_current_actor
from alumni_connect.api.serializers import user_response

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _token_response(user: User, db: Session) -> TokenResponse:
    university = None
    if user.university is not None:
        university = UniversityResponse.model_validate(user.university)
    universities = None
    if user.is_superadmin:
        universities = [UniversityResponse.model_validate(u) for u in university_service.list_enabled(db)]
    return TokenResponse(
        access_token=issue_token(user),
        user=user_response(user),
        university=university,
        universities=universities,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Self-registration; role is always alumni."""
    user = create_user(
        db,
        email=data.email,
        password=data.password,
        name=data.name,
        role=UserRole.ALUMNI.value,
        university_id=data.university_id,
        graduation_year=data.graduation_year,
        major=data.major,
    )
    return _token_response(user, db)


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Login with email/password; returns JWT plus branding (and the university list for a superadmin)."""
    user = authenticate(db, data.email, data.password)
    logger.info("Login: %s role=%s", user.id, user.role)
    return _token_response(user, db)


@router.get("/me", response_model=UserResponse)
def me(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return user_response(db.get(User, actor.user_id))
