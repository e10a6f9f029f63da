"""
Public university directory (login screen branding) and the superadmin tenant console.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from alumni_connect.database import get_db
from alumni_connect.schemas.university import (
    UniversityAdminResponse,
    UniversityCreate,
    UniversityResponse,
    UniversityUpdate,
)
from alumni_connect.services import universities as university_service
from alumni_connect.services.identity import Actor
from alumni_connect.api.deps import require_superadmin

router = APIRouter(prefix="/universities", tags=["universities"])
superadmin_router = APIRouter(prefix="/superadmin/universities", tags=["superadmin"])


@router.get("", response_model=list[UniversityResponse])
def list_universities(db: Session = Depends(get_db)):
    """Enabled universities only."""
    return [UniversityResponse.model_validate(u) for u in university_service.list_enabled(db)]


@router.get("/{university_id}", response_model=UniversityResponse)
def get_university(university_id: str, db: Session = Depends(get_db)):
    return UniversityResponse.model_validate(university_service.get_university(db, university_id))


def _admin_response(uni, user_count: int = 0) -> UniversityAdminResponse:
    return UniversityAdminResponse(
        id=uni.id,
        name=uni.name,
        logo=uni.logo,
        colors=uni.colors,
        is_enabled=uni.is_enabled,
        user_count=user_count,
    )


@superadmin_router.get("", response_model=list[UniversityAdminResponse])
def list_all_universities(actor: Actor = Depends(require_superadmin), db: Session = Depends(get_db)):
    return [_admin_response(u, n) for u, n in university_service.list_all(db, actor)]


@superadmin_router.post("", response_model=UniversityAdminResponse, status_code=status.HTTP_201_CREATED)
def create_university(
    data: UniversityCreate,
    actor: Actor = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    uni = university_service.create_university(
        db, actor, university_id=data.id, name=data.name, logo=data.logo, colors=data.colors
    )
    return _admin_response(uni)


@superadmin_router.put("/{university_id}", response_model=UniversityAdminResponse)
def update_university(
    university_id: str,
    data: UniversityUpdate,
    actor: Actor = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    uni = university_service.update_university(db, actor, university_id, data.model_dump(exclude_unset=True))
    return _admin_response(uni, len(uni.users))


@superadmin_router.post("/{university_id}/toggle-status", response_model=UniversityAdminResponse)
def toggle_university_status(
    university_id: str,
    actor: Actor = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    uni = university_service.toggle_status(db, actor, university_id)
    return _admin_response(uni, len(uni.users))


@superadmin_router.delete("/{university_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_university(
    university_id: str,
    actor: Actor = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    """Refused with 409 while the university still has users."""
    university_service.delete_university(db, actor, university_id)
