"""
Admin console: list users of the admin's university and (de)activate them.
A superadmin may pass university_id (or "*" for every university).
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from alumni_connect.database import get_db
from alumni_connect.models.enums import UserStatus
from alumni_connect.schemas.user import UserListResponse, UserResponse
from alumni_connect.services import users as user_service
from alumni_connect.services.identity import Actor
from alumni_connect.api.deps import Page, get_page, parse_id, require_admin
from alumni_connect.api.serializers import user_response

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
def list_users(
    search: str | None = Query(None),
    role: str | None = Query(None),
    is_mentor: bool | None = Query(None),
    status: str | None = Query(None),
    university_id: str | None = Query(None),
    paging: Page = Depends(get_page),
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users, total = user_service.list_users(
        db,
        actor,
        search=search,
        role=role,
        is_mentor=is_mentor,
        status=status,
        page=paging.page,
        page_size=paging.page_size,
        university_id=university_id,
    )
    return UserListResponse(
        items=[user_response(u) for u in users], total=total, page=paging.page, page_size=paging.page_size
    )


@router.post("/users/{user_id}/deactivate", response_model=UserResponse)
def deactivate_user(user_id: str, actor: Actor = Depends(require_admin), db: Session = Depends(get_db)):
    user = user_service.set_user_status(db, actor, parse_id(user_id, "User"), UserStatus.DEACTIVATED)
    return user_response(user)


@router.post("/users/{user_id}/activate", response_model=UserResponse)
def activate_user(user_id: str, actor: Actor = Depends(require_admin), db: Session = Depends(get_db)):
    user = user_service.set_user_status(db, actor, parse_id(user_id, "User"), UserStatus.ACTIVE)
    return user_response(user)
