"""
Notifications API. Every route reads or writes only the actor's own notifications.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from alumni_connect.database import get_db
from alumni_connect.schemas.notification import NotificationListResponse, UnreadCountResponse
from alumni_connect.services import notifications as notification_service
from alumni_connect.services.identity import Actor
from alumni_connect.api.deps import Page, get_current_actor, get_page, parse_id
from alumni_connect.api.serializers import notification_response

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    paging: Page = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    items, total, unread = notification_service.list_notifications(
        db, actor, page=paging.page, page_size=paging.page_size, unread_only=unread_only
    )
    return NotificationListResponse(
        items=[notification_response(n) for n in items],
        total=total,
        unread_count=unread,
        page=paging.page,
        page_size=paging.page_size,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return UnreadCountResponse(unread_count=notification_service.unread_count(db, actor))


@router.put("/read-all")
def mark_all_read(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return {"updated": notification_service.mark_all_read(db, actor)}


@router.delete("/clear-all")
def clear_all(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return {"deleted": notification_service.clear_all(db, actor)}


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(notification_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    notification_service.mark_read(db, actor, parse_id(notification_id, "Notification"))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    notification_service.delete_notification(db, actor, parse_id(notification_id, "Notification"))
