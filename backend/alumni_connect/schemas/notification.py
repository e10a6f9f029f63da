"""
Notification schemas.
"""
from datetime import datetime
from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    avatar: str | None = None
    is_read: bool
    action_url: str | None = None
    related_id: str | None = None
    created_at: datetime | None = None
    time: str = ""  # "5m ago"


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    total: int
    unread_count: int
    page: int
    page_size: int


class UnreadCountResponse(BaseModel):
    unread_count: int
