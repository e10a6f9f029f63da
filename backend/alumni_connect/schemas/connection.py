"""
Connection and connection-request schemas.
"""
from datetime import datetime
from typing import Literal
from pydantic import BaseModel

from alumni_connect.schemas.user import UserCard


class ConnectionRequestCreate(BaseModel):
    to_user_id: str


class ConnectionRequestResponse(BaseModel):
    id: str
    from_user_id: str
    to_user_id: str
    status: str
    created_at: datetime | None = None
    # the other party: sender for received requests, recipient for sent ones
    user: UserCard | None = None


class ConnectionResponse(BaseModel):
    id: str
    user: UserCard
    connected_at: datetime | None = None


class ConnectionListResponse(BaseModel):
    items: list[ConnectionResponse]
    total: int
    page: int
    page_size: int


class ConnectionStatusResponse(BaseModel):
    is_connected: bool
    status: Literal["connected", "pending", "none"]
    request_status: str | None = None
    direction: Literal["outgoing", "incoming"] | None = None
    request_id: str | None = None


class SuggestionListResponse(BaseModel):
    connections: list[UserCard]
    total: int
