"""
Connections API: list, suggestions, send/accept/reject requests, remove, check status.
All calls act as the authenticated actor; tenant rules are enforced in services.connections.
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from alumni_connect.config import settings
from alumni_connect.database import get_db
from alumni_connect.models.user import User
from alumni_connect.schemas.connection import (
    ConnectionListResponse,
    ConnectionRequestCreate,
    ConnectionRequestResponse,
    ConnectionResponse,
    ConnectionStatusResponse,
    SuggestionListResponse,
)
from alumni_connect.services import connections as connection_service
from alumni_connect.services.identity import Actor
from alumni_connect.services.ranking import RankingStrategy
from alumni_connect.api.deps import Page, get_current_actor, get_page, get_ranking, parse_id
from alumni_connect.api.serializers import connection_response, request_response, user_card

router = APIRouter(prefix="/connections", tags=["connections"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ConnectionListResponse)
def list_connections(
    search: str | None = Query(None),
    paging: Page = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    rows, total = connection_service.list_connections(
        db, actor, page=paging.page, page_size=paging.page_size, search=search
    )
    return ConnectionListResponse(
        items=[connection_response(c, u) for c, u in rows],
        total=total,
        page=paging.page,
        page_size=paging.page_size,
    )


@router.get("/suggestions", response_model=SuggestionListResponse)
def suggestions(
    limit: int = Query(10, ge=1, le=50),
    university_id: str | None = Query(None),
    actor: Actor = Depends(get_current_actor),
    ranking: RankingStrategy = Depends(get_ranking),
    db: Session = Depends(get_db),
):
    """People the actor may want to connect with. Order is a hint, not a guarantee."""
    users = connection_service.list_suggestions(
        db,
        actor,
        limit=limit,
        university_id=university_id,
        ranking=ranking,
        pool_size=settings.suggestion_pool_size,
    )
    return SuggestionListResponse(connections=[user_card(u) for u in users], total=len(users))


@router.post("/request", response_model=ConnectionRequestResponse, status_code=status.HTTP_201_CREATED)
def send_request(
    data: ConnectionRequestCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    req = connection_service.send_request(db, actor, parse_id(data.to_user_id, "User"))
    return request_response(req)


@router.get("/requests/received", response_model=list[ConnectionRequestResponse])
def received_requests(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return [request_response(r, r.from_user) for r in connection_service.list_received_requests(db, actor)]


@router.get("/requests/sent", response_model=list[ConnectionRequestResponse])
def sent_requests(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return [request_response(r, r.to_user) for r in connection_service.list_sent_requests(db, actor)]


@router.put("/requests/{request_id}/accept", response_model=ConnectionResponse)
def accept_request(request_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    conn = connection_service.accept_request(db, actor, parse_id(request_id, "Request"))
    other = db.get(User, conn.other_user_id(actor.user_id))
    return connection_response(conn, other)


@router.put("/requests/{request_id}/reject", response_model=ConnectionRequestResponse)
def reject_request(request_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return request_response(connection_service.reject_request(db, actor, parse_id(request_id, "Request")))


@router.get("/check/{user_id}", response_model=ConnectionStatusResponse)
def check_connection(user_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    st = connection_service.check_status(db, actor, parse_id(user_id, "User"))
    return ConnectionStatusResponse(
        is_connected=st.is_connected,
        status=st.status,
        request_status=st.request_status,
        direction=st.direction,
        request_id=str(st.request_id) if st.request_id else None,
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_connection(user_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Idempotent: removing a connection that does not exist is not an error."""
    connection_service.remove_connection(db, actor, parse_id(user_id, "User"))
