"""
Shared dependencies: get_current_actor from Bearer token, role gates, paging, ranking strategy.
Every route that touches tenant data takes an Actor and passes it to the service layer.
"""
import logging
import uuid
from dataclasses import dataclass

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from alumni_connect.config import settings
from alumni_connect.database import get_db
from alumni_connect.errors import Forbidden, NotFound, Unauthorized
from alumni_connect.services.identity import Actor, resolve_actor
from alumni_connect.services.ranking import RankingStrategy, get_ranking_strategy

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Actor:
    """Require valid Bearer token; return the Actor or 401."""
    if not credentials or not (getattr(credentials, "credentials", None) or "").strip():
        logger.debug("Auth failed: no Bearer token in request")
        raise Unauthorized("Not authenticated. Send header: Authorization: Bearer <token>")
    return resolve_actor(db, credentials.credentials)


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not (actor.is_admin or actor.is_superadmin):
        raise Forbidden("Admin access required")
    return actor


def require_superadmin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_superadmin:
        raise Forbidden("Super admin access required")
    return actor


def get_ranking() -> RankingStrategy:
    """Overridable in tests via app.dependency_overrides[get_ranking]."""
    return get_ranking_strategy()


@dataclass
class Page:
    page: int
    page_size: int


def get_page(
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
) -> Page:
    size = min(page_size or settings.default_page_size, settings.max_page_size)
    return Page(page=page, page_size=size)


def parse_id(value: str, what: str = "Resource") -> uuid.UUID:
    """Path/body id -> UUID; malformed ids are simply not found."""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFound(f"{what} not found")
