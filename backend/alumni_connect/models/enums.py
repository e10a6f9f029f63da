"""
String enums stored in VARCHAR columns (each column also has a CHECK constraint).
Status enums replace boolean is_active flags so new states need no schema change.
"""
from enum import Enum


class UserRole(str, Enum):
    ALUMNI = "alumni"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class MentorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RequestStatus(str, Enum):
    """Connection and mentorship requests: pending -> accepted | rejected (both terminal)."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    CONNECTION_REQUEST = "connection_request"
    CONNECTION_ACCEPTED = "connection_accepted"
    MENTORSHIP_REQUEST = "mentorship_request"
    MENTORSHIP_ACCEPTED = "mentorship_accepted"


def check_in(column: str, enum_cls: type[Enum]) -> str:
    """SQL for CHECK (column IN (...)) over the enum's values."""
    values = ", ".join(f"'{m.value}'" for m in enum_cls)
    return f"{column} IN ({values})"
