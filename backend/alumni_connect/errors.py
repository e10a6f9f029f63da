"""
Domain errors raised by services. Routers never build HTTP errors for these;
main.py renders any DomainError as {"detail": message, "code": code}.
"""


class DomainError(Exception):
    """Base class: stable machine-readable code, message, HTTP status."""

    code = "error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(DomainError):
    """Credential missing/invalid/expired, or account or university disabled."""

    code = "unauthorized"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(DomainError):
    """Authenticated, but no capability for the target tenant or resource."""

    code = "forbidden"
    status_code = 403
    default_message = "Access denied"


class NotFound(DomainError):
    """Entity missing or not in an actionable state for the actor."""

    code = "not_found"
    status_code = 404
    default_message = "Not found"


class Conflict(DomainError):
    """Duplicate request/connection or already-processed request."""

    code = "conflict"
    status_code = 409
    default_message = "Conflict"


class InvalidOperation(DomainError):
    """Semantically nonsensical input, e.g. connecting to yourself."""

    code = "invalid_operation"
    status_code = 400
    default_message = "Invalid operation"


class StorageFailure(DomainError):
    """Query or transaction failed. Message is generic; details go to the log."""

    code = "storage_failure"
    status_code = 500
    default_message = "Storage operation failed"
