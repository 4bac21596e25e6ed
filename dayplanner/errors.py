"""
Error taxonomy shared by the server routes, the scheduling service and the API client.

Every domain error carries the HTTP status it maps to and a stable machine code,
so the client can map a response back to the same class.
"""

from typing import Any, Dict, Optional


class SchedulingError(Exception):
    """Base class for recoverable domain errors."""

    status_code = 400
    code = "scheduling_error"

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.code, "detail": self.message}
        body.update(self.extra)
        return body


class ValidationError(SchedulingError):
    """Malformed or out-of-range field. Never retried automatically."""

    status_code = 400
    code = "validation_failed"

    def __init__(self, message: str, field: Optional[str] = None, **extra: Any):
        if field is not None:
            extra["field"] = field
        super().__init__(message, **extra)
        self.field = field


class InvalidReferenceError(SchedulingError):
    """A dangling activity_id or category_id."""

    status_code = 400
    code = "invalid_reference"


class OverlapError(SchedulingError):
    status_code = 409
    code = "session_overlap"

    def __init__(self, message: str = "A session already exists in this time slot. Choose a different time or duration.", **extra: Any):
        super().__init__(message, **extra)


class NotFoundError(SchedulingError):
    """Stale id; the caller should refresh its local state."""

    status_code = 404
    code = "not_found"


class ReferentialGuardError(SchedulingError):
    """Delete refused because dependents still reference the row."""

    status_code = 409
    code = "has_dependents"

    def __init__(self, message: str, dependent_count: int, **extra: Any):
        super().__init__(message, dependent_count=dependent_count, **extra)
        self.dependent_count = dependent_count


class DuplicateNameError(SchedulingError):
    status_code = 409
    code = "duplicate_name"


class GridIntegrityError(SchedulingError):
    """Two sessions claim the same slot. Stored data bypassed the overlap check."""

    status_code = 500
    code = "grid_integrity"


class ScheduleBusyError(SchedulingError):
    """The owner-day is locked by another writer for longer than the wait limit. Retry."""

    status_code = 503
    code = "schedule_busy"


class ApiUnavailableError(Exception):
    """Network failure, timeout or 5xx from the Scheduling API. Safe to retry."""

    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiError(Exception):
    """Unexpected non-domain HTTP failure from the Scheduling API."""

    retryable = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        ValidationError,
        InvalidReferenceError,
        OverlapError,
        NotFoundError,
        ReferentialGuardError,
        DuplicateNameError,
        GridIntegrityError,
        ScheduleBusyError,
    )
}
