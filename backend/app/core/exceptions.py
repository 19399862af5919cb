"""
Exception hierarchy for the task tracker core and its HTTP mapping.

The services raise these typed errors and never log; the handlers registered
by ``register_exception_handlers`` translate them into JSON responses at the
HTTP boundary.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class TaskTrackerException(Exception):
    """Base exception for the task tracker application."""

    kind = "error"
    default_message = "Task tracker error"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundOrDenied(TaskTrackerException):
    """The resource does not exist or the actor may not see it.

    Both cases are deliberately reported the same way so that non-members
    cannot probe for the existence of projects, tasks or comments.
    """

    kind = "not_found"
    default_message = "Resource not found or access denied"

    def __init__(self, resource: str = "Resource", identifier: Any = None, message: Optional[str] = None):
        if message is None:
            message = f"{resource} not found or access denied"
        details = {"resource": resource}
        if identifier is not None:
            details["id"] = identifier
        super().__init__(message, details)


class UserNotFound(NotFoundOrDenied):
    def __init__(self, identifier: Any = None):
        super().__init__("User", identifier, message="User not found")


class PermissionDenied(TaskTrackerException):
    """The actor can see the resource but may not perform this action on it."""

    kind = "forbidden"
    default_message = "Permission denied"


class DomainValidationError(TaskTrackerException):
    """A domain invariant rejected otherwise well-formed input."""

    kind = "validation_error"
    default_message = "Invalid request"


class NotAProjectMember(DomainValidationError):
    default_message = "Cannot assign task to user who is not a project member"


class ParentNotFound(DomainValidationError):
    default_message = "Parent comment not found"


class NotAMember(DomainValidationError):
    default_message = "User is not a member of this project"


class ConflictError(TaskTrackerException):
    """The request conflicts with current state; the caller may retry with other input."""

    kind = "conflict"
    default_message = "Conflict with current state"


class HasReplies(ConflictError):
    default_message = "Cannot delete comment with replies. Please delete replies first."


class AlreadyMember(ConflictError):
    default_message = "User is already a member of this project"


class RepositoryError(TaskTrackerException):
    """Constraint violation reported by the persistence layer."""

    kind = "storage_constraint"


class DuplicateRecord(RepositoryError):
    default_message = "Record violates a uniqueness constraint"


class ReferencedRecord(RepositoryError):
    default_message = "Record violates a foreign key constraint"


STATUS_BY_EXCEPTION: list[tuple[type[TaskTrackerException], int]] = [
    (NotFoundOrDenied, status.HTTP_404_NOT_FOUND),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (DomainValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
]


def status_code_for(exc: TaskTrackerException) -> int:
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """Map core errors to HTTP responses."""

    @app.exception_handler(TaskTrackerException)
    async def task_tracker_exception_handler(request: Request, exc: TaskTrackerException):
        status_code = status_code_for(exc)
        log = logger.error if status_code >= 500 else logger.info
        log(
            "domain_error",
            error_type=type(exc).__name__,
            kind=exc.kind,
            status_code=status_code,
            message=exc.message,
            **exc.details,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error": exc.kind},
        )
