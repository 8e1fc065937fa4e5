"""
Application exceptions mapped to HTTP responses.

Every exception logs itself when raised, with its keyword context, so
routers and services never log and raise twice.

    400  ValidationError and subclasses (bad filter/sort/page/relation/body)
    404  NotFoundError
    409  ConflictError (constraint violation at commit)
    500  InternalError, DatabaseError

Usage:
    from shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Course", course_id)
    raise ValidationError("Unknown filter field 'foo'", field="foo")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """Base class: an HTTPException that is logged on construction."""

    log_level = "warning"

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        getattr(logger, self.log_level)(detail, status_code=status_code, **log_context)
        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 400
# =============================================================================


class ValidationError(AppException):
    """
    Rejected input (400).

    ``field`` names the offending input (a filter field, ``operator``,
    ``page``, ``limit``, ``locale``, a relation path, ``instructorId`` ...).
    """

    def __init__(self, detail: str, field: str | None = None, **log_context: Any):
        self.field = field
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, field=field, **log_context)


class UnknownFieldError(ValidationError):
    """Field is not in the entity's allow-list."""

    def __init__(self, field: str, entity: str | None = None, **log_context: Any):
        where = f" for {entity}" if entity else ""
        super().__init__(f"Unknown field '{field}'{where}", field=field, entity=entity, **log_context)


class InvalidOperatorError(ValidationError):
    """Operator is unknown, or not allowed for the field's type."""

    def __init__(self, field: str, operator: str, field_type: str | None = None, **log_context: Any):
        if field_type:
            detail = f"Operator '{operator}' is not allowed for {field_type} field '{field}'"
        else:
            detail = f"Unknown operator '{operator}' for field '{field}'"
        super().__init__(detail, field=field, operator=operator, **log_context)


class InvalidFilterValueError(ValidationError):
    """Filter value cannot be coerced to the field's type."""

    def __init__(self, field: str, kind: str, **log_context: Any):
        super().__init__(
            f"Invalid filter value for field '{field}' ({kind})",
            field=field,
            kind=kind,
            **log_context,
        )


class DuplicateEntityError(ValidationError):
    """A unique attribute (slug, email) is already taken."""

    def __init__(self, entity: str, identifier: str, field: str | None = None, **log_context: Any):
        super().__init__(
            f"{entity} '{identifier}' already exists",
            field=field,
            entity=entity,
            **log_context,
        )


# =============================================================================
# 404
# =============================================================================


class NotFoundError(AppException):
    """
    Lookup miss (404).

    Usage:
        raise NotFoundError("Course", 123)
        raise NotFoundError("CourseTranslation", "fr", course_id=123)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        self.entity = entity
        self.entity_id = entity_id
        detail = f"{entity} with ID {entity_id} not found" if entity_id is not None else f"{entity} not found"
        super().__init__(
            status.HTTP_404_NOT_FOUND,
            detail,
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 409
# =============================================================================


class ConflictError(AppException):
    """Write rejected by a database constraint (409)."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(status.HTTP_409_CONFLICT, detail, **log_context)


# =============================================================================
# 500
# =============================================================================


class InternalError(AppException):
    """Server-side misconfiguration or failure (500)."""

    log_level = "error"

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, **log_context)


class DatabaseError(InternalError):
    """A commit or flush failed for a reason other than a constraint."""

    def __init__(self, operation: str, **log_context: Any):
        super().__init__(
            f"Database error during {operation}. Please try again.",
            operation=operation,
            **log_context,
        )
