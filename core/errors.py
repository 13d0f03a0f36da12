# ============================================================================
# APPLICATION ERRORS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Foundation - Error taxonomy
# PURPOSE: Typed errors shared by repositories, services and the API layer
# CREATED: 02 OCT 2026
# ============================================================================
"""
Application Errors

Every error raised on purpose by the service is an AppError. Operational
errors describe a condition the client caused or can fix (not found,
dependents exist, duplicate key...) and are reported with their message.
Non-operational errors (InternalError, or anything that is not an AppError)
are logged and reported as a generic failure.

Each error carries a stable dotted `code` (e.g. "error.notFound.map") that
clients can use as a translation key.

Usage:
    from core.errors import NotFoundError

    raise NotFoundError.for_entity(EntityType.MAP, map_id)
"""

from typing import Any, Dict, Optional

from core.contracts import EntityType


class AppError(Exception):
    """Base class for all errors raised by the service."""

    status_code: int = 500
    default_code: str = "error.general"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        is_operational: bool = True,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational
        self.details = details or {}

    @property
    def status(self) -> str:
        """'fail' for client errors, 'error' for server errors."""
        return "fail" if str(self.status_code).startswith("4") else "error"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class NotFoundError(AppError):
    """Entity id absent (or no longer present mid-update)."""

    status_code = 404
    default_code = "error.notFound"

    @classmethod
    def for_entity(cls, entity_type: EntityType, entity_id: Any) -> "NotFoundError":
        return cls(
            f"{entity_type.label} '{entity_id}' not found",
            code=f"error.notFound.{entity_type.label}",
        )


class HasDependentsError(AppError):
    """Deletion guard: the entity still has embedded children."""

    status_code = 400
    default_code = "error.delete.has_dependents"


class MissingParameterError(AppError):
    """Request lacks a parameter the operation cannot proceed without."""

    status_code = 400
    default_code = "error.missing_parameter"


class UnprocessableEntityError(AppError):
    """Well-formed request that cannot be applied (e.g. position off the map)."""

    status_code = 422
    default_code = "error.unprocessable_entity"


class UnprocessableImageError(UnprocessableEntityError):
    """Image metadata (width/height) could not be read."""

    default_code = "error.unprocessable_entity.map_image_tile"


class DuplicateKeyError(AppError):
    """Unique-field collision in the store."""

    status_code = 409
    default_code = "error.duplicate"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        self.field = field
        self.value = value
        kwargs.setdefault("code", f"error.duplicate.{field}" if field else None)
        super().__init__(message, **kwargs)


class ValidationFailureError(AppError):
    """Required/length/range rule violated."""

    status_code = 400
    default_code = "error.validation"


class InternalError(AppError):
    """Unexpected store or image failure. Never reported with detail."""

    status_code = 500
    default_code = "error.internal"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("is_operational", False)
        super().__init__(message, **kwargs)


__all__ = [
    "AppError",
    "NotFoundError",
    "HasDependentsError",
    "MissingParameterError",
    "UnprocessableEntityError",
    "UnprocessableImageError",
    "DuplicateKeyError",
    "ValidationFailureError",
    "InternalError",
]
