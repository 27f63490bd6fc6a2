"""Domain errors raised by the service layer.

Each error maps to an HTTP status and an error code; ``main.py`` renders
them in the same ``{"error": {...}}`` envelope used for request validation.
"""

from typing import Any

from fastapi import status


class NewsdeskError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(NewsdeskError):
    """Malformed or out-of-policy input."""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, field: str | None = None, **details: Any):
        super().__init__(message, field=field, **details)
        self.field = field


class AuthorizationError(NewsdeskError):
    """Role or ownership violation."""

    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(NewsdeskError):
    """Entity does not exist (or is soft-deleted)."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any = None, message: str | None = None):
        super().__init__(
            message or f"{entity} '{entity_id}' not found",
            entity=entity,
            entity_id=entity_id,
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidStateError(NewsdeskError):
    """Operation is not legal for the entity's current status."""

    code = "INVALID_STATE"
    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        message: str,
        entity_id: Any = None,
        expected: str | None = None,
        actual: str | None = None,
    ):
        super().__init__(message, entity_id=entity_id, expected=expected, actual=actual)
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual


class ConflictError(NewsdeskError):
    """Uniqueness or reference violation not otherwise resolved."""

    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class ExternalServiceError(NewsdeskError):
    """Rewards API or object storage failure."""

    code = "EXTERNAL_SERVICE_ERROR"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, service: str, message: str, **details: Any):
        super().__init__(message, service=service, **details)
        self.service = service


class StorageError(ExternalServiceError):
    """Object storage is unconfigured or the upload failed."""

    code = "STORAGE_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__("object_storage", message, **details)
