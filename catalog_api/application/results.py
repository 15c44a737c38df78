"""Service result types.

Application services never raise across their boundary: every mutation
returns an :class:`ActionResult` carrying either data or a localized error.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from catalog_api.domain.exceptions import DomainError

T = TypeVar("T")

# Error codes for failures that are not domain errors.
DATA_ERROR = "DATA_ERROR"
AUTH_SERVICE_ERROR = "AUTH_SERVICE_ERROR"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
UNAUTHORIZED = "UNAUTHORIZED"
EMAIL_TAKEN = "EMAIL_TAKEN"


@dataclass
class ActionResult(Generic[T]):
    """Result of a service operation.

    Attributes:
        success: Whether the operation succeeded.
        data: Payload on success.
        error: Localized error message on failure.
        error_code: Machine-readable error code on failure.
        details: Extra error context (e.g. the failing field).
    """

    success: bool = True
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T | None = None) -> "ActionResult[T]":
        """Successful result."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, error_code: str) -> "ActionResult[T]":
        """Failed result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_error(cls, exc: DomainError) -> "ActionResult[T]":
        """Failed result from a domain error."""
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.error_code,
            details=exc.details,
        )
