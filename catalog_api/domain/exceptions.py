"""Domain exceptions.

All domain-level errors that represent business rule violations.
Application services catch these and turn them into failed results;
they never cross the service boundary.

User-facing messages are localized (es-ES), matching the admin panel.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Input Errors
# ============================================================================


class InputValidationError(DomainError):
    """Raised when input fails validation before any database call."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Message of the first failing field.
            field: Dotted path of the failing field, if known.
        """
        super().__init__(message, details={"field": field})
        self.field = field


class InvalidSlugError(DomainError):
    """Raised when a product slug does not end in a numeric id."""

    error_code = "INVALID_SLUG"

    def __init__(self, slug: str) -> None:
        super().__init__(
            "Slug de producto inválido",
            details={"slug": slug},
        )
        self.slug = slug


# ============================================================================
# Persistence Rule Errors
# ============================================================================


class NotFoundError(DomainError):
    """Raised when a record addressed by id does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any, message: str) -> None:
        super().__init__(
            message,
            details={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class DeleteBlockedError(DomainError):
    """Raised when a delete would orphan dependent rows.

    Deletes never cascade for taxonomy and option nodes; the caller must
    remove the dependents first. ``relation`` names the blocking table.
    """

    error_code = "DELETE_BLOCKED"

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        relation: str,
        message: str,
    ) -> None:
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "relation": relation,
            },
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.relation = relation


# ============================================================================
# Variant Errors
# ============================================================================


class VariantError(DomainError):
    """Base class for variant drafting errors."""

    error_code = "VARIANT_ERROR"


class NoOptionsSelectedError(VariantError):
    """Raised when variants are requested without any selected option."""

    def __init__(self) -> None:
        super().__init__("Debe seleccionar al menos una opción para crear variantes")


class VariantsAlreadyExistError(VariantError):
    """Raised when regenerating over a non-empty variant list."""

    def __init__(self, count: int) -> None:
        super().__init__(
            "Ya existen variantes; elimínelas antes de generar todas las combinaciones",
            details={"count": count},
        )


class InvalidCombinationError(VariantError):
    """Raised when a combination does not pick one feature per option."""

    def __init__(self, feature_ids: list[int], reason: str) -> None:
        super().__init__(
            "Debe seleccionar exactamente una característica por cada opción",
            details={"feature_ids": feature_ids, "reason": reason},
        )


class DuplicateVariantError(VariantError):
    """Raised when a manual variant repeats an existing combination."""

    def __init__(self, feature_ids: list[int]) -> None:
        super().__init__(
            "Ya existe una variante con esa combinación",
            details={"feature_ids": feature_ids},
        )
