"""Error hierarchy for the aid portal.

Error layers:
- AidPortalError: Base class for all portal errors
- DomainError: Business rule violations, validation failures (4xx responses)
- InfrastructureError: System-level failures like storage/network issues (503 responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
"""

from typing import Any


class AidPortalError(Exception):
    """Base class for all portal errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)

    @property
    def details(self) -> dict[str, Any]:
        """Structured fields rendered next to code/message in API responses."""
        return {}


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(AidPortalError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictError(DomainError):
    """Resource already exists or version conflict."""


class ConcurrentModificationError(ConflictError):
    """The row changed in another unit of work since it was read."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            f"{entity} {entity_id} was modified by another transaction",
            code="concurrent_modification",
        )
        self.entity_id = entity_id


class AuthorizationError(DomainError):
    """User not authorized for this operation."""


class InsufficientLeadTimeError(DomainError):
    """The event is too close to today for a new request."""

    def __init__(self, days_until_event: int, minimum_days: int) -> None:
        self.days_until_event = days_until_event
        self.minimum_days = minimum_days
        self.days_short = minimum_days - days_until_event
        super().__init__(
            f"Requests must be submitted at least {minimum_days} days before the event; "
            f"the event is {days_until_event} day(s) away ({self.days_short} day(s) short)",
            code="insufficient_lead_time",
        )

    @property
    def details(self) -> dict[str, Any]:
        return {
            "days_until_event": self.days_until_event,
            "days_short": self.days_short,
            "minimum_days": self.minimum_days,
        }


class AnnualLimitReachedError(DomainError):
    """The employee already has a non-rejected request of this modality this year."""

    def __init__(self, modality: str, year: int) -> None:
        self.modality = modality
        self.year = year
        super().__init__(
            f"{modality} aid was already requested in {year}; "
            "only one request per modality is allowed each year",
            code="annual_limit_reached",
        )

    @property
    def details(self) -> dict[str, Any]:
        return {"modality": self.modality, "year": self.year}


class IncompleteAccountabilityError(DomainError):
    """An accountability package is missing required documents."""

    def __init__(self, missing_slots: list[str]) -> None:
        self.missing_slots = list(missing_slots)
        super().__init__(
            f"Accountability package is missing: {', '.join(self.missing_slots)}",
            code="incomplete_accountability",
        )

    @property
    def details(self) -> dict[str, Any]:
        return {"missing_slots": self.missing_slots}


class InvalidTransitionError(InvalidStateError):
    """A lifecycle action is not legal from the request's current status."""

    def __init__(self, from_status: str, action: str) -> None:
        self.from_status = from_status
        self.action = action
        super().__init__(
            f"Cannot {action.replace('_', ' ')} a request in status '{from_status}'",
            code="invalid_transition",
        )

    @property
    def details(self) -> dict[str, Any]:
        return {"from_status": self.from_status, "action": self.action}


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(AidPortalError):
    """Base class for infrastructure/system errors."""


class StorageUnavailableError(InfrastructureError):
    """Storage backend (database, attachment store) is unavailable."""


class ExternalServiceError(InfrastructureError):
    """External service (mail relay) is unavailable or failed."""


class DispatchError(ExternalServiceError):
    """A notification could not be delivered."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
