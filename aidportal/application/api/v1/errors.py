"""Centralized error transformation for API routes.

Maps portal errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any

from fastapi import HTTPException

from aidportal.domain.shared.error import (
    AidPortalError,
    AnnualLimitReachedError,
    AuthorizationError,
    ConcurrentModificationError,
    ConflictError,
    DomainError,
    IncompleteAccountabilityError,
    InfrastructureError,
    InsufficientLeadTimeError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 422,
    InsufficientLeadTimeError: 422,
    IncompleteAccountabilityError: 422,
    InvalidStateError: 409,
    InvalidTransitionError: 409,
    AnnualLimitReachedError: 409,
    ConflictError: 409,
    ConcurrentModificationError: 409,
    AuthorizationError: 403,
}

# Authorization failures that mean "who are you?" rather than "not allowed"
UNAUTHENTICATED_CODES = frozenset({"missing_token", "invalid_credentials"})


def map_error(error: AidPortalError) -> HTTPException:
    """Map a portal error to an HTTPException with a {code, message, ...} detail."""
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
        **error.details,
    }

    if isinstance(error, InfrastructureError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        if isinstance(error, AuthorizationError) and error.code in UNAUTHENTICATED_CODES:
            return HTTPException(
                status_code=401,
                detail=detail,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return HTTPException(status_code=status_code, detail=detail)

    return HTTPException(status_code=500, detail=detail)
