"""Centralized error transformation for API routes.

Maps Conducky errors (domain and infrastructure) to HTTPException responses
whose detail is the ``{"error": ..., "code": ...}`` body clients rely on.
"""

from typing import Any

from fastapi import HTTPException

from conducky.domain.shared.error import (
    AuthorizationError,
    ConduckyError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 422,
    InvalidStateError: 409,
    ConflictError: 409,
    AuthorizationError: 403,
}


def map_error(error: ConduckyError) -> HTTPException:
    """Map a Conducky error to an HTTPException."""
    detail: dict[str, Any] = {"error": error.message, "code": error.code}

    if isinstance(error, InternalError):
        # Never leak the underlying failure
        return HTTPException(
            status_code=500,
            detail={"error": "Internal server error", "code": error.code},
        )

    if isinstance(error, InfrastructureError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        if isinstance(error, AuthorizationError) and error.code == "not_authenticated":
            return HTTPException(
                status_code=401,
                detail=detail,
                headers={"WWW-Authenticate": "Bearer"},
            )
        if isinstance(error, ValidationError):
            if error.field is not None:
                detail["field"] = error.field
            # Missing scope on a scoped guard is a malformed request, not invalid data
            if error.code == "scope_required":
                return HTTPException(status_code=400, detail=detail)
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        return HTTPException(status_code=status_code, detail=detail)

    return HTTPException(status_code=500, detail=detail)
