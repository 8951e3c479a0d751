"""Error hierarchy for Conducky.

Error layers:
- ConduckyError: Base class for all Conducky errors
- DomainError: Business rule violations, access denials (4xx responses)
- InfrastructureError: System-level failures like storage or key problems (5xx responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
"""


class ConduckyError(Exception):
    """Base class for all Conducky errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(ConduckyError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(
        self, message: str, field: str | None = None, code: str | None = None
    ) -> None:
        super().__init__(message, code=code or "VALIDATION_ERROR")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictError(DomainError):
    """Resource already exists."""


class AuthorizationError(DomainError):
    """Caller is not authenticated or lacks the required role.

    code="not_authenticated" means no identity at all (401);
    anything else is a denial for an authenticated caller (403).
    """


# =============================================================================
# Infrastructure Errors (system-level failures - typically 5xx)
# =============================================================================


class InfrastructureError(ConduckyError):
    """Base class for infrastructure/system errors."""


class StorageUnavailableError(InfrastructureError):
    """Database is unavailable."""


class ExternalServiceError(InfrastructureError):
    """External service is unavailable or failed."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""


class InternalError(InfrastructureError):
    """Unexpected failure while making an access decision."""
