# hackathon_service/core/exceptions.py
"""
Exception hierarchy for the hackathon service.

Services raise these; the handlers in ``core/error_handlers.py`` turn them
into the ``{"success": false, "error": ...}`` envelope the frontend expects.
"""

from typing import Optional


class ErrorCategory:
    """Error categories for structured logging and responses."""
    AUTHENTICATION = "authentication_error"
    AUTHORIZATION = "authorization_error"
    VALIDATION = "validation_error"
    DOMAIN = "domain_error"
    NOT_FOUND = "not_found_error"
    UPSTREAM = "upstream_error"


class AppError(Exception):
    """Base application error with structured information."""

    def __init__(
        self,
        message: str,
        category: str = ErrorCategory.DOMAIN,
        status_code: int = 400,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.category = category
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationRequired(AppError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            status_code=401,
        )


class AuthorizationDenied(AppError):
    def __init__(self, message: str = "Admin access required"):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHORIZATION,
            status_code=403,
        )


class ValidationFailed(AppError):
    """
    Schema validation failure.

    ``field_errors`` maps a field path (``"interests"``, ``"firstName"``) to
    every message reported for it, so the UI can annotate single inputs.
    """

    def __init__(
        self,
        field_errors: dict[str, list[str]],
        message: Optional[str] = None,
    ):
        self.field_errors = field_errors
        if message is None:
            message = "; ".join(
                msgs[0] for msgs in field_errors.values() if msgs
            ) or "Invalid input"
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            status_code=422,
            details={"fieldErrors": field_errors},
        )


class DomainRuleViolation(AppError):
    """A business rule rejected the request (409)."""

    default_message = "Request conflicts with the current state"

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(
            message=message or self.default_message,
            category=ErrorCategory.DOMAIN,
            status_code=409,
            details=details,
        )


class AlreadyRegistered(DomainRuleViolation):
    default_message = "Already registered for this workshop"


class NotRegistered(DomainRuleViolation):
    default_message = "Not registered for this workshop"


class WorkshopFull(DomainRuleViolation):
    default_message = "Workshop is at full capacity"


class WorkshopInactive(DomainRuleViolation):
    default_message = "Workshop is not active"


class EventFull(DomainRuleViolation):
    default_message = "The event is now full. We hope to see you next year!"


class RsvpNotAllowed(DomainRuleViolation):
    default_message = "RSVP is not available for your registration status"


class NotFound(AppError):
    def __init__(self, message: str = "Not found"):
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            status_code=404,
        )


class EmailChangeRejected(AppError):
    """The identity provider refused the new address."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            status_code=400,
        )


class UpstreamFailure(AppError):
    """
    The database or identity provider failed.

    The caller only ever sees "Failed to <action>. Please try again."; the
    cause is logged where it is caught.
    """

    def __init__(self, action: str, status_code: int = 500):
        self.action = action
        super().__init__(
            message=f"Failed to {action}. Please try again.",
            category=ErrorCategory.UPSTREAM,
            status_code=status_code,
        )
