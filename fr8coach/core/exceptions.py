"""Custom exceptions for the fr8coach gateway."""

from typing import Any


class CoachException(Exception):
    """Base exception for request-fatal fr8coach errors.

    The message is what the client sees in ``{"error": ...}``. Anything
    diagnostic belongs in ``details`` and is only logged.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class ConfigurationError(CoachException):
    """A required secret or endpoint is not configured (500)."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="NOT_CONFIGURED", status_code=500)


class AuthenticationError(CoachException):
    """Missing or wrong site credential (401).

    Deliberately carries the same message for both cases.
    """

    def __init__(self) -> None:
        super().__init__(
            message="Authentication required.",
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
        )


class RequestValidationFailed(CoachException):
    """Request rejected before any upstream call (400)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else {},
        )


class UpstreamDependencyError(CoachException):
    """A mandatory upstream call failed (502).

    Args:
        service: Name of the failing dependency (openai, supabase, ...)
        detail: Diagnostic detail, logged server-side only
    """

    def __init__(self, service: str, detail: str) -> None:
        super().__init__(
            message="The coaching service is temporarily unavailable. Please try again.",
            code="UPSTREAM_ERROR",
            status_code=502,
            details={"service": service, "detail": detail},
        )
        self.service = service
        self.detail = detail
