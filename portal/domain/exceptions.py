"""Domain exceptions for the portal.

Defines domain-level exceptions that represent business rule violations and
failures of the remote identity/data services. Presentation layer maps them
to HTTP responses in exception handlers.
"""

from typing import Any


class PortalException(Exception):
    """Base exception for all portal errors.

    Presentation layer maps these to HTTP responses using message,
    error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, redirect_to).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable error body: error, message, details."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PortalException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PortalException):
    """Raised when authentication fails or a signed-in identity is required.

    redirect_to carries the sign-in path when raised by the route guard.
    """

    def __init__(
        self, message: str = "Authentication failed", redirect_to: str | None = None
    ) -> None:
        details = {"redirect_to": redirect_to} if redirect_to else {}
        super().__init__(message, "AUTHENTICATION_ERROR", details)


class AuthorizationException(PortalException):
    """Raised when the identity lacks the role required for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
        redirect_to: str | None = None,
    ) -> None:
        """Initialize with optional resource, action, message and redirect.

        Args:
            resource: Optional resource type (e.g. 'project', 'file').
            action: Optional action that was attempted (e.g. 'delete').
            message: Human-readable message; default used when resource/action omitted.
            redirect_to: Where the client should send the user instead.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        if redirect_to:
            details["redirect_to"] = redirect_to
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(PortalException):
    """Raised when a requested resource is not found or not visible to the caller."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class EmailAlreadyRegisteredException(PortalException):
    """Raised on sign-up when the email already belongs to an account."""

    def __init__(self) -> None:
        super().__init__("Email is already registered", "EMAIL_ALREADY_REGISTERED", {})


class InvalidResetTokenException(PortalException):
    """Raised when a password reset token is unknown, used or expired."""

    def __init__(self) -> None:
        super().__init__(
            "Password reset link is invalid or has expired", "INVALID_RESET_TOKEN", {}
        )


class RemoteFailureException(PortalException):
    """Raised when the identity or data service cannot be reached or errors."""

    def __init__(self, operation: str, reason: str | None = None) -> None:
        details: dict[str, Any] = {"operation": operation}
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Remote service failed during {operation}",
            "REMOTE_FAILURE",
            details,
        )


class SessionResolvingException(PortalException):
    """Raised when the session or role is still unresolved after the bounded wait."""

    def __init__(self) -> None:
        super().__init__(
            "Session is still being resolved; retry shortly",
            "SESSION_RESOLVING",
            {},
        )
