"""Onboarding and authorization errors.

Each carries a stable error_code; medonboard.core.exception_handlers maps the
code to an HTTP status. DependencyFailure never reaches a client: notification
code logs and drops it.
"""

from typing import Any


class MedOnboardException(Exception):
    """Root of the hierarchy: message, error_code and a details dict for the response body."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API exception handler."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(MedOnboardException):
    """Raised when input validation fails (e.g. empty rejection reason)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(MedOnboardException):
    """Missing, malformed or expired bearer token, or an unknown or inactive user."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(MedOnboardException):
    """Raised when the principal lacks the permission or role for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(MedOnboardException):
    """Unknown id, or a row outside the caller's scope (reported the same way).

    resource_type is e.g. 'approval_request' or 'doctor'.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(MedOnboardException):
    """Raised when a write would violate a uniqueness rule."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class RoleAlreadyExistsException(ConflictException):
    """Raised when creating a role whose name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Role with name '{name}' already exists",
            "ROLE_ALREADY_EXISTS",
            {"name": name},
        )


class SystemRoleProtectedException(ConflictException):
    """Raised on create/update/delete of a reserved system role."""

    def __init__(self, name: str, operation: str) -> None:
        """Initialize with role name and attempted operation.

        Args:
            name: Role name (any case).
            operation: 'create', 'update' or 'delete'.
        """
        super().__init__(
            f"System role '{name.upper()}' cannot be {operation}d",
            "SYSTEM_ROLE_PROTECTED",
            {"name": name.upper(), "operation": operation},
        )


class LicenseNumberConflictException(ConflictException):
    """Raised when a doctor license number is already registered."""

    def __init__(self, license_number: str) -> None:
        super().__init__(
            "A doctor with this license number already exists",
            "LICENSE_NUMBER_CONFLICT",
            {"license_number": license_number},
        )


class EmailAlreadyExistsException(ConflictException):
    """Raised when creating a user whose email is already registered."""

    def __init__(self) -> None:
        super().__init__(
            "Email is already registered",
            "EMAIL_ALREADY_EXISTS",
        )


class InvalidStageTransitionException(MedOnboardException):
    """Raised when an onboarding event is not allowed from the user's current stage."""

    def __init__(self, current_stage: str | None, event: str) -> None:
        """Initialize with the rejected (stage, event) pair.

        Args:
            current_stage: Stage stored on the user (may be None or unrecognised).
            event: Onboarding event that was attempted.
        """
        super().__init__(
            f"Onboarding event '{event}' is not allowed from stage '{current_stage}'",
            "INVALID_STAGE_TRANSITION",
            {"current_stage": current_stage, "event": event},
        )


class DependencyFailure(MedOnboardException):
    """Raised by collaborators (email, profile auto-create) on failure.

    Never surfaces to API callers: the caller logs and swallows it so the
    primary state change is kept.
    """

    def __init__(self, dependency: str, message: str) -> None:
        super().__init__(
            f"{dependency} failed: {message}",
            "DEPENDENCY_FAILURE",
            {"dependency": dependency},
        )


class SqlNotConfiguredException(MedOnboardException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
