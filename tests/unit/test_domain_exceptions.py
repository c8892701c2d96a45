"""Tests for domain exceptions (error_code, message, details) and scopes."""

import pytest

from medonboard.domain.enums import RequestType, SystemRole
from medonboard.domain.exceptions import (
    AuthorizationException,
    DependencyFailure,
    EmailAlreadyExistsException,
    LicenseNumberConflictException,
    MedOnboardException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SqlNotConfiguredException,
    SystemRoleProtectedException,
    ValidationException,
)
from medonboard.domain.value_objects.approval_scope import (
    ClinicScope,
    validate_request_scope,
)


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = MedOnboardException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "MedOnboardException"
    assert exc.details == {}
    assert exc.to_dict() == {"error": "MedOnboardException", "message": "Something failed"}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Rejection reason is required", field="rejection_reason")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.to_dict()["details"] == {"field": "rejection_reason"}


def test_authorization_exception_with_resource_action() -> None:
    """AuthorizationException builds message from resource and action."""
    exc = AuthorizationException(resource="role", action="assign")
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "Permission denied: assign on role"
    assert exc.details == {"resource": "role", "action": "assign"}


def test_authorization_exception_custom_message() -> None:
    exc = AuthorizationException(message="Requires role: ADMIN")
    assert exc.message == "Requires role: ADMIN"
    assert exc.details == {}


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("approval_request", "req-1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "approval_request", "resource_id": "req-1"}


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (RoleAlreadyExistsException("NURSE"), "ROLE_ALREADY_EXISTS"),
        (SystemRoleProtectedException("admin", "delete"), "SYSTEM_ROLE_PROTECTED"),
        (LicenseNumberConflictException("LIC-1"), "LICENSE_NUMBER_CONFLICT"),
        (EmailAlreadyExistsException(), "EMAIL_ALREADY_EXISTS"),
    ],
)
def test_conflicts_carry_specific_codes(exc: MedOnboardException, code: str) -> None:
    assert exc.error_code == code


def test_system_role_protected_message_uses_upper_name() -> None:
    exc = SystemRoleProtectedException("doctor", "update")
    assert exc.message == "System role 'DOCTOR' cannot be updated"
    assert exc.details == {"name": "DOCTOR", "operation": "update"}


def test_dependency_failure_and_sql_not_configured() -> None:
    assert DependencyFailure("email", "timeout").details == {"dependency": "email"}
    assert SqlNotConfiguredException().error_code == "SERVICE_UNAVAILABLE"


def test_system_role_parse() -> None:
    assert SystemRole.parse(" clinic ") is SystemRole.CLINIC
    assert SystemRole.parse("nurse") is None
    assert SystemRole.parse(None) is None


def test_clinic_scope_requires_clinic_id() -> None:
    with pytest.raises(ValidationException):
        ClinicScope("")


def test_only_doctor_requests_may_be_clinic_scoped() -> None:
    validate_request_scope(RequestType.DOCTOR, "clinic-1")
    validate_request_scope(RequestType.CLINIC, None)
    with pytest.raises(ValidationException) as exc_info:
        validate_request_scope(RequestType.CLINIC, "clinic-1")
    assert exc_info.value.details == {"field": "clinic_id"}
