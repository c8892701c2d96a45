"""Domain enumerations for the MedOnboard application.

Enums represent fixed sets of domain values: system roles, approval request
type and status, onboarding stages and the events that move between them.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class SystemRole(_ValuesMixin, str, Enum):
    """Fixed role stored directly on the user row.

    Compare role names with the predicates in medonboard.domain.permissions,
    never with ==; stored values may differ in case.
    """

    GUEST = "GUEST"
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    CLINIC = "CLINIC"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: str | None) -> "SystemRole | None":
        """Return the member for value (case-insensitive), or None."""
        if not value:
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class RequestType(_ValuesMixin, str, Enum):
    """Approval request discriminant; selects the entity table for entity_id."""

    DOCTOR = "DOCTOR"
    CLINIC = "CLINIC"


class ApprovalStatus(_ValuesMixin, str, Enum):
    """Approval request lifecycle status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class OnboardingStage(_ValuesMixin, str, Enum):
    """Known onboarding stage values (workflow cursor on the user row).

    Advisory only: never read as an authorization grant.
    """

    ROLE_SELECTION = "ROLE_SELECTION"
    PATIENT_DETAIL = "patient-detail"
    DOCTOR_DETAIL = "doctor-detail"
    DOCTOR_CLINIC_DETAIL = "doctor-clinic-detail"
    CLINIC_DETAIL = "clinic-detail"
    ADMIN_ROLE = "admin-role"
    DOCTOR_APPROVAL_PENDING = "DOCTOR_APPROVAL_PENDING"
    CLINIC_APPROVAL_PENDING = "CLINIC_APPROVAL_PENDING"
    APPROVED_BY_ADMIN = "APPROVED_BY_ADMIN"
    APPROVED_BY_CLINIC = "APPROVED_BY_CLINIC"
    REJECTED = "REJECTED"
    CLINIC_REJECT_DOCTOR = "CLINIC_REJECT_DOCTOR"
    PATIENT_PROFILE_COMPLETED = "PATIENT_PROFILE_COMPLETED"

    @classmethod
    def parse(cls, value: str | None) -> "OnboardingStage | None":
        """Return the member for a stored stage string (exact match), or None."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class OnboardingEvent(_ValuesMixin, str, Enum):
    """Events that advance onboarding_stage (see medonboard.domain.onboarding)."""

    ROLE_SELECTED_GUEST = "role_selected_guest"
    ROLE_SELECTED_PATIENT = "role_selected_patient"
    ROLE_SELECTED_DOCTOR = "role_selected_doctor"
    ROLE_SELECTED_CLINIC = "role_selected_clinic"
    ROLE_SELECTED_ADMIN = "role_selected_admin"
    DOCTOR_INVITED_BY_CLINIC = "doctor_invited_by_clinic"
    DOCTOR_SUBMITTED_TO_CLINIC = "doctor_submitted_to_clinic"
    DOCTOR_SUBMITTED_TO_ADMIN = "doctor_submitted_to_admin"
    CLINIC_SUBMITTED = "clinic_submitted"
    PATIENT_PROFILE_SUBMITTED = "patient_profile_submitted"
    ADMIN_APPROVED = "admin_approved"
    ADMIN_REJECTED = "admin_rejected"
    CLINIC_APPROVED_DOCTOR = "clinic_approved_doctor"
    CLINIC_REJECTED_DOCTOR = "clinic_rejected_doctor"


class NotificationTarget(_ValuesMixin, str, Enum):
    """Who a routing decision notifies."""

    CLINIC = "clinic"
    ADMIN = "admin"
    SELF = "self"
    NONE = "none"


class NotificationFallback(_ValuesMixin, str, Enum):
    """Recipient used when a clinic-routed doctor has no resolvable clinic contact."""

    ADMIN = "admin"
    SELF = "self"
