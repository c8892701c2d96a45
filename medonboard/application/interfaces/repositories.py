"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from medonboard.application.dtos.approval_request import ApprovalRequestResult
    from medonboard.application.dtos.clinic import ClinicResult
    from medonboard.application.dtos.doctor import DoctorResult
    from medonboard.application.dtos.patient import PatientResult
    from medonboard.application.dtos.permission import PermissionResult
    from medonboard.application.dtos.role import RoleResult
    from medonboard.application.dtos.user import UserResult
    from medonboard.domain.value_objects.approval_scope import ApprovalScope


class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_user(self, user_id: str) -> UserResult | None:
        """Return user by id."""

    async def get_by_email(self, email: str) -> UserResult | None:
        """Return user by email (case-insensitive)."""

    async def create_user(
        self,
        email: str,
        name: str | None,
        role: str,
        onboarding_stage: str | None,
    ) -> UserResult:
        """Create a user; raises EmailAlreadyExistsException on duplicate email."""

    async def set_role(
        self, user_id: str, role: str, onboarding_stage: str
    ) -> UserResult | None:
        """Set system role and onboarding stage; None if user not found."""

    async def set_onboarding_stage(
        self, user_id: str, onboarding_stage: str
    ) -> UserResult | None:
        """Set onboarding_stage; None if user not found."""

    async def set_dynamic_role(
        self, user_id: str, role_id: str | None
    ) -> UserResult | None:
        """Attach (or detach with None) a dynamic role; None if user not found."""

    async def clear_dynamic_role(self, role_id: str) -> int:
        """Detach role_id from every user holding it; return affected count."""

    async def get_admin_emails(self) -> list[str]:
        """Emails of active users whose system role is ADMIN (any case)."""

    async def list_by_stages(self, stages: Iterable[str]) -> list[UserResult]:
        """Users whose onboarding_stage is one of stages."""


class IPermissionRepository(Protocol):
    """Protocol for the permission catalogue table."""

    async def get_by_resource_action(
        self, resource: str, action: str
    ) -> PermissionResult | None:
        """Return permission by its unique (resource, action)."""

    async def get_by_ids(self, permission_ids: Iterable[str]) -> list[PermissionResult]:
        """Return the permissions that exist among permission_ids."""

    async def list_permissions(self) -> list[PermissionResult]:
        """All permissions ordered by resource, action."""

    async def create_permission(
        self, resource: str, action: str, description: str | None = None
    ) -> PermissionResult:
        """Insert a permission row."""


class IRoleRepository(Protocol):
    """Protocol for dynamic role repository."""

    async def create_role(
        self,
        name: str,
        display_name: str | None,
        description: str | None,
        *,
        is_system: bool = False,
    ) -> RoleResult:
        """Create role; raises RoleAlreadyExistsException on duplicate name."""

    async def get_role(self, role_id: str) -> RoleResult | None:
        """Return role with its permissions."""

    async def get_by_name(self, name: str) -> RoleResult | None:
        """Return role by (upper-cased) name."""

    async def list_roles(self, skip: int = 0, limit: int = 100) -> list[RoleResult]:
        """Roles with their permissions."""

    async def update_role(
        self, role_id: str, *, display_name: str | None, description: str | None
    ) -> RoleResult | None:
        """Update display fields; None if not found."""

    async def delete_role(self, role_id: str) -> bool:
        """Delete role; False if not found."""


class IRolePermissionRepository(Protocol):
    """Protocol for the role-permission link table."""

    async def replace_permissions(
        self, role_id: str, permission_ids: Iterable[str]
    ) -> None:
        """Replace the role's permission set with permission_ids."""


class IDoctorRepository(Protocol):
    """Protocol for doctor profile repository."""

    async def get_doctor(self, doctor_id: str) -> DoctorResult | None:
        """Return doctor with user and clinic (with clinic user) loaded."""

    async def get_by_user_id(self, user_id: str) -> DoctorResult | None:
        """Return doctor linked to user_id (relations loaded)."""

    async def get_by_license_number(self, license_number: str) -> DoctorResult | None:
        """Return doctor holding license_number."""

    async def create_doctor(
        self,
        user_id: str,
        *,
        clinic_id: str | None = None,
        fields: dict[str, Any] | None = None,
    ) -> DoctorResult:
        """Create doctor; raises LicenseNumberConflictException on duplicate license."""

    async def update_doctor(self, doctor_id: str, fields: dict[str, Any]) -> DoctorResult:
        """Apply field changes and return the reloaded doctor."""

    async def list_by_user_stages(self, stages: Iterable[str]) -> list[DoctorResult]:
        """Doctors whose user is in one of stages."""

    async def list_by_clinic(
        self, clinic_id: str, stages: Iterable[str]
    ) -> list[DoctorResult]:
        """Doctors linked to clinic_id whose user is in one of stages."""


class IClinicRepository(Protocol):
    """Protocol for clinic profile repository."""

    async def get_clinic(self, clinic_id: str) -> ClinicResult | None:
        """Return clinic with its user loaded."""

    async def get_by_user_id(self, user_id: str) -> ClinicResult | None:
        """Return clinic linked to user_id."""

    async def create_clinic(
        self,
        user_id: str,
        name: str,
        *,
        email: str | None = None,
        fields: dict[str, Any] | None = None,
    ) -> ClinicResult:
        """Create clinic profile."""

    async def update_clinic(self, clinic_id: str, fields: dict[str, Any]) -> ClinicResult:
        """Apply field changes and return the reloaded clinic."""

    async def list_by_user_stages(self, stages: Iterable[str]) -> list[ClinicResult]:
        """Clinics whose user is in one of stages."""


class IPatientRepository(Protocol):
    """Protocol for patient profile repository."""

    async def get_by_user_id(self, user_id: str) -> PatientResult | None:
        """Return patient linked to user_id."""

    async def upsert_for_user(self, user_id: str, fields: dict[str, Any]) -> PatientResult:
        """Create the user's patient row, or update it in place."""


class IApprovalRequestRepository(Protocol):
    """Protocol for approval request persistence."""

    async def upsert_pending(
        self,
        user_id: str,
        request_type: str,
        entity_id: str,
        request_data: dict[str, Any],
        clinic_id: str | None,
    ) -> tuple[ApprovalRequestResult, bool]:
        """Refresh the matching PENDING row or insert one; returns (row, created)."""

    async def get_request(self, request_id: str) -> ApprovalRequestResult | None:
        """Return request by id (no scope filter)."""

    async def get_in_scope(
        self, request_id: str, scope: ApprovalScope
    ) -> ApprovalRequestResult | None:
        """Return request by id only if it belongs to scope."""

    async def list_in_scope(
        self, scope: ApprovalScope, status: str | None = None
    ) -> list[ApprovalRequestResult]:
        """Requests visible in scope, newest first, optionally filtered by status."""

    async def list_by_user(
        self, user_id: str, status: str | None = None
    ) -> list[ApprovalRequestResult]:
        """Requests submitted by user, newest first."""

    async def get_latest_by_user(self, user_id: str) -> ApprovalRequestResult | None:
        """Most recently updated request of user."""

    async def adjudicate(
        self,
        request_id: str,
        scope: ApprovalScope,
        *,
        status: str,
        reviewer_id: str,
        reviewed_at: datetime,
        rejection_reason: str | None = None,
        renewal_date: datetime | None = None,
    ) -> ApprovalRequestResult | None:
        """Move a PENDING request in scope to status; None if no PENDING row matched."""
