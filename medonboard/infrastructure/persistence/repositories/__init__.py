"""Repositories: ORM persistence mapped to application DTOs."""

from medonboard.infrastructure.persistence.repositories.approval_request_repo import (
    ApprovalRequestRepository,
)
from medonboard.infrastructure.persistence.repositories.base import BaseRepository
from medonboard.infrastructure.persistence.repositories.clinic_repo import ClinicRepository
from medonboard.infrastructure.persistence.repositories.doctor_repo import DoctorRepository
from medonboard.infrastructure.persistence.repositories.patient_repo import PatientRepository
from medonboard.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from medonboard.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from medonboard.infrastructure.persistence.repositories.role_repo import RoleRepository
from medonboard.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "ApprovalRequestRepository",
    "BaseRepository",
    "ClinicRepository",
    "DoctorRepository",
    "PatientRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
]
