"""Persistence models: ORM entities and mixins."""

from medonboard.infrastructure.persistence.models.approval_request import ApprovalRequest
from medonboard.infrastructure.persistence.models.clinic import Clinic
from medonboard.infrastructure.persistence.models.doctor import Doctor
from medonboard.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from medonboard.infrastructure.persistence.models.patient import Patient
from medonboard.infrastructure.persistence.models.permission import Permission
from medonboard.infrastructure.persistence.models.role import Role, RolePermission
from medonboard.infrastructure.persistence.models.user import User

__all__ = [
    "ApprovalRequest",
    "Clinic",
    "CuidMixin",
    "Doctor",
    "Patient",
    "Permission",
    "Role",
    "RolePermission",
    "TimestampMixin",
    "User",
]
