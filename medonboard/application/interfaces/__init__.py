"""Application ports: repository and service protocols."""

from medonboard.application.interfaces.repositories import (
    IApprovalRequestRepository,
    IClinicRepository,
    IDoctorRepository,
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
)
from medonboard.application.interfaces.services import (
    ICacheService,
    INotificationService,
    IPermissionResolver,
    ITemplateRenderer,
)

__all__ = [
    "IApprovalRequestRepository",
    "ICacheService",
    "IClinicRepository",
    "IDoctorRepository",
    "INotificationService",
    "IPermissionRepository",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ITemplateRenderer",
    "IUserRepository",
]
