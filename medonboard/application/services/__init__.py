"""Application services: authorization, onboarding, roles and permissions."""

from medonboard.application.services.approval_request_store import ApprovalRequestStore
from medonboard.application.services.authorization_service import AuthorizationService
from medonboard.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from medonboard.application.services.onboarding_service import OnboardingService
from medonboard.application.services.permission_service import PermissionService
from medonboard.application.services.profile_auto_create import (
    ProfileAutoCreateService,
)
from medonboard.application.services.role_service import RoleService
from medonboard.application.services.user_service import UserService

__all__ = [
    "ApprovalRequestStore",
    "AuthorizationService",
    "NotificationDispatcher",
    "OnboardingService",
    "PermissionService",
    "ProfileAutoCreateService",
    "RoleService",
    "UserService",
]
