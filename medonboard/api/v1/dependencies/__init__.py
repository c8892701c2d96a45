"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories and application
services. Routes depend only on these, never on infrastructure directly.
"""

from medonboard.infrastructure.persistence.database import get_db, get_db_transactional

from .auth import (
    get_current_user,
    get_current_user_optional,
    require_permission,
    require_role,
)
from .db import get_user_repo
from .notifications import (
    get_notification_dispatcher,
    get_notification_sender,
    get_template_renderer,
)
from .onboarding import (
    get_onboarding_service,
    get_onboarding_service_for_read,
    get_patient_service,
    get_patient_service_for_read,
    get_user_service,
    get_user_service_for_read,
)
from .rbac import (
    get_authorization_service,
    get_cache,
    get_permission_service,
    get_permission_service_for_write,
    get_role_service,
    get_role_service_for_read,
)

__all__ = [
    "get_authorization_service",
    "get_cache",
    "get_current_user",
    "get_current_user_optional",
    "get_db",
    "get_db_transactional",
    "get_notification_dispatcher",
    "get_notification_sender",
    "get_onboarding_service",
    "get_onboarding_service_for_read",
    "get_patient_service",
    "get_patient_service_for_read",
    "get_permission_service",
    "get_permission_service_for_write",
    "get_role_service",
    "get_role_service_for_read",
    "get_template_renderer",
    "get_user_repo",
    "get_user_service",
    "get_user_service_for_read",
    "require_permission",
    "require_role",
]
