"""Current-user and access-guard dependencies.

Identity comes from a bearer JWT whose ``sub`` is the user id; token
issuance belongs to the upstream identity provider.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from medonboard.application.dtos.user import UserResult
from medonboard.application.services.authorization_service import AuthorizationService
from medonboard.domain.enums import SystemRole
from medonboard.domain.exceptions import AuthorizationException
from medonboard.domain.permissions import normalize_role
from medonboard.infrastructure.persistence.repositories import UserRepository
from medonboard.infrastructure.security.jwt import verify_token

from . import db as db_deps
from .rbac import get_authorization_service

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(db_deps.get_user_repo)],
) -> UserResult | None:
    """Return current user from JWT if present; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        return None
    user = await user_repo.get_user(payload["sub"])
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def require_permission(resource: str, action: str):
    """Dependency factory: require JWT auth and that the user has resource:action."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        await auth_svc.require_permission(resource, action, user_id=current_user.id)
        return current_user

    return _require


def require_role(*roles: SystemRole):
    """Dependency factory: require one of the given system roles (case-insensitive)."""
    allowed = frozenset(role.value for role in roles)

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
    ) -> UserResult:
        if normalize_role(current_user.role) not in allowed:
            raise AuthorizationException(
                message=f"Requires role: {', '.join(sorted(allowed))}"
            )
        return current_user

    return _require
