"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model. role is the system role; role_id the optional dynamic role."""

    id: str
    email: str
    name: str | None
    role: str
    role_id: str | None
    onboarding_stage: str | None
    is_active: bool


@dataclass(frozen=True)
class PrincipalResult:
    """Minimal identity used by authorization (system role + dynamic role id)."""

    user_id: str
    role: str
    role_id: str | None
