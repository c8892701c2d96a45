"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass, field

from medonboard.application.dtos.permission import PermissionResult


@dataclass(frozen=True)
class RoleResult:
    """Dynamic role read-model with its assigned permissions."""

    id: str
    name: str
    display_name: str | None
    description: str | None
    is_system: bool
    permissions: tuple[PermissionResult, ...] = field(default_factory=tuple)
