"""DTOs for permission use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model. Unique on (resource, action)."""

    id: str
    resource: str
    action: str
    description: str | None

    @property
    def code(self) -> str:
        return f"{self.resource}:{self.action}"


@dataclass(frozen=True)
class SeedResult:
    """Outcome of seeding the permission catalogue."""

    created: int
    skipped: int
    total: int
