"""DTOs for clinic profiles (no dependency on ORM)."""

from dataclasses import dataclass, field
from typing import Any

from medonboard.application.dtos.user import UserResult


@dataclass(frozen=True)
class ClinicResult:
    """Clinic read-model. user is the linked account when loaded."""

    id: str
    user_id: str
    name: str
    email: str | None
    phone: str | None
    address: str | None
    registration_number: str | None
    documents: dict[str, Any] = field(default_factory=dict)
    user: UserResult | None = None

    @property
    def contact_email(self) -> str | None:
        """Linked user's email, falling back to the clinic's own email."""
        if self.user is not None and self.user.email:
            return self.user.email
        return self.email or None
