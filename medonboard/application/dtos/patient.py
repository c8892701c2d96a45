"""DTOs for patient profiles (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class PatientResult:
    """Patient read-model. phone_number is "<code> <number>"."""

    id: str
    user_id: str
    date_of_birth: date | None
    gender: str | None
    phone_number: str | None
    street_address: str | None
    city: str | None
    state: str | None
    postal_code: str | None
    country: str | None

    @property
    def phone_code(self) -> str | None:
        if not self.phone_number:
            return None
        return self.phone_number.split(" ", 1)[0]

    @property
    def phone_local_number(self) -> str | None:
        if not self.phone_number or " " not in self.phone_number:
            return None
        return self.phone_number.split(" ", 1)[1] or None


@dataclass(frozen=True)
class PatientProfileResult:
    """Outcome of completing a patient profile."""

    profile: PatientResult
    onboarding_stage: str
