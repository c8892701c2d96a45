"""Patient profile repository."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.application.dtos.patient import PatientResult
from medonboard.infrastructure.persistence.models.patient import Patient
from medonboard.infrastructure.persistence.repositories.base import BaseRepository


def _patient_to_result(p: Patient) -> PatientResult:
    return PatientResult(
        id=p.id,
        user_id=p.user_id,
        date_of_birth=p.date_of_birth,
        gender=p.gender,
        phone_number=p.phone_number,
        street_address=p.street_address,
        city=p.city,
        state=p.state,
        postal_code=p.postal_code,
        country=p.country,
    )


class PatientRepository(BaseRepository[Patient]):
    _mutable_fields = frozenset(
        {
            "date_of_birth",
            "gender",
            "phone_number",
            "street_address",
            "city",
            "state",
            "postal_code",
            "country",
        }
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Patient)

    async def _row_for_user(self, user_id: str) -> Patient | None:
        result = await self.db.execute(select(Patient).where(Patient.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: str) -> PatientResult | None:
        row = await self._row_for_user(user_id)
        return _patient_to_result(row) if row else None

    async def upsert_for_user(self, user_id: str, fields: dict[str, Any]) -> PatientResult:
        """Create the user's patient row or apply fields to the existing one."""
        row = await self._row_for_user(user_id)
        if row is None:
            row = Patient(user_id=user_id)
            self.apply_fields(row, fields)
            return _patient_to_result(await self.create(row))
        self.apply_fields(row, fields)
        return _patient_to_result(await self.update(row))
