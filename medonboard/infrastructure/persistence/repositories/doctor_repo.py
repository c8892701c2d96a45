"""Doctor profile repository. Reads load the user and the clinic (with its user)."""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medonboard.application.dtos.doctor import DoctorResult
from medonboard.domain.exceptions import LicenseNumberConflictException
from medonboard.infrastructure.persistence.models.clinic import Clinic
from medonboard.infrastructure.persistence.models.doctor import Doctor
from medonboard.infrastructure.persistence.models.user import User
from medonboard.infrastructure.persistence.repositories.base import (
    BaseRepository,
    is_loaded,
)
from medonboard.infrastructure.persistence.repositories.clinic_repo import (
    _clinic_to_result,
)
from medonboard.infrastructure.persistence.repositories.user_repo import _user_to_result


def _doctor_to_result(d: Doctor) -> DoctorResult:
    """Map ORM Doctor to DoctorResult; relations only when eagerly loaded."""
    user = d.user if is_loaded(d, "user") else None
    clinic = d.clinic if is_loaded(d, "clinic") else None
    return DoctorResult(
        id=d.id,
        user_id=d.user_id,
        clinic_id=d.clinic_id,
        license_number=d.license_number,
        specialization=d.specialization,
        qualification=d.qualification,
        experience_years=d.experience_years,
        documents=dict(d.documents or {}),
        professional_info=dict(d.professional_info or {}),
        user=_user_to_result(user) if user is not None else None,
        clinic=_clinic_to_result(clinic) if clinic is not None else None,
    )


class DoctorRepository(BaseRepository[Doctor]):
    """Doctor persistence. Duplicate license numbers surface as a conflict."""

    _mutable_fields = frozenset(
        {
            "license_number",
            "specialization",
            "qualification",
            "experience_years",
            "documents",
            "professional_info",
        }
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Doctor)

    def _loaded(self):
        return (
            select(Doctor)
            .options(
                selectinload(Doctor.user),
                selectinload(Doctor.clinic).selectinload(Clinic.user),
            )
            .execution_options(populate_existing=True)
        )

    async def get_doctor(self, doctor_id: str) -> DoctorResult | None:
        result = await self.db.execute(self._loaded().where(Doctor.id == doctor_id))
        row = result.scalar_one_or_none()
        return _doctor_to_result(row) if row else None

    async def get_by_user_id(self, user_id: str) -> DoctorResult | None:
        result = await self.db.execute(self._loaded().where(Doctor.user_id == user_id))
        row = result.scalar_one_or_none()
        return _doctor_to_result(row) if row else None

    async def get_by_license_number(self, license_number: str) -> DoctorResult | None:
        result = await self.db.execute(
            select(Doctor).where(Doctor.license_number == license_number)
        )
        row = result.scalar_one_or_none()
        return _doctor_to_result(row) if row else None

    async def _flush_checked(self, doctor: Doctor, *, new: bool) -> None:
        try:
            async with self.db.begin_nested():
                if new:
                    await self.create(doctor)
                else:
                    await self.update(doctor)
        except IntegrityError:
            raise LicenseNumberConflictException(doctor.license_number or "") from None

    async def create_doctor(
        self,
        user_id: str,
        *,
        clinic_id: str | None = None,
        fields: dict[str, Any] | None = None,
    ) -> DoctorResult:
        doctor = Doctor(
            user_id=user_id, clinic_id=clinic_id, documents={}, professional_info={}
        )
        self.apply_fields(doctor, fields or {})
        await self._flush_checked(doctor, new=True)
        loaded = await self.get_doctor(doctor.id)
        assert loaded is not None
        return loaded

    async def update_doctor(self, doctor_id: str, fields: dict[str, Any]) -> DoctorResult:
        doctor = await self.get_or_raise(doctor_id)
        self.apply_fields(doctor, fields)
        await self._flush_checked(doctor, new=False)
        loaded = await self.get_doctor(doctor_id)
        assert loaded is not None
        return loaded

    async def list_by_user_stages(self, stages: Iterable[str]) -> list[DoctorResult]:
        stage_list = list(stages)
        if not stage_list:
            return []
        result = await self.db.execute(
            self._loaded()
            .join(User, User.id == Doctor.user_id)
            .where(User.onboarding_stage.in_(stage_list))
            .order_by(Doctor.created_at.desc())
        )
        return [_doctor_to_result(d) for d in result.scalars().all()]

    async def list_by_clinic(
        self, clinic_id: str, stages: Iterable[str]
    ) -> list[DoctorResult]:
        stage_list = list(stages)
        if not stage_list:
            return []
        result = await self.db.execute(
            self._loaded()
            .join(User, User.id == Doctor.user_id)
            .where(Doctor.clinic_id == clinic_id, User.onboarding_stage.in_(stage_list))
            .order_by(Doctor.created_at.desc())
        )
        return [_doctor_to_result(d) for d in result.scalars().all()]
