"""Clinic profile repository. Read methods return ClinicResult with its user."""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from medonboard.application.dtos.clinic import ClinicResult
from medonboard.infrastructure.persistence.models.clinic import Clinic
from medonboard.infrastructure.persistence.models.user import User
from medonboard.infrastructure.persistence.repositories.base import (
    BaseRepository,
    is_loaded,
)
from medonboard.infrastructure.persistence.repositories.user_repo import _user_to_result


def _clinic_to_result(c: Clinic) -> ClinicResult:
    """Map ORM Clinic to ClinicResult; user only when eagerly loaded."""
    user = c.user if is_loaded(c, "user") else None
    return ClinicResult(
        id=c.id,
        user_id=c.user_id,
        name=c.name,
        email=c.email,
        phone=c.phone,
        address=c.address,
        registration_number=c.registration_number,
        documents=dict(c.documents or {}),
        user=_user_to_result(user) if user is not None else None,
    )


class ClinicRepository(BaseRepository[Clinic]):
    _mutable_fields = frozenset(
        {"name", "email", "phone", "address", "registration_number", "documents"}
    )

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Clinic)

    def _loaded(self):
        return (
            select(Clinic)
            .options(selectinload(Clinic.user))
            .execution_options(populate_existing=True)
        )

    async def get_clinic(self, clinic_id: str) -> ClinicResult | None:
        result = await self.db.execute(self._loaded().where(Clinic.id == clinic_id))
        row = result.scalar_one_or_none()
        return _clinic_to_result(row) if row else None

    async def get_by_user_id(self, user_id: str) -> ClinicResult | None:
        result = await self.db.execute(self._loaded().where(Clinic.user_id == user_id))
        row = result.scalar_one_or_none()
        return _clinic_to_result(row) if row else None

    async def create_clinic(
        self,
        user_id: str,
        name: str,
        *,
        email: str | None = None,
        fields: dict[str, Any] | None = None,
    ) -> ClinicResult:
        clinic = Clinic(user_id=user_id, name=name, email=email, documents={})
        self.apply_fields(clinic, fields or {})
        async with self.db.begin_nested():
            created = await self.create(clinic)
        loaded = await self.get_clinic(created.id)
        assert loaded is not None
        return loaded

    async def update_clinic(self, clinic_id: str, fields: dict[str, Any]) -> ClinicResult:
        clinic = await self.get_or_raise(clinic_id)
        self.apply_fields(clinic, fields)
        await self.update(clinic)
        loaded = await self.get_clinic(clinic_id)
        assert loaded is not None
        return loaded

    async def list_by_user_stages(self, stages: Iterable[str]) -> list[ClinicResult]:
        stage_list = list(stages)
        if not stage_list:
            return []
        result = await self.db.execute(
            self._loaded()
            .join(User, User.id == Clinic.user_id)
            .where(User.onboarding_stage.in_(stage_list))
            .order_by(Clinic.created_at.desc())
        )
        return [_clinic_to_result(c) for c in result.scalars().all()]
