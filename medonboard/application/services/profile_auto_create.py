"""Creates the Doctor or Clinic row a user needs after selecting that role."""

from __future__ import annotations

from medonboard.application.dtos.user import UserResult
from medonboard.application.interfaces.repositories import (
    IClinicRepository,
    IDoctorRepository,
)
from medonboard.domain.permissions import is_clinic_role, is_doctor_role
from medonboard.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class ProfileAutoCreateService:
    """Check-then-create; never raises (a failure must not fail the role update)."""

    def __init__(
        self, doctor_repo: IDoctorRepository, clinic_repo: IClinicRepository
    ) -> None:
        self.doctor_repo = doctor_repo
        self.clinic_repo = clinic_repo

    async def ensure_profile(self, user: UserResult) -> bool:
        """Return True when a profile row was created."""
        try:
            if is_doctor_role(user.role):
                if await self.doctor_repo.get_by_user_id(user.id) is not None:
                    return False
                await self.doctor_repo.create_doctor(user.id)
                logger.info("Created doctor profile for user %s", user.id)
                return True
            if is_clinic_role(user.role):
                if await self.clinic_repo.get_by_user_id(user.id) is not None:
                    return False
                await self.clinic_repo.create_clinic(
                    user.id, user.name or user.email, email=user.email
                )
                logger.info("Created clinic profile for user %s", user.id)
                return True
        except Exception:
            logger.exception("Profile auto-create failed for user %s (%s)", user.id, user.role)
        return False
