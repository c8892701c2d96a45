"""User application service: role selection, team members and approved listings."""

from __future__ import annotations

from medonboard.application.dtos.clinic import ClinicResult
from medonboard.application.dtos.doctor import DoctorResult
from medonboard.application.dtos.user import UserResult
from medonboard.application.interfaces.repositories import (
    IClinicRepository,
    IDoctorRepository,
    IRoleRepository,
    IUserRepository,
)
from medonboard.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from medonboard.application.services.profile_auto_create import (
    ProfileAutoCreateService,
)
from medonboard.domain.enums import (
    NotificationTarget,
    OnboardingEvent,
    OnboardingStage,
    SystemRole,
)
from medonboard.domain.exceptions import (
    EmailAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from medonboard.domain.onboarding import next_stage, role_selection_event
from medonboard.shared.telemetry.logging import get_logger
from medonboard.shared.telemetry.tracing import traced

logger = get_logger(__name__)

_APPROVED_STAGES = (
    OnboardingStage.APPROVED_BY_ADMIN.value,
    OnboardingStage.APPROVED_BY_CLINIC.value,
)


class UserService:
    def __init__(
        self,
        user_repo: IUserRepository,
        doctor_repo: IDoctorRepository,
        clinic_repo: IClinicRepository,
        profiles: ProfileAutoCreateService,
        dispatcher: NotificationDispatcher,
        role_repo: IRoleRepository,
    ) -> None:
        self.user_repo = user_repo
        self.doctor_repo = doctor_repo
        self.clinic_repo = clinic_repo
        self.profiles = profiles
        self.dispatcher = dispatcher
        self.role_repo = role_repo

    async def get_user(self, user_id: str) -> UserResult:
        user = await self.user_repo.get_user(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    @traced("users.update_user_role")
    async def update_user_role(self, user_id: str, role: str) -> UserResult:
        """Set the system role and the matching detail stage.

        Doctor and clinic roles get their profile row created if missing;
        patients and other roles get a best-effort welcome email.
        """
        parsed = SystemRole.parse(role)
        if parsed is None:
            raise ValidationException(f"Invalid role: {role!r}", field="role")
        user = await self.get_user(user_id)
        stage = next_stage(user.onboarding_stage, role_selection_event(parsed))
        updated = await self.user_repo.set_role(user_id, parsed.value, stage.value)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        logger.info("User %s selected role %s (stage %s)", user_id, parsed.value, stage.value)

        if parsed in (SystemRole.DOCTOR, SystemRole.CLINIC):
            await self.profiles.ensure_profile(updated)
        else:
            template = (
                "patient.welcome" if parsed is SystemRole.PATIENT else "generic.welcome"
            )
            await self.dispatcher.notify(
                NotificationTarget.SELF, [updated.email], template, {"name": updated.name}
            )
        return updated

    async def list_team_members(self) -> list[UserResult]:
        """Users at the admin-role stage."""
        return await self.user_repo.list_by_stages([OnboardingStage.ADMIN_ROLE.value])

    @traced("users.create_team_member")
    async def create_team_member(
        self, name: str | None, email: str, role_id: str
    ) -> UserResult:
        """Create an admin-team user holding the dynamic role role_id.

        The system role stays GUEST; permissions come from the dynamic role.
        The new member gets an email naming their role and the sign-in link.

        Raises:
            ValidationException: If role_id does not exist.
            EmailAlreadyExistsException: If email is already registered.
        """
        role = await self.role_repo.get_role(role_id)
        if role is None:
            raise ValidationException("Role not found", field="role_id")
        if await self.user_repo.get_by_email(email) is not None:
            raise EmailAlreadyExistsException()

        stage = next_stage(None, OnboardingEvent.ROLE_SELECTED_ADMIN)
        user = await self.user_repo.create_user(
            email, name, SystemRole.GUEST.value, stage.value
        )
        member = await self.user_repo.set_dynamic_role(user.id, role.id)
        if member is None:
            raise ResourceNotFoundException("user", user.id)
        logger.info("Created team member %s with role %s", member.id, role.name)
        await self.dispatcher.notify(
            NotificationTarget.SELF,
            [member.email],
            "admin.team_member_credentials",
            {
                "name": name or member.email,
                "email": member.email,
                "role_name": role.display_name or role.name,
            },
        )
        return member

    async def list_approved_doctors(self) -> list[DoctorResult]:
        return await self.doctor_repo.list_by_user_stages(_APPROVED_STAGES)

    async def list_approved_clinics(self) -> list[ClinicResult]:
        return await self.clinic_repo.list_by_user_stages(
            [OnboardingStage.APPROVED_BY_ADMIN.value]
        )
