"""User repository. Read methods return UserResult (DTO)."""

from collections.abc import Iterable

from sqlalchemy import func, select, update as sa_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.application.dtos.user import PrincipalResult, UserResult
from medonboard.domain.enums import SystemRole
from medonboard.domain.exceptions import EmailAlreadyExistsException
from medonboard.infrastructure.persistence.models.user import User
from medonboard.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult."""
    return UserResult(
        id=u.id,
        email=u.email,
        name=u.name,
        role=u.role,
        role_id=u.role_id,
        onboarding_stage=u.onboarding_stage,
        is_active=u.is_active,
    )


class UserRepository(BaseRepository[User]):
    """User persistence: system role, dynamic role link and onboarding stage."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_user(self, user_id: str) -> UserResult | None:
        row = await self.get_by_id(user_id)
        return _user_to_result(row) if row else None

    async def get_by_email(self, email: str) -> UserResult | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        row = result.scalar_one_or_none()
        return _user_to_result(row) if row else None

    async def get_principal(self, user_id: str) -> PrincipalResult | None:
        """Role columns of an active user, or None."""
        result = await self.db.execute(
            select(User.id, User.role, User.role_id).where(
                User.id == user_id, User.is_active.is_(True)
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return PrincipalResult(user_id=row.id, role=row.role, role_id=row.role_id)

    async def create_user(
        self,
        email: str,
        name: str | None,
        role: str,
        onboarding_stage: str | None,
    ) -> UserResult:
        """Create a user; raises EmailAlreadyExistsException on duplicate email."""
        user = User(
            email=email.strip().lower(),
            name=name,
            role=role,
            onboarding_stage=onboarding_stage,
            is_active=True,
        )
        try:
            async with self.db.begin_nested():
                created = await self.create(user)
        except IntegrityError:
            raise EmailAlreadyExistsException() from None
        return _user_to_result(created)

    async def _set(self, user_id: str, **values: object) -> UserResult | None:
        user = await self.get_by_id(user_id)
        if user is None:
            return None
        for name, value in values.items():
            setattr(user, name, value)
        return _user_to_result(await self.update(user))

    async def set_role(
        self, user_id: str, role: str, onboarding_stage: str
    ) -> UserResult | None:
        return await self._set(user_id, role=role, onboarding_stage=onboarding_stage)

    async def set_onboarding_stage(
        self, user_id: str, onboarding_stage: str
    ) -> UserResult | None:
        return await self._set(user_id, onboarding_stage=onboarding_stage)

    async def set_dynamic_role(
        self, user_id: str, role_id: str | None
    ) -> UserResult | None:
        return await self._set(user_id, role_id=role_id)

    async def clear_dynamic_role(self, role_id: str) -> int:
        result = await self.db.execute(
            sa_update(User)
            .where(User.role_id == role_id)
            .values(role_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def get_admin_emails(self) -> list[str]:
        """Emails of active ADMIN users; role compared case-insensitively."""
        result = await self.db.execute(
            select(User.email)
            .where(
                func.upper(User.role) == SystemRole.ADMIN.value,
                User.is_active.is_(True),
            )
            .order_by(User.email)
        )
        return [email for email in result.scalars().all() if email]

    async def list_by_stages(self, stages: Iterable[str]) -> list[UserResult]:
        stage_list = list(stages)
        if not stage_list:
            return []
        result = await self.db.execute(
            select(User)
            .where(User.onboarding_stage.in_(stage_list))
            .order_by(User.created_at.desc())
        )
        return [_user_to_result(u) for u in result.scalars().all()]
