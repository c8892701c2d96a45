"""Unit tests for UserService (roles, listings, team members) and ProfileAutoCreateService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from medonboard.application.services.profile_auto_create import ProfileAutoCreateService
from medonboard.application.services.user_service import UserService
from medonboard.domain.exceptions import (
    EmailAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import (
    FakePermissionRepository,
    FakeRoleRepository,
    FakeRoleStore,
    OnboardingWorld,
)


def _user_service(
    world: OnboardingWorld, roles: FakeRoleRepository | None = None
) -> UserService:
    return UserService(
        world.users,
        world.doctors,
        world.clinics,
        ProfileAutoCreateService(world.doctors, world.clinics),
        world.dispatcher,
        roles or FakeRoleRepository(FakeRoleStore(FakePermissionRepository())),
    )


async def test_selecting_doctor_creates_profile_once(world: OnboardingWorld) -> None:
    user = world.users.add("new@example.com", stage=None, name="Sam")
    service = _user_service(world)

    updated = await service.update_user_role(user.id, "doctor")
    await service.update_user_role(user.id, "DOCTOR")

    assert updated.role == "DOCTOR"
    assert updated.onboarding_stage == "doctor-detail"
    assert len(world.doctors.doctors) == 1
    assert world.sender.sent == []


async def test_selecting_clinic_creates_clinic_named_after_user(world: OnboardingWorld) -> None:
    user = world.users.add("owner@example.com", name="Harbor Health")
    updated = await _user_service(world).update_user_role(user.id, "Clinic")
    clinic = await world.clinics.get_by_user_id(user.id)
    assert updated.onboarding_stage == "clinic-detail"
    assert clinic.name == "Harbor Health"
    assert clinic.email == "owner@example.com"


async def test_selecting_patient_sends_welcome(world: OnboardingWorld) -> None:
    user = world.users.add("pat@example.com", name="Pat")
    updated = await _user_service(world).update_user_role(user.id, "patient")
    assert updated.onboarding_stage == "patient-detail"
    assert world.sender.recipients() == ["pat@example.com"]
    assert "patient account" in world.sender.sent[0][2]
    assert world.doctors.doctors == {}


async def test_selecting_guest_sends_generic_welcome(world: OnboardingWorld) -> None:
    user = world.users.add("g@example.com", stage="doctor-detail")
    updated = await _user_service(world).update_user_role(user.id, "GUEST")
    assert updated.onboarding_stage == "ROLE_SELECTION"
    assert "Your account is ready" in world.sender.sent[0][2]


async def test_invalid_role_or_user(world: OnboardingWorld) -> None:
    user = world.users.add("x@example.com")
    service = _user_service(world)
    with pytest.raises(ValidationException):
        await service.update_user_role(user.id, "nurse")
    with pytest.raises(ResourceNotFoundException):
        await service.update_user_role("missing", "PATIENT")
    assert world.users.users[user.id].role == "GUEST"


async def test_approved_listings(world: OnboardingWorld) -> None:
    _, clinic = world.clinic("c@example.com", stage="APPROVED_BY_ADMIN")
    world.clinic("pending@example.com", stage="CLINIC_APPROVAL_PENDING")
    _, by_admin = world.doctor("d1@example.com", stage="APPROVED_BY_ADMIN")
    _, by_clinic = world.doctor("d2@example.com", stage="APPROVED_BY_CLINIC")
    world.doctor("d3@example.com", stage="REJECTED")
    admin = world.admin()
    service = _user_service(world)

    assert {d.id for d in await service.list_approved_doctors()} == {by_admin.id, by_clinic.id}
    assert [c.id for c in await service.list_approved_clinics()] == [clinic.id]
    assert [u.id for u in await service.list_team_members()] == [admin.id]



# Team members


async def _support_role() -> FakeRoleRepository:
    roles = FakeRoleRepository(FakeRoleStore(FakePermissionRepository()))
    await roles.create_role("SUPPORT", "Support Agent", None)
    return roles


async def test_create_team_member_with_dynamic_role(world: OnboardingWorld) -> None:
    roles = await _support_role()
    role = await roles.get_by_name("support")
    service = _user_service(world, roles)

    member = await service.create_team_member("Ana", "Ana@Example.com", role.id)

    assert member.email == "ana@example.com"
    assert member.role == "GUEST"
    assert member.role_id == role.id
    assert member.onboarding_stage == "admin-role"
    assert [u.id for u in await service.list_team_members()] == [member.id]
    assert world.sender.recipients() == ["ana@example.com"]
    assert "as Support Agent" in world.sender.sent[0][2]


async def test_team_member_role_name_falls_back_to_name(world: OnboardingWorld) -> None:
    roles = FakeRoleRepository(FakeRoleStore(FakePermissionRepository()))
    role = await roles.create_role("AUDITOR", None, None)
    await _user_service(world, roles).create_team_member(None, "aud@example.com", role.id)
    assert "as AUDITOR" in world.sender.sent[0][2]
    assert "Dear aud@example.com" in world.sender.sent[0][2]


async def test_team_member_unknown_role_or_taken_email(world: OnboardingWorld) -> None:
    roles = await _support_role()
    role = await roles.get_by_name("SUPPORT")
    world.users.add("taken@example.com")
    service = _user_service(world, roles)

    with pytest.raises(ValidationException) as exc_info:
        await service.create_team_member("X", "new@example.com", "role-missing")
    assert exc_info.value.message == "Role not found"
    with pytest.raises(EmailAlreadyExistsException):
        await service.create_team_member("X", "TAKEN@example.com", role.id)

    assert await world.users.get_by_email("new@example.com") is None
    assert world.sender.sent == []

async def test_profile_auto_create_swallows_errors(world: OnboardingWorld) -> None:
    """A failing insert is logged and reported as False, never raised."""
    doctor_repo = MagicMock()
    doctor_repo.get_by_user_id = AsyncMock(return_value=None)
    doctor_repo.create_doctor = AsyncMock(side_effect=RuntimeError("insert failed"))
    profiles = ProfileAutoCreateService(doctor_repo, world.clinics)
    user = world.users.add("d@example.com", role="DOCTOR")
    assert await profiles.ensure_profile(user) is False


async def test_profile_auto_create_ignores_other_roles(world: OnboardingWorld) -> None:
    profiles = ProfileAutoCreateService(world.doctors, world.clinics)
    user = world.users.add("p@example.com", role="PATIENT")
    assert await profiles.ensure_profile(user) is False
    assert world.doctors.doctors == {}
    assert world.clinics.clinics == {}
