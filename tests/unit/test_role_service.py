"""Unit tests for RoleService and PermissionService (seeding, CRUD, protection)."""

import pytest

from medonboard.domain.enums import SystemRole
from medonboard.domain.exceptions import (
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SystemRoleProtectedException,
    ValidationException,
)
from medonboard.domain.permissions import SEEDED_PERMISSIONS
from tests.fakes import RbacWorld


async def test_seed_is_idempotent() -> None:
    """Second seeding creates nothing and reports every entry as skipped."""
    world = RbacWorld()
    first = await world.permission_service.seed_permissions()
    second = await world.permission_service.seed_permissions()
    assert first.created == len(SEEDED_PERMISSIONS)
    assert first.skipped == 0
    assert second.created == 0
    assert second.skipped == second.total == len(SEEDED_PERMISSIONS)
    assert len(world.permissions.permissions) == len(SEEDED_PERMISSIONS)


async def test_grouped_listing(rbac: RbacWorld) -> None:
    grouped = await rbac.permission_service.list_permissions_grouped()
    assert [p.action for p in grouped["settings"]] == ["update", "view"]
    assert grouped["invoice"][0].code == "invoice:approve"


async def test_create_role_normalizes_name(rbac: RbacWorld) -> None:
    ids = await rbac.permission_ids("report:view", "report:export")
    role = await rbac.role_service.create_role(
        " nurse ", description="Ward staff", permission_ids=ids + ids[:1]
    )
    assert role.name == "NURSE"
    assert role.display_name == "nurse"
    assert role.is_system is False
    assert sorted(p.code for p in role.permissions) == ["report:export", "report:view"]


@pytest.mark.parametrize("name", ["admin", "Doctor", "GUEST", " patient ", "clinic"])
async def test_create_role_rejects_system_names(rbac: RbacWorld, name: str) -> None:
    with pytest.raises(SystemRoleProtectedException):
        await rbac.role_service.create_role(name)
    assert rbac.role_store.roles == {}


async def test_create_role_rejects_blank_and_duplicate(rbac: RbacWorld) -> None:
    with pytest.raises(ValidationException):
        await rbac.role_service.create_role("   ")
    await rbac.role_service.create_role("NURSE")
    with pytest.raises(RoleAlreadyExistsException):
        await rbac.role_service.create_role("nurse")


async def test_create_role_rejects_unknown_permission_ids(rbac: RbacWorld) -> None:
    """Unknown ids fail the whole create; no role row is written."""
    ids = await rbac.permission_ids("report:view")
    with pytest.raises(ValidationException) as exc_info:
        await rbac.role_service.create_role("NURSE", permission_ids=[*ids, "perm-missing"])
    assert "perm-missing" in exc_info.value.message
    assert await rbac.roles.get_by_name("NURSE") is None


async def test_update_role_replaces_permissions_and_invalidates(rbac: RbacWorld) -> None:
    first = await rbac.permission_ids("report:view")
    second = await rbac.permission_ids("invoice:view", "invoice:list")
    role = await rbac.role_service.create_role("BILLING", permission_ids=first)

    updated = await rbac.role_service.update_role(
        role.id, display_name="Billing desk", permission_ids=second
    )

    assert updated.display_name == "Billing desk"
    assert sorted(p.code for p in updated.permissions) == ["invoice:list", "invoice:view"]
    assert rbac.resolver.invalidated == [role.id]


async def test_update_role_without_permission_ids_keeps_set(rbac: RbacWorld) -> None:
    ids = await rbac.permission_ids("report:view")
    role = await rbac.role_service.create_role("AUDITOR", permission_ids=ids)
    updated = await rbac.role_service.update_role(role.id, description="Read-only")
    assert [p.code for p in updated.permissions] == ["report:view"]
    cleared = await rbac.role_service.update_role(role.id, permission_ids=[])
    assert cleared.permissions == ()


async def test_system_rows_are_protected(rbac: RbacWorld) -> None:
    await rbac.role_service.ensure_system_roles()
    doctor = await rbac.roles.get_by_name("DOCTOR")
    with pytest.raises(SystemRoleProtectedException):
        await rbac.role_service.update_role(doctor.id, display_name="Physician")
    with pytest.raises(SystemRoleProtectedException):
        await rbac.role_service.delete_role(doctor.id)
    with pytest.raises(ValidationException):
        await rbac.role_service.assign_role("any-user", doctor.id)


async def test_delete_role_detaches_holders(rbac: RbacWorld) -> None:
    role = await rbac.role_service.create_role("TEMP")
    holder = rbac.users.add("temp@example.com", role_id=role.id)

    await rbac.role_service.delete_role(role.id)

    assert rbac.users.users[holder.id].role_id is None
    assert await rbac.roles.get_role(role.id) is None
    assert rbac.resolver.invalidated == [role.id]
    with pytest.raises(ResourceNotFoundException):
        await rbac.role_service.delete_role(role.id)


async def test_assign_and_revoke(rbac: RbacWorld) -> None:
    role = await rbac.role_service.create_role("NURSE")
    user = rbac.users.add("n@example.com", role="PATIENT")

    assigned = await rbac.role_service.assign_role(user.id, role.id)
    assert assigned.role_id == role.id
    assert assigned.role == "PATIENT"

    revoked = await rbac.role_service.revoke_role(user.id)
    assert revoked.role_id is None

    with pytest.raises(ResourceNotFoundException):
        await rbac.role_service.assign_role("missing-user", role.id)
    with pytest.raises(ResourceNotFoundException):
        await rbac.role_service.assign_role(user.id, "missing-role")


async def test_ensure_system_roles_is_idempotent(rbac: RbacWorld) -> None:
    """System rows mirror the static grant tables and are created once."""
    assert await rbac.role_service.ensure_system_roles() == len(SystemRole)
    assert await rbac.role_service.ensure_system_roles() == 0

    clinic = await rbac.roles.get_by_name("CLINIC")
    assert clinic.is_system
    assert sorted(p.code for p in clinic.permissions) == [
        "organization:manage",
        "organization:view",
        "user:list",
        "user:view",
    ]
    guest = await rbac.roles.get_by_name("GUEST")
    assert guest.permissions == ()
