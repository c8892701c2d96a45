"""API tests for authentication, role selection and permission checks.

Repositories and services are replaced with in-memory fakes (see conftest);
tokens are minted with create_access_token.
"""

from datetime import timedelta

from httpx import AsyncClient

from medonboard.infrastructure.security.jwt import create_access_token
from tests.fakes import OnboardingWorld, RbacWorld, bearer


async def test_protected_route_without_token_returns_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.headers.get("www-authenticate") == "Bearer"


async def test_invalid_expired_and_unknown_tokens_return_401(
    client: AsyncClient, rbac: RbacWorld
) -> None:
    user = rbac.users.add("u@example.com")
    expired = create_access_token({"sub": user.id}, expires_delta=timedelta(seconds=-5))
    unknown = create_access_token({"sub": "no-such-user"})
    for token in ("not-a-jwt", expired, unknown):
        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401, token


async def test_inactive_user_is_rejected(client: AsyncClient, rbac: RbacWorld) -> None:
    user = rbac.users.add("off@example.com", is_active=False)
    response = await client.get("/api/v1/users/me", headers=bearer(user))
    assert response.status_code == 401


async def test_get_me(client: AsyncClient, rbac: RbacWorld) -> None:
    user = rbac.users.add("me@example.com", name="Me")
    response = await client.get("/api/v1/users/me", headers=bearer(user))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "me@example.com"
    assert body["role"] == "GUEST"
    assert body["onboarding_stage"] == "ROLE_SELECTION"


async def test_admin_role_cannot_be_self_assigned(client: AsyncClient, rbac: RbacWorld) -> None:
    user = rbac.users.add("climber@example.com")
    for role in ("ADMIN", "admin"):
        response = await client.put(
            "/api/v1/users/me/role", json={"role": role}, headers=bearer(user)
        )
        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"
    assert rbac.users.users[user.id].role == "GUEST"


async def test_select_doctor_role(client: AsyncClient, rbac: RbacWorld) -> None:
    user = rbac.users.add("doc@example.com")
    response = await client.put(
        "/api/v1/users/me/role", json={"role": "doctor"}, headers=bearer(user)
    )
    assert response.status_code == 200
    assert response.json()["role"] == "DOCTOR"
    assert response.json()["onboarding_stage"] == "doctor-detail"


async def test_select_unknown_role_is_400(client: AsyncClient, rbac: RbacWorld) -> None:
    user = rbac.users.add("x@example.com")
    response = await client.put(
        "/api/v1/users/me/role", json={"role": "wizard"}, headers=bearer(user)
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "role"}


async def test_permission_check_by_role_name(client: AsyncClient, rbac: RbacWorld) -> None:
    caller = rbac.users.add("caller@example.com")
    response = await client.post(
        "/api/v1/permissions/check",
        json={"role": "clinic", "resource": "organization", "action": "manage"},
        headers=bearer(caller),
    )
    assert response.status_code == 200
    assert response.json() == {"has_permission": True}


async def test_permission_check_by_user_and_unknown_user(
    client: AsyncClient, rbac: RbacWorld
) -> None:
    caller = rbac.users.add("caller@example.com", role="PATIENT")
    allowed = await client.post(
        "/api/v1/permissions/check",
        json={"user_id": caller.id, "resource": "user", "action": "update"},
        headers=bearer(caller),
    )
    unknown = await client.post(
        "/api/v1/permissions/check",
        json={"user_id": "ghost", "resource": "user", "action": "view"},
        headers=bearer(caller),
    )
    assert allowed.json() == {"has_permission": True}
    assert unknown.json() == {"has_permission": False}


async def test_permission_check_requires_authentication(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"role": "ADMIN", "resource": "role", "action": "delete"},
    )
    assert response.status_code == 401


async def test_user_permissions_self_and_others(client: AsyncClient, rbac: RbacWorld) -> None:
    """Users read their own effective permissions; others need permission:view."""
    doctor = rbac.users.add("doc@example.com", role="DOCTOR")
    other = rbac.users.add("other@example.com", role="PATIENT")
    admin = rbac.users.add("admin@example.com", role="ADMIN")

    own = await client.get(f"/api/v1/permissions/users/{doctor.id}", headers=bearer(doctor))
    assert own.status_code == 200
    assert own.json()["permissions"] == [
        {"resource": "user", "action": "view"},
        {"resource": "organization", "action": "view"},
    ]

    denied = await client.get(f"/api/v1/permissions/users/{other.id}", headers=bearer(doctor))
    assert denied.status_code == 403

    as_admin = await client.get(f"/api/v1/permissions/users/{other.id}", headers=bearer(admin))
    assert as_admin.status_code == 200
    assert {"resource": "user", "action": "update"} in as_admin.json()["permissions"]


async def test_admin_routes_reject_non_admins(client: AsyncClient, rbac: RbacWorld) -> None:
    clinic = rbac.users.add("clinic@example.com", role="CLINIC")
    response = await client.get("/api/v1/admin/approval-requests", headers=bearer(clinic))
    assert response.status_code == 403
    assert response.json()["message"] == "Requires role: ADMIN"


async def test_team_members_for_lowercase_admin(client: AsyncClient, rbac: RbacWorld) -> None:
    """Stored role values in any case satisfy role guards."""
    admin = rbac.users.add("admin@example.com", role="admin", stage="admin-role")
    response = await client.get("/api/v1/users/team-members", headers=bearer(admin))
    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [admin.id]


async def test_admin_creates_team_member(
    client: AsyncClient, rbac: RbacWorld, api_world: OnboardingWorld
) -> None:
    admin = rbac.users.add("admin@example.com", role="ADMIN", stage="admin-role")
    role = await rbac.roles.create_role("SUPPORT", "Support Agent", None)

    created = await client.post(
        "/api/v1/users/team-members",
        json={"name": "Ana", "email": "Ana@Example.com", "role_id": role.id},
        headers=bearer(admin),
    )
    assert created.status_code == 201
    body = created.json()
    assert body["email"] == "ana@example.com"
    assert body["role_id"] == role.id
    assert body["onboarding_stage"] == "admin-role"
    assert api_world.sender.recipients() == ["ana@example.com"]

    team = await client.get("/api/v1/users/team-members", headers=bearer(admin))
    assert {u["email"] for u in team.json()} == {"admin@example.com", "ana@example.com"}

    duplicate = await client.post(
        "/api/v1/users/team-members",
        json={"name": "Ana", "email": "ana@example.com", "role_id": role.id},
        headers=bearer(admin),
    )
    assert duplicate.status_code == 409


async def test_team_member_with_unknown_role_is_400(
    client: AsyncClient, rbac: RbacWorld
) -> None:
    admin = rbac.users.add("admin@example.com", role="ADMIN", stage="admin-role")
    response = await client.post(
        "/api/v1/users/team-members",
        json={"email": "x@example.com", "role_id": "role-missing"},
        headers=bearer(admin),
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Role not found"
    assert await rbac.users.get_by_email("x@example.com") is None


async def test_team_member_creation_requires_admin(
    client: AsyncClient, rbac: RbacWorld
) -> None:
    clinic = rbac.users.add("clinic@example.com", role="CLINIC")
    response = await client.post(
        "/api/v1/users/team-members",
        json={"email": "x@example.com", "role_id": "role-1"},
        headers=bearer(clinic),
    )
    assert response.status_code == 403
