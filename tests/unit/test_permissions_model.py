"""Tests for the static permission model (statements, role grants, role predicates)."""

import pytest

from medonboard.domain.enums import SystemRole
from medonboard.domain.permissions import (
    ROLE_GRANTS,
    SEEDED_PERMISSION_KEYS,
    SEEDED_PERMISSIONS,
    STATEMENTS,
    all_permissions,
    is_admin_role,
    is_clinic_role,
    is_doctor_role,
    is_patient_role,
    is_system_role_name,
    normalize_role,
    role_allows,
    role_grants,
)


def test_every_role_grant_is_a_declared_statement() -> None:
    """No static grant references a resource or action missing from STATEMENTS."""
    for role, grants in ROLE_GRANTS.items():
        for resource, actions in grants.items():
            assert resource in STATEMENTS, (role, resource)
            assert actions <= set(STATEMENTS[resource]), (role, resource)


def test_every_system_role_has_a_grant_table() -> None:
    assert set(ROLE_GRANTS) == set(SystemRole)


def test_admin_grants_cover_whole_registry() -> None:
    """ADMIN table equals the full registry; GUEST table is empty."""
    admin = ROLE_GRANTS[SystemRole.ADMIN]
    assert {(r, a) for r, acts in admin.items() for a in acts} == set(all_permissions())
    assert dict(ROLE_GRANTS[SystemRole.GUEST]) == {}


def test_statement_spelling_is_preserved() -> None:
    """Resource names are seeded exactly as declared, including recieve_payment."""
    assert "recieve_payment" in STATEMENTS
    assert ("recieve_payment", "manage") in SEEDED_PERMISSION_KEYS


def test_seeded_catalogue_matches_registry_order() -> None:
    assert [(r, a) for r, a, _ in SEEDED_PERMISSIONS] == all_permissions()
    assert len(SEEDED_PERMISSION_KEYS) == len(SEEDED_PERMISSIONS)


def test_seeded_descriptions_are_readable() -> None:
    descriptions = {(r, a): d for r, a, d in SEEDED_PERMISSIONS}
    assert descriptions[("approval_request", "manage")] == "Manage approval request"
    assert descriptions[("invoice", "pay")] == "Pay invoice"


@pytest.mark.parametrize("role", ["ADMIN", "admin", "Admin", " admin "])
def test_is_admin_role_ignores_case(role: str) -> None:
    assert is_admin_role(role) is True


@pytest.mark.parametrize("role", [None, "", "   ", "ADMINISTRATOR", "DOCTOR"])
def test_is_admin_role_rejects_other_values(role: str | None) -> None:
    assert is_admin_role(role) is False


def test_role_predicates_match_their_own_role_only() -> None:
    assert is_clinic_role("clinic") and not is_clinic_role("doctor")
    assert is_doctor_role("Doctor") and not is_doctor_role("patient")
    assert is_patient_role("PATIENT") and not is_patient_role(None)


def test_normalize_role() -> None:
    assert normalize_role(" nurse ") == "NURSE"
    assert normalize_role("") is None
    assert normalize_role(None) is None


def test_is_system_role_name() -> None:
    """All five built-in names are reserved in any case; custom names are not."""
    for role in SystemRole:
        assert is_system_role_name(role.value.lower())
    assert not is_system_role_name("NURSE")
    assert not is_system_role_name(None)


def test_role_allows_static_tables() -> None:
    assert role_allows("clinic", "organization", "manage")
    assert role_allows("CLINIC", "user", "list")
    assert not role_allows("CLINIC", "user", "delete")
    assert role_allows("doctor", "user", "view")
    assert not role_allows("DOCTOR", "organization", "manage")
    assert role_allows("PATIENT", "user", "update")
    assert not role_allows("GUEST", "user", "view")


def test_admin_allowed_outside_registry() -> None:
    assert role_allows("admin", "spaceship", "launch")


def test_unknown_role_has_no_grants() -> None:
    assert dict(role_grants("NURSE")) == {}
    assert not role_allows("NURSE", "user", "view")
    assert not role_allows(None, "user", "view")
