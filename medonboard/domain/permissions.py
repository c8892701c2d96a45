"""Static permission model: statement registry and system-role grant tables.

All tables here are immutable and built once at import. Role lookups are pure
functions over these tables; dynamic (database-defined) roles are resolved by
AuthorizationService through IPermissionResolver.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from medonboard.domain.enums import SystemRole

_CRUD = ("create", "update", "delete", "view", "list")
_MANAGED = (*_CRUD, "manage")

STATEMENTS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "user": ("create", "update", "delete", "ban", "unban", "view", "list"),
        "organization": _MANAGED,
        "approval_request": _MANAGED,
        "permission": (*_CRUD, "assign", "revoke"),
        "subscription": _MANAGED,
        "recieve_payment": _MANAGED,
        "reviews": _MANAGED,
        "user_query": _MANAGED,
        "role": ("create", "update", "delete", "assign", "revoke", "view", "list"),
        "appointment": _MANAGED,
        "invoice": (*_CRUD, "approve", "pay"),
        "report": (*_CRUD, "export"),
        "settings": ("view", "update"),
    }
)


def _grants(table: dict[str, tuple[str, ...]]) -> Mapping[str, frozenset[str]]:
    return MappingProxyType({res: frozenset(acts) for res, acts in table.items()})


ROLE_GRANTS: Mapping[SystemRole, Mapping[str, frozenset[str]]] = MappingProxyType(
    {
        SystemRole.ADMIN: _grants(dict(STATEMENTS)),
        SystemRole.CLINIC: _grants(
            {"user": ("view", "list"), "organization": ("view", "manage")}
        ),
        SystemRole.DOCTOR: _grants({"user": ("view",), "organization": ("view",)}),
        SystemRole.PATIENT: _grants(
            {"user": ("view", "update"), "organization": ("view",)}
        ),
        SystemRole.GUEST: _grants({}),
    }
)

_ACTION_VERBS: Mapping[str, str] = MappingProxyType(
    {
        "create": "Create",
        "update": "Update",
        "delete": "Delete",
        "view": "View",
        "list": "List",
        "manage": "Manage",
        "ban": "Ban",
        "unban": "Unban",
        "assign": "Assign",
        "revoke": "Revoke",
        "approve": "Approve",
        "pay": "Pay",
        "export": "Export",
    }
)


def _describe(resource: str, action: str) -> str:
    verb = _ACTION_VERBS.get(action, action.capitalize())
    return f"{verb} {resource.replace('_', ' ')}"


# Catalogue seeded into the permission table: (resource, action, description).
SEEDED_PERMISSIONS: tuple[tuple[str, str, str], ...] = tuple(
    (resource, action, _describe(resource, action))
    for resource, actions in STATEMENTS.items()
    for action in actions
)

SEEDED_PERMISSION_KEYS: frozenset[tuple[str, str]] = frozenset(
    (resource, action) for resource, action, _ in SEEDED_PERMISSIONS
)


def normalize_role(role: str | None) -> str | None:
    """Return the canonical (upper-case, stripped) role name, or None if blank."""
    if role is None:
        return None
    normalized = role.strip().upper()
    return normalized or None


def _is_role(role: str | None, expected: SystemRole) -> bool:
    return normalize_role(role) == expected.value


def is_admin_role(role: str | None) -> bool:
    """True for 'ADMIN' in any case; False for None or ''."""
    return _is_role(role, SystemRole.ADMIN)


def is_clinic_role(role: str | None) -> bool:
    return _is_role(role, SystemRole.CLINIC)


def is_doctor_role(role: str | None) -> bool:
    return _is_role(role, SystemRole.DOCTOR)


def is_patient_role(role: str | None) -> bool:
    return _is_role(role, SystemRole.PATIENT)


def is_system_role_name(name: str | None) -> bool:
    """True if name is reserved for a built-in role (ADMIN, DOCTOR, PATIENT, CLINIC, GUEST)."""
    normalized = normalize_role(name)
    return normalized is not None and normalized in SystemRole.values()


def role_grants(role: str | None) -> Mapping[str, frozenset[str]]:
    """Static grants for a system role name; empty mapping for unknown roles."""
    parsed = SystemRole.parse(role)
    if parsed is None:
        return MappingProxyType({})
    return ROLE_GRANTS[parsed]


def role_allows(role: str | None, resource: str, action: str) -> bool:
    """True if the static table for role grants (resource, action).

    Admin is granted everything, including pairs outside STATEMENTS.
    """
    if is_admin_role(role):
        return True
    return action in role_grants(role).get(resource, frozenset())


def all_permissions() -> list[tuple[str, str]]:
    """Every (resource, action) pair in the statement registry, in declaration order."""
    return [
        (resource, action)
        for resource, actions in STATEMENTS.items()
        for action in actions
    ]
