"""Cache key builders. Components must not contain CACHE_KEY_SEP."""

from medonboard.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION


def _check_component(value: str, name: str) -> None:
    if not value or CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must be non-empty and must not "
            f"contain separator {CACHE_KEY_SEP!r}"
        )


def role_permissions_key(role_id: str) -> str:
    """Cache key for the (resource, action) list of a dynamic role."""
    _check_component(role_id, "role_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}role{CACHE_KEY_SEP}{role_id}"


def all_role_permissions_pattern() -> str:
    """SCAN pattern matching every dynamic-role permission entry."""
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}role{CACHE_KEY_SEP}*"
