"""Role normalization and aggregation.

Provides:
- ``normalize_role()`` / ``normalize_roles()`` — validate raw role records
  from the data source into zone → bitfield maps.
- ``collapse_roles()`` — OR every role's grants into one map per principal.
- Role and zone lookups on a user (``user_has_role()``, ``get_user_zones()``, ...).

Aggregation is recomputed on every call. Callers that want to memoize it per
request own that cache.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ..exceptions import InvalidPermissionError
from .bitfield import from_bitfield
from .constants import BASE_PERMISSION_FLAGS
from .models import NormalizedRole, Permission, RoleWithAccess, UserWithRoles
from .validation import create_safe_mapping, validate_bitfield, validate_zone_name


def _require_mapping(value: Any, what: str, context: str) -> None:
    if not isinstance(value, Mapping):
        raise InvalidPermissionError(
            f"Invalid {context}: expected {what} mapping, got {type(value).__name__}",
            context=context,
        )


def normalize_role(role: RoleWithAccess) -> NormalizedRole:
    """Validate a raw role record into a :class:`NormalizedRole`.

    Each ``access`` entry contributes ``zone.name → permission``. The
    result is built from plain dicts, so hosts can copy or pickle it.

    Raises:
        InvalidPermissionError: On the first malformed entry, invalid zone
            name or bitfield.

    Example::

        normalize_role({
            "id": "r1",
            "name": "Editor",
            "access": [{"zone": {"name": "content"}, "permission": 14}],
        })
        # {"id": "r1", "name": "Editor", "access": {"content": 14}}
    """
    _require_mapping(role, "role", "role record")
    role_name = role.get("name")
    access: dict[str, int] = create_safe_mapping()

    for entry in role.get("access") or ():
        _require_mapping(entry, "access entry", f"access entry in role '{role_name}'")
        zone = entry.get("zone") or {}
        _require_mapping(zone, "zone", f"zone in role '{role_name}'")
        zone_name = zone.get("name")
        permission = entry.get("permission")
        validate_zone_name(zone_name, f"zone name in role '{role_name}'")
        validate_bitfield(permission, f"permission for zone '{zone_name}'")
        access[zone_name] = permission

    return {
        "id": role.get("id"),
        "name": role_name,
        "access": access,
    }


def normalize_roles(roles: Iterable[RoleWithAccess]) -> list[NormalizedRole]:
    """Normalize every role; a single invalid role fails the whole call."""
    return [normalize_role(role) for role in roles]


def collapse_roles(roles: Iterable[NormalizedRole]) -> dict[str, int]:
    """OR the zone grants of ``roles`` into one zone → bitfield map.

    Every entry is re-validated, so hand-built or mutated roles are safe
    to pass. The result does not depend on role or zone order.
    """
    result: dict[str, int] = create_safe_mapping()

    for role in roles:
        _require_mapping(role, "role", "role record")
        role_name = role.get("name")
        access = role.get("access") or {}
        # Raw roles carry a list here; they must go through normalize_role() first.
        _require_mapping(access, "access", f"access map in role '{role_name}'")
        for zone_name, permission in access.items():
            validate_zone_name(zone_name, f"zone name in role '{role_name}'")
            validate_bitfield(
                permission,
                f"permission value for zone '{zone_name}' in role '{role_name}'",
            )
            result[zone_name] = result.get(zone_name, 0) | permission

    return result


def _user_roles(user: UserWithRoles) -> Sequence[NormalizedRole]:
    return user.get("roles") or ()


def get_global_permissions(user: UserWithRoles) -> dict[str, Permission]:
    """Decode the user's collapsed grants into zone → Permission."""
    result: dict[str, Permission] = create_safe_mapping()
    for zone_name, bitfield in collapse_roles(_user_roles(user)).items():
        result[zone_name] = from_bitfield(bitfield)
    return result


def add_zone_permissions_to_user(user: UserWithRoles) -> dict[str, Any]:
    """Return a copy of ``user`` with an ``access`` key holding its zone permissions."""
    return {**user, "access": get_global_permissions(user)}


def user_has_role(user: UserWithRoles, role_name: str) -> bool:
    """Exact, case-sensitive role name match."""
    return any(role.get("name") == role_name for role in _user_roles(user))


def user_has_any_role(user: UserWithRoles, role_names: Iterable[str]) -> bool:
    return any(user_has_role(user, name) for name in role_names)


def user_has_all_roles(user: UserWithRoles, role_names: Iterable[str]) -> bool:
    return all(user_has_role(user, name) for name in role_names)


def get_user_zones(user: UserWithRoles) -> list[str]:
    """Zones the user has any role entry for (including all-zero grants)."""
    return list(get_global_permissions(user))


def get_user_zones_with_permission(user: UserWithRoles, flag: str) -> list[str]:
    """Zones where the user's decoded permission has ``flag`` set.

    Raises:
        InvalidPermissionError: If ``flag`` is not a base permission flag.
    """
    if flag not in BASE_PERMISSION_FLAGS:
        raise InvalidPermissionError(
            f"Invalid permission flag: {flag!r}. Must be one of {', '.join(BASE_PERMISSION_FLAGS)}.",
            context="permission flag",
        )
    permissions: Mapping[str, Permission] = get_global_permissions(user)
    return [zone_name for zone_name, permission in permissions.items() if getattr(permission, flag)]


__all__ = [
    "add_zone_permissions_to_user",
    "collapse_roles",
    "get_global_permissions",
    "get_user_zones",
    "get_user_zones_with_permission",
    "normalize_role",
    "normalize_roles",
    "user_has_all_roles",
    "user_has_any_role",
    "user_has_role",
]
