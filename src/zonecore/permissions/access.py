"""Permission evaluation: role checks, assertions and item-level overrides.

Provides runtime functions to decide whether a principal's roles satisfy a
required permission set. Used by request handlers and data-access layers.

A required permission is either one zone → mask mapping (every zone must be
satisfied) or a list of such mappings (any one of them is enough)::

    check_permission({"content": READ}, roles)                      # AND
    check_permission([{"content": DELETE}, {"admin": READ}], roles)  # OR of ANDs
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..exceptions import ForbiddenError, InvalidPermissionError, UnauthorizedError
from ..logging import get_zone_logger, safe_log_value
from .bitfield import from_bitfield, has_flag, normalize_input, normalize_input_to_bitfield
from .constants import PermissionMasks
from .models import (
    AccessControlledItem,
    ItemAccessSettings,
    NormalizedRole,
    Permission,
    RequiredPermission,
    UserWithRoles,
)
from .roles import collapse_roles
from .validation import validate_permission_mask

logger = logging.getLogger(__name__)


def _candidates(required: RequiredPermission) -> list[Mapping[str, int]]:
    """Split a required permission into its OR-alternatives."""
    if isinstance(required, Mapping):
        return [required]
    if isinstance(required, Sequence) and not isinstance(required, (str, bytes)):
        for candidate in required:
            if not isinstance(candidate, Mapping):
                raise InvalidPermissionError(
                    f"Invalid required permission entry: expected mapping, got {type(candidate).__name__}",
                    context="required permission",
                )
        return list(required)
    raise InvalidPermissionError(
        f"Invalid required permission: expected mapping or list of mappings, got {type(required).__name__}",
        context="required permission",
    )


def _non_zero_requirements(candidate: Mapping[str, int]) -> dict[str, int]:
    needed: dict[str, int] = {}
    for zone_name, mask in candidate.items():
        validate_permission_mask(mask, f"required permission for zone '{zone_name}'")
        # A zero requirement is a placeholder and is always satisfied.
        if mask != 0:
            needed[zone_name] = mask
    return needed


def check_permission(required: RequiredPermission, roles: Iterable[NormalizedRole]) -> bool:
    """Check whether ``roles`` satisfy ``required``.

    Checks in order, for each alternative in ``required``:
    1. Drop zones whose required mask is ``0``.
    2. An alternative with nothing left passes.
    3. Otherwise every remaining zone needs all of its bits in the
       collapsed role grants.

    The call passes if any alternative passes. An empty list passes.

    Args:
        required: Zone → mask mapping, or a list of them (OR semantics).
        roles: The principal's normalized roles.

    Returns:
        True if access is granted.

    Example::

        role = {"id": "r1", "name": "Editor", "access": {"content": READ | UPDATE}}
        check_permission({"content": READ}, [role])                        # True
        check_permission({"content": DELETE}, [role])                      # False
        check_permission([{"content": DELETE}, {"content": READ}], [role])  # True
    """
    candidates = [_non_zero_requirements(c) for c in _candidates(required)]
    if not candidates:
        return True

    granted: Optional[dict[str, int]] = None
    for needed in candidates:
        if not needed:
            return True
        if granted is None:
            granted = collapse_roles(roles)
        if all((granted.get(zone_name, 0) & mask) == mask for zone_name, mask in needed.items()):
            return True

    return False


def assert_access(required: RequiredPermission, roles: Iterable[NormalizedRole]) -> None:
    """Raise :class:`UnauthorizedError` unless :func:`check_permission` passes."""
    if not check_permission(required, roles):
        logger.debug("Access assertion failed for requirement %s", safe_log_value(required))
        raise UnauthorizedError("Not authenticated")


def assert_data_access(
    data: Optional[Mapping[str, Any]],
    required: RequiredPermission,
    user: UserWithRoles,
) -> bool:
    """Check access to a data record, letting its owner through unconditionally.

    The owner (``data["user_id"] == user["id"]``) bypasses every zone check,
    including OR-lists. ``data`` may be ``None``, which is treated as not owned.

    Returns:
        True when access is granted.

    Raises:
        ForbiddenError: When the user is not the owner and the roles fall short.
    """
    user_id = user.get("id")
    log = get_zone_logger(__name__, principal_id=safe_log_value(user_id))
    owner_id = data.get("user_id") if data is not None else None
    if owner_id is not None and owner_id == user_id:
        log.debug("Ownership bypass")
        return True

    if not check_permission(required, user.get("roles") or ()):
        log.debug("Data access denied for requirement %s", safe_log_value(required))
        raise ForbiddenError("Unauthorized")

    return True


def _owner_id(item: AccessControlledItem) -> Optional[str]:
    uid = item.get("uid")
    if isinstance(uid, str):
        return uid
    if isinstance(uid, Mapping):
        return uid.get("id")
    return None


def get_user_permissions(
    user: UserWithRoles,
    item: AccessControlledItem,
    zone_key: str,
) -> Permission:
    """Resolve the user's permission on one item within ``zone_key``.

    When the item carries access settings, checks in order:
    1. Owner (``item["uid"]``, string or ``{"id": ...}``) → admin permission.
    2. Per-user override in ``settings.access.users`` → that override.
    3. Role grant for ``zone_key``, ANDed with ``settings.access.global``
       when present.

    Without access settings the role grant for ``zone_key`` is returned.
    A zone the user has no grant for decodes to an all-false permission.
    """
    user_id = user.get("id")
    log = get_zone_logger(__name__, principal_id=safe_log_value(user_id), zone=zone_key)
    access: Optional[ItemAccessSettings] = (item.get("settings") or {}).get("access")

    if access is not None:
        owner_id = _owner_id(item)
        if owner_id is not None and owner_id == user_id:
            log.debug("Owner resolved to admin on item")
            return from_bitfield(PermissionMasks.ADMIN)

        for override in access.get("users") or ():
            if user_id is not None and override.get("uid") == user_id:
                log.debug("Per-user override applied")
                return normalize_input(override["access"])

        zone_bits = collapse_roles(user.get("roles") or ()).get(zone_key, 0)
        global_access = access.get("global")
        if global_access is not None:
            return from_bitfield(zone_bits & normalize_input_to_bitfield(global_access))
        return from_bitfield(zone_bits)

    return from_bitfield(collapse_roles(user.get("roles") or ()).get(zone_key, 0))


def transform_item_access_schema(settings: ItemAccessSettings) -> dict[str, Any]:
    """Return a copy of ``settings`` with every override decoded to a Permission."""
    transformed: dict[str, Any] = dict(settings)

    if settings.get("global") is not None:
        transformed["global"] = normalize_input(settings["global"])

    users = settings.get("users")
    if users:
        transformed["users"] = [{**entry, "access": normalize_input(entry["access"])} for entry in users]

    return transformed


def has_permissions(user: UserWithRoles, item: AccessControlledItem, write: bool = False) -> bool:
    """Legacy read/write check against item settings.

    Checks in order:
    1. ``settings.access.global`` grants READ → True.
    2. Legacy ``settings.permissions``: ``0`` is full access, ``1`` is
       read-only (passes only when ``write`` is False). Any other value
       grants nothing.

    ``user`` is accepted for signature compatibility; roles are not consulted.
    """
    settings = item.get("settings") or {}
    global_access = (settings.get("access") or {}).get("global")

    if global_access is not None:
        if has_flag(normalize_input_to_bitfield(global_access), PermissionMasks.READ):
            return True

    legacy = settings.get("permissions")
    if isinstance(legacy, int) and not isinstance(legacy, bool):
        return legacy == 0 or (legacy == 1 and not write)

    return False


def user_has_zone_permission(user: UserWithRoles, zone_name: str, mask: int) -> bool:
    """Check that the user's collapsed grant for ``zone_name`` contains ``mask``."""
    zone_bits = collapse_roles(user.get("roles") or ()).get(zone_name, 0)
    return has_flag(zone_bits, mask)


def get_user_zone_permissions(user: UserWithRoles, zone_name: str) -> Permission:
    """Decode the user's collapsed grant for ``zone_name``."""
    return from_bitfield(collapse_roles(user.get("roles") or ()).get(zone_name, 0))


__all__ = [
    "assert_access",
    "assert_data_access",
    "check_permission",
    "get_user_permissions",
    "get_user_zone_permissions",
    "has_permissions",
    "transform_item_access_schema",
    "user_has_zone_permission",
]
