"""Permission bit layout, limits and zone-name rules for zonecore.

Provides:
- ``PermissionMasks`` — the five base capability bits.
- ``BASE_PERMISSION_FLAGS`` — canonical flag order used by the codec.
- Bitfield limits (``MIN_VALID_PERMISSION`` / ``MAX_VALID_PERMISSION``).
- Zone-name rules (``MAX_ZONE_NAME_LENGTH``, ``RESERVED_ZONE_NAMES``).
- ``DEFAULT_ACCESS_ZONES`` — common zones for a typical application.
"""

from __future__ import annotations


class PermissionMasks:
    """Base permission bits.

    Layout::

        bit 4  ADMIN   16
        bit 3  CREATE   8
        bit 2  READ     4
        bit 1  UPDATE   2
        bit 0  DELETE   1

    ``ADMIN`` is an independent bit, not "all CRUD". Callers who need every
    CRUD capability use :attr:`ALL_CRUD` (15) explicitly.
    """

    ADMIN = 0b10000
    CREATE = 0b01000
    READ = 0b00100
    UPDATE = 0b00010
    DELETE = 0b00001

    ALL_CRUD = CREATE | READ | UPDATE | DELETE
    ALL = ALL_CRUD | ADMIN


# Flag name → mask, in canonical encoding order.
BASE_PERMISSION_FLAGS: dict[str, int] = {
    "create": PermissionMasks.CREATE,
    "read": PermissionMasks.READ,
    "update": PermissionMasks.UPDATE,
    "delete": PermissionMasks.DELETE,
    "admin": PermissionMasks.ADMIN,
}

BASE_PERMISSION_LABELS: dict[str, str] = {
    "admin": "Admin",
    "create": "Create",
    "read": "Read",
    "update": "Update",
    "delete": "Delete",
}

# ── Bitfield limits ─────────────────────────────────
MIN_VALID_PERMISSION = 0
MAX_VALID_PERMISSION = 0xFFFFFFFF  # 32 bits

# ── Extended permissions ────────────────────────────
FIRST_EXTENDED_BIT = 5
MAX_EXTENDED_PERMISSIONS = 32 - FIRST_EXTENDED_BIT  # bits 5–31

# ── Zone names ──────────────────────────────────────
MAX_ZONE_NAME_LENGTH = 128

# Names that collide with object internals in the JavaScript clients that
# share role data with us. Rejected everywhere so both sides agree.
RESERVED_ZONE_NAMES = frozenset(
    {
        "__proto__",
        "constructor",
        "hasOwnProperty",
        "toString",
        "valueOf",
        "isPrototypeOf",
        "propertyIsEnumerable",
        "toLocaleString",
        "__defineGetter__",
        "__defineSetter__",
        "__lookupGetter__",
        "__lookupSetter__",
    }
)

DEFAULT_ACCESS_ZONES: tuple[str, ...] = (
    "content",  # posts, articles, pages
    "users",
    "admin",
    "settings",
    "reports",
    "billing",
    "support",
    "api",
    "files",
    "notifications",
)


__all__ = [
    "BASE_PERMISSION_FLAGS",
    "BASE_PERMISSION_LABELS",
    "DEFAULT_ACCESS_ZONES",
    "FIRST_EXTENDED_BIT",
    "MAX_EXTENDED_PERMISSIONS",
    "MAX_VALID_PERMISSION",
    "MAX_ZONE_NAME_LENGTH",
    "MIN_VALID_PERMISSION",
    "PermissionMasks",
    "RESERVED_ZONE_NAMES",
]
