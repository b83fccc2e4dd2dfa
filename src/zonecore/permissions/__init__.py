"""Zone-scoped bitfield permissions.

Defines:
- PermissionMasks: Base capability bits (CREATE/READ/UPDATE/DELETE/ADMIN)
- Permission: Decoded view of a bitfield
- Validation guards for bitfields and zone names
- Bitfield codec (to_bitfield / from_bitfield / combine)
- Role normalization and OR aggregation (normalize_role / collapse_roles)
- Permission evaluation (check_permission / assert_access / get_user_permissions)
- define_extended_permissions(): Application-defined bits 5..31
"""

from .access import (
    assert_access,
    assert_data_access,
    check_permission,
    get_user_permissions,
    get_user_zone_permissions,
    has_permissions,
    transform_item_access_schema,
    user_has_zone_permission,
)
from .bitfield import (
    combine,
    from_bitfield,
    has_flag,
    normalize_input,
    normalize_input_to_bitfield,
    role_to_bitfield_map,
    to_bitfield,
)
from .constants import (
    BASE_PERMISSION_FLAGS,
    BASE_PERMISSION_LABELS,
    DEFAULT_ACCESS_ZONES,
    FIRST_EXTENDED_BIT,
    MAX_EXTENDED_PERMISSIONS,
    MAX_VALID_PERMISSION,
    MAX_ZONE_NAME_LENGTH,
    MIN_VALID_PERMISSION,
    RESERVED_ZONE_NAMES,
    PermissionMasks,
)
from .extended import ExtendedPermissions, define_extended_permissions
from .models import (
    AccessControlledItem,
    ItemAccessSettings,
    NormalizedRole,
    Permission,
    PermissionInput,
    RequiredPermission,
    RoleWithAccess,
    UserWithRoles,
)
from .roles import (
    add_zone_permissions_to_user,
    collapse_roles,
    get_global_permissions,
    get_user_zones,
    get_user_zones_with_permission,
    normalize_role,
    normalize_roles,
    user_has_all_roles,
    user_has_any_role,
    user_has_role,
)
from .validation import (
    create_safe_mapping,
    describe_bitfield,
    is_valid_bitfield,
    is_valid_permission_mask,
    is_valid_zone_name,
    safe_bitfield,
    validate_allowed_permissions,
    validate_bitfield,
    validate_permission_mask,
    validate_zone_name,
)

__all__ = [
    "AccessControlledItem",
    "BASE_PERMISSION_FLAGS",
    "BASE_PERMISSION_LABELS",
    "DEFAULT_ACCESS_ZONES",
    "ExtendedPermissions",
    "FIRST_EXTENDED_BIT",
    "ItemAccessSettings",
    "MAX_EXTENDED_PERMISSIONS",
    "MAX_VALID_PERMISSION",
    "MAX_ZONE_NAME_LENGTH",
    "MIN_VALID_PERMISSION",
    "NormalizedRole",
    "Permission",
    "PermissionInput",
    "PermissionMasks",
    "RESERVED_ZONE_NAMES",
    "RequiredPermission",
    "RoleWithAccess",
    "UserWithRoles",
    "add_zone_permissions_to_user",
    "assert_access",
    "assert_data_access",
    "check_permission",
    "collapse_roles",
    "combine",
    "create_safe_mapping",
    "define_extended_permissions",
    "describe_bitfield",
    "from_bitfield",
    "get_global_permissions",
    "get_user_permissions",
    "get_user_zone_permissions",
    "get_user_zones",
    "get_user_zones_with_permission",
    "has_flag",
    "has_permissions",
    "is_valid_bitfield",
    "is_valid_permission_mask",
    "is_valid_zone_name",
    "normalize_input",
    "normalize_input_to_bitfield",
    "normalize_role",
    "normalize_roles",
    "role_to_bitfield_map",
    "safe_bitfield",
    "to_bitfield",
    "transform_item_access_schema",
    "user_has_all_roles",
    "user_has_any_role",
    "user_has_role",
    "user_has_zone_permission",
    "validate_allowed_permissions",
    "validate_bitfield",
    "validate_permission_mask",
    "validate_zone_name",
]
