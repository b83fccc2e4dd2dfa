"""Value types and record shapes used by the permission engine.

``Permission`` is the only model we construct ourselves. Role, user and item
records belong to the caller (usually rows from an ORM or decoded JSON), so
they are described as ``TypedDict`` shapes: any mapping with these keys is
accepted.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, TypedDict, Union

from pydantic import BaseModel


class Permission(BaseModel):
    """Decoded view of a base permission bitfield."""

    model_config = {"frozen": True, "strict": True, "extra": "forbid"}

    create: bool = False
    read: bool = False
    update: bool = False
    delete: bool = False
    admin: bool = False


class AccessZone(TypedDict, total=False):
    id: str
    name: str


class RoleZoneAccess(TypedDict):
    zone: AccessZone
    permission: int


class RoleWithAccess(TypedDict):
    """Role as delivered by the role data source."""

    id: str
    name: str
    access: Sequence[RoleZoneAccess]


class NormalizedRole(TypedDict):
    id: str
    name: str
    access: Mapping[str, int]


class UserWithRoles(TypedDict, total=False):
    id: str
    email: str
    roles: Sequence[NormalizedRole]


class UserAccessOverride(TypedDict):
    uid: str
    access: "PermissionInput"


# ``global`` is a keyword, hence the functional form.
ItemAccessSettings = TypedDict(
    "ItemAccessSettings",
    {"global": "PermissionInput", "users": Sequence[UserAccessOverride]},
    total=False,
)


class ItemSettings(TypedDict, total=False):
    access: ItemAccessSettings
    permissions: int


class AccessControlledItem(TypedDict, total=False):
    uid: Union[str, Mapping[str, Any]]
    user_id: str
    settings: ItemSettings


Bitfield = int
ZonePermissionMap = Mapping[str, int]
RequiredPermission = Union[Mapping[str, int], Sequence[Mapping[str, int]]]
PermissionInput = Union[Permission, Mapping[str, bool], int]


__all__ = [
    "AccessControlledItem",
    "AccessZone",
    "Bitfield",
    "ItemAccessSettings",
    "ItemSettings",
    "NormalizedRole",
    "Permission",
    "PermissionInput",
    "RequiredPermission",
    "RoleWithAccess",
    "RoleZoneAccess",
    "UserAccessOverride",
    "UserWithRoles",
    "ZonePermissionMap",
]
