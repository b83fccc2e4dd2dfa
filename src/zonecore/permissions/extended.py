"""Application-defined permission bits beyond the base five.

``define_extended_permissions()`` assigns each extra capability the next
free bit starting at bit 5 and returns a codec over base + extended flags::

    decisions = define_extended_permissions({
        "INVITE_MEMBERS": {"label": "Invite Members"},
        "VOTE": {"label": "Vote"},
    })
    decisions.masks["INVITE_MEMBERS"]   # 32
    decisions.masks["VOTE"]             # 64
    decisions.to_bitfield({"read": True, "vote": True})  # 68

Unlike the base codec, the extended codec round-trips every declared flag.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from ..exceptions import ConfigurationError
from .constants import (
    BASE_PERMISSION_FLAGS,
    BASE_PERMISSION_LABELS,
    FIRST_EXTENDED_BIT,
    MAX_EXTENDED_PERMISSIONS,
    PermissionMasks,
)
from .models import Permission
from .validation import validate_bitfield

_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:_[A-Za-z0-9]+)*$")


class ExtendedPermissions:
    """Codec over the base flags plus a set of extension flags.

    Attributes:
        masks: Config key → mask (``"INVITE_MEMBERS" → 32``).
        flags: Extension flag → mask (``"invite_members" → 32``), in bit order.
        extended_bits_mask: OR of every extension mask.
        crud_bits_mask: CREATE | READ | UPDATE | DELETE (admin excluded).
        labels: Flag → label, base flags first.
    """

    __slots__ = ("masks", "flags", "extended_bits_mask", "crud_bits_mask", "labels")

    def __init__(self, config: Mapping[str, Mapping[str, Any]]) -> None:
        if len(config) > MAX_EXTENDED_PERMISSIONS:
            raise ConfigurationError(
                f"Too many extended permissions: {len(config)}. "
                f"Maximum is {MAX_EXTENDED_PERMISSIONS} (bits {FIRST_EXTENDED_BIT}–31)."
            )

        self.masks: dict[str, int] = {}
        self.flags: dict[str, int] = {}
        self.labels: dict[str, str] = dict(BASE_PERMISSION_LABELS)
        self.extended_bits_mask = 0
        self.crud_bits_mask = PermissionMasks.ALL_CRUD

        for index, (key, options) in enumerate(config.items()):
            flag = _flag_name(key)
            if flag in BASE_PERMISSION_FLAGS or flag in self.flags:
                raise ConfigurationError(f"Extended permission {key!r} collides with existing flag {flag!r}")
            label = options.get("label") if isinstance(options, Mapping) else None
            if not isinstance(label, str) or not label:
                raise ConfigurationError(f"Extended permission {key!r} needs a non-empty 'label'")

            mask = 1 << (FIRST_EXTENDED_BIT + index)
            self.masks[key] = mask
            self.flags[flag] = mask
            self.labels[flag] = label
            self.extended_bits_mask |= mask

    def to_bitfield(self, permission: Mapping[str, bool] | Permission) -> int:
        """Encode base and extension flags; missing flags count as False."""
        values = permission.model_dump() if isinstance(permission, Permission) else permission

        bits = 0
        for flag, mask in BASE_PERMISSION_FLAGS.items():
            if values.get(flag):
                bits |= mask
        for flag, mask in self.flags.items():
            if values.get(flag):
                bits |= mask
        return bits

    def from_bitfield(self, bitfield: int) -> dict[str, bool]:
        """Decode a bitfield into base + extension flags.

        Raises:
            InvalidPermissionError: If ``bitfield`` is not a valid 32-bit value.
        """
        validate_bitfield(bitfield, "extended permission bitfield")

        result = {flag: (bitfield & BASE_PERMISSION_FLAGS[flag]) != 0 for flag in BASE_PERMISSION_LABELS}
        for flag, mask in self.flags.items():
            result[flag] = (bitfield & mask) != 0
        return result

    def __repr__(self) -> str:
        return f"ExtendedPermissions(flags={list(self.flags)!r})"


def _flag_name(key: Any) -> str:
    if not isinstance(key, str) or not _KEY_RE.match(key):
        raise ConfigurationError(
            f"Invalid extended permission key {key!r}: use letters and digits separated by single underscores"
        )
    return key.lower()


def define_extended_permissions(config: Mapping[str, Mapping[str, Any]]) -> ExtendedPermissions:
    """Allocate bits 5..31 to ``config``'s keys in declaration order.

    Args:
        config: Key → ``{"label": str}``. Keys become lower-case flag names.

    Raises:
        ConfigurationError: More than 27 keys, a key colliding with a base
            flag, a malformed key, or a missing label.
    """
    return ExtendedPermissions(config)


__all__ = [
    "ExtendedPermissions",
    "define_extended_permissions",
]
