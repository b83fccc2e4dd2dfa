"""Conversion between :class:`Permission` records and integer bitfields.

The base codec only knows the five named flags. Bits outside them are
ignored by :func:`from_bitfield`, so they do not survive a decode/encode
round trip; use :mod:`zonecore.permissions.extended` for extra bits.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from ..exceptions import InvalidPermissionError
from .constants import BASE_PERMISSION_FLAGS
from .models import Permission, PermissionInput
from .validation import (
    create_safe_mapping,
    validate_bitfield,
    validate_permission_mask,
    validate_zone_name,
)


def to_bitfield(permission: Permission) -> int:
    """Encode a permission record, OR-ing the mask of every set flag.

    Example::

        to_bitfield(Permission(create=True, read=True))  # 12
    """
    bitfield = 0
    for flag, mask in BASE_PERMISSION_FLAGS.items():
        if getattr(permission, flag):
            bitfield |= mask
    return bitfield


def from_bitfield(bitfield: int) -> Permission:
    """Decode a bitfield into a permission record.

    Raises:
        InvalidPermissionError: If ``bitfield`` is not a valid 32-bit value.
    """
    validate_bitfield(bitfield, "bitfield conversion input")
    return Permission(**{flag: (bitfield & mask) == mask for flag, mask in BASE_PERMISSION_FLAGS.items()})


def role_to_bitfield_map(permissions: Mapping[str, Permission]) -> dict[str, int]:
    """Encode a zone → Permission mapping into zone → bitfield."""
    result: dict[str, int] = create_safe_mapping()
    for zone_name, permission in permissions.items():
        validate_zone_name(zone_name, "zone name in permission object")
        result[zone_name] = to_bitfield(normalize_input(permission))
    return result


def _permission_from_mapping(flags: Mapping[str, Any]) -> Permission:
    try:
        return Permission.model_validate(dict(flags))
    except ValidationError as e:
        raise InvalidPermissionError(
            f"Invalid permission object: {e.error_count()} invalid flag(s)",
            context="permission input",
        ) from e


def normalize_input(value: PermissionInput) -> Permission:
    """Accept a Permission, a flag mapping or a raw bitfield; return a Permission."""
    if isinstance(value, Permission):
        return value
    if isinstance(value, Mapping):
        return _permission_from_mapping(value)
    return from_bitfield(value)


def normalize_input_to_bitfield(value: PermissionInput) -> int:
    """Accept a Permission, a flag mapping or a raw bitfield; return a bitfield."""
    if isinstance(value, Permission):
        return to_bitfield(value)
    if isinstance(value, Mapping):
        return to_bitfield(_permission_from_mapping(value))
    validate_bitfield(value, "permission input")
    return value


def has_flag(bitfield: int, required_mask: int) -> bool:
    """Check that every bit of ``required_mask`` is set in ``bitfield``.

    ``has_flag(READ, READ | UPDATE)`` is ``False``: a composite mask needs
    all of its bits.
    """
    validate_bitfield(bitfield, "permission bitfield")
    validate_permission_mask(required_mask, "permission mask")
    return (bitfield & required_mask) == required_mask


def combine(*bitfields: int) -> int:
    """Validate each bitfield, then OR them together. ``combine()`` is 0."""
    for index, bitfield in enumerate(bitfields):
        validate_bitfield(bitfield, f"bitfield at index {index}")

    combined = 0
    for bitfield in bitfields:
        combined |= bitfield
    return combined


__all__ = [
    "combine",
    "from_bitfield",
    "has_flag",
    "normalize_input",
    "normalize_input_to_bitfield",
    "role_to_bitfield_map",
    "to_bitfield",
]
