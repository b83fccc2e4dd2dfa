"""Range, type and shape guards for bitfields and zone names.

Every other module funnels untrusted integers and strings through here
before using them. All failures raise :class:`InvalidPermissionError`,
distinguished only by message and context.

Bitfields are plain ``int`` values in ``[0, 0xFFFFFFFF]``. ``bool`` is
rejected even though it subclasses ``int``, and so is every ``float``:
``-1`` (all bits set), ``2**32`` and ``True`` are the classic escalation
inputs.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from ..exceptions import InvalidPermissionError
from .constants import (
    BASE_PERMISSION_FLAGS,
    MAX_VALID_PERMISSION,
    MAX_ZONE_NAME_LENGTH,
    MIN_VALID_PERMISSION,
    RESERVED_ZONE_NAMES,
)

logger = logging.getLogger(__name__)

_V = TypeVar("_V")


# ── Bitfields ───────────────────────────────────────


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_bitfield(bitfield: Any) -> bool:
    """Check that ``bitfield`` is an integer within the 32-bit permission range."""
    if not _is_int(bitfield):
        return False
    return MIN_VALID_PERMISSION <= bitfield <= MAX_VALID_PERMISSION


def _bitfield_reason(bitfield: Any) -> str:
    if not _is_int(bitfield):
        return "Must be a finite integer."
    if bitfield < MIN_VALID_PERMISSION:
        return "Must be non-negative."
    return f"Must not exceed {MAX_VALID_PERMISSION} (32-bit limit)."


def validate_bitfield(bitfield: Any, context: str = "permission bitfield") -> None:
    """Raise :class:`InvalidPermissionError` unless ``bitfield`` is valid.

    Args:
        bitfield: Value to check.
        context: Where the value came from, embedded in the error message.

    Raises:
        InvalidPermissionError: e.g.
            ``"Invalid bitfield conversion input: 4294967296. Must not exceed
            4294967295 (32-bit limit)."``
    """
    if is_valid_bitfield(bitfield):
        return
    raise InvalidPermissionError(
        f"Invalid {context}: {bitfield!r}. {_bitfield_reason(bitfield)}",
        context=context,
    )


def is_valid_permission_mask(mask: Any) -> bool:
    """Masks follow the bitfield rules; any combination of bits is allowed."""
    return is_valid_bitfield(mask)


def validate_permission_mask(mask: Any, context: str = "permission mask") -> None:
    if not is_valid_permission_mask(mask):
        raise InvalidPermissionError(
            f"Invalid {context}: {mask!r}. Must be a valid permission mask or combination.",
            context=context,
        )


def safe_bitfield(value: Any, context: str = "bitfield input") -> int:
    """Validate ``value`` and return it as a bitfield.

    Rejects non-numbers with a type-specific message before the range check.
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidPermissionError(
            f"Invalid {context}: expected int, got {type(value).__name__}",
            context=context,
        )
    validate_bitfield(value, context)
    return value


# ── Zone names ──────────────────────────────────────


def _zone_name_reason(name: Any) -> str | None:
    if not isinstance(name, str) or not name:
        return "must be a non-empty string"
    if len(name) > MAX_ZONE_NAME_LENGTH:
        return f"exceeds maximum length of {MAX_ZONE_NAME_LENGTH} characters"
    if name in RESERVED_ZONE_NAMES:
        return "is a reserved property name"
    if name.startswith("_") or name.endswith("_"):
        return "must not start or end with an underscore"
    return None


def is_valid_zone_name(name: Any) -> bool:
    """Check a zone name against the length, reserved-name and underscore rules."""
    return _zone_name_reason(name) is None


def validate_zone_name(name: Any, context: str = "zone name") -> None:
    """Raise :class:`InvalidPermissionError` unless ``name`` is a usable zone name.

    Overlong names are not echoed back in full.
    """
    reason = _zone_name_reason(name)
    if reason is None:
        return

    if isinstance(name, str) and name in RESERVED_ZONE_NAMES:
        logger.warning("Rejected reserved zone name %r (%s)", name, context)

    shown = name
    if isinstance(name, str) and len(name) > MAX_ZONE_NAME_LENGTH:
        shown = name[:32] + "…"
    raise InvalidPermissionError(
        f"Invalid {context}: {shown!r} {reason}",
        context=context,
    )


def create_safe_mapping() -> dict[str, _V]:
    """Return an empty mapping for attacker-influenced keys.

    Item lookups on a ``dict`` only ever see stored keys, so a key such as
    ``"__proto__"`` or ``"toString"`` can never resolve to a method.
    """
    return {}


# ── Diagnostics ─────────────────────────────────────


def describe_bitfield(bitfield: Any) -> str:
    """Render a bitfield as ``"CREATE | READ | CUSTOM(32)"``.

    Never raises: ``0`` gives ``"No permissions"`` and invalid input gives
    ``"Invalid bitfield: <value>"``.
    """
    if not is_valid_bitfield(bitfield):
        return f"Invalid bitfield: {bitfield}"
    if bitfield == 0:
        return "No permissions"

    names = [flag.upper() for flag, mask in BASE_PERMISSION_FLAGS.items() if bitfield & mask]
    known_bits = 0
    for mask in BASE_PERMISSION_FLAGS.values():
        known_bits |= mask
    unknown_bits = bitfield & ~known_bits
    if unknown_bits:
        names.append(f"CUSTOM({unknown_bits})")
    return " | ".join(names)


def validate_allowed_permissions(
    bitfield: Any,
    allowed_permissions: Any,
    context: str = "permission validation",
) -> None:
    """Raise if ``bitfield`` sets any bit missing from ``allowed_permissions``.

    Example::

        validate_allowed_permissions(READ | DELETE, READ | UPDATE, "api key scope")
        # InvalidPermissionError: api key scope: Bitfield contains disallowed
        # permissions. Requested: READ | DELETE, Allowed: READ | UPDATE,
        # Disallowed: DELETE
    """
    validate_bitfield(bitfield, f"{context} bitfield")
    validate_bitfield(allowed_permissions, f"{context} allowed permissions")

    disallowed = bitfield & ~allowed_permissions
    if disallowed:
        raise InvalidPermissionError(
            f"{context}: Bitfield contains disallowed permissions. "
            f"Requested: {describe_bitfield(bitfield)}, "
            f"Allowed: {describe_bitfield(allowed_permissions)}, "
            f"Disallowed: {describe_bitfield(disallowed)}",
            context=context,
        )


__all__ = [
    "create_safe_mapping",
    "describe_bitfield",
    "is_valid_bitfield",
    "is_valid_permission_mask",
    "is_valid_zone_name",
    "safe_bitfield",
    "validate_allowed_permissions",
    "validate_bitfield",
    "validate_permission_mask",
    "validate_zone_name",
]
