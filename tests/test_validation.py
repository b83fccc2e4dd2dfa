"""Tests for bitfield and zone-name validation."""

from __future__ import annotations

import logging

import pytest
from zonecore import (
    MAX_VALID_PERMISSION,
    MAX_ZONE_NAME_LENGTH,
    RESERVED_ZONE_NAMES,
    InvalidPermissionError,
    PermissionMasks,
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


class TestIsValidBitfield:
    """Tests for is_valid_bitfield()."""

    def test_boundaries(self) -> None:
        """0 and 0xFFFFFFFF are valid; one past either end is not."""
        assert is_valid_bitfield(0) is True
        assert is_valid_bitfield(0xFFFFFFFF) is True
        assert is_valid_bitfield(0x100000000) is False
        assert is_valid_bitfield(-1) is False

    def test_all_base_masks_valid(self) -> None:
        """Every base mask and their union are valid bitfields."""
        for mask in (
            PermissionMasks.CREATE,
            PermissionMasks.READ,
            PermissionMasks.UPDATE,
            PermissionMasks.DELETE,
            PermissionMasks.ADMIN,
            PermissionMasks.ALL,
        ):
            assert is_valid_bitfield(mask)

    def test_rejects_floats(self) -> None:
        """Fractions, NaN and infinities are rejected, as are integral floats."""
        assert is_valid_bitfield(1.5) is False
        assert is_valid_bitfield(float("nan")) is False
        assert is_valid_bitfield(float("inf")) is False
        assert is_valid_bitfield(float("-inf")) is False
        assert is_valid_bitfield(4.0) is False

    def test_rejects_non_numbers(self) -> None:
        """Strings, bools, containers and None are never bitfields."""
        for value in ("15", True, False, [], {}, None):
            assert is_valid_bitfield(value) is False, value

    def test_permission_mask_same_rules(self) -> None:
        """Permission masks follow the bitfield rules."""
        assert is_valid_permission_mask(PermissionMasks.READ | PermissionMasks.UPDATE)
        assert not is_valid_permission_mask(-1)


class TestValidateBitfield:
    """Tests for validate_bitfield() error messages."""

    def test_valid_does_not_raise(self) -> None:
        validate_bitfield(0)
        validate_bitfield(MAX_VALID_PERMISSION)

    def test_negative_reason(self) -> None:
        with pytest.raises(InvalidPermissionError, match="Must be non-negative"):
            validate_bitfield(-1)

    def test_too_large_reason(self) -> None:
        with pytest.raises(InvalidPermissionError, match="32-bit limit"):
            validate_bitfield(0x100000000)

    def test_non_integer_reason(self) -> None:
        with pytest.raises(InvalidPermissionError, match="finite integer"):
            validate_bitfield(1.5)

    def test_context_in_message(self) -> None:
        """The caller's context label is embedded and kept on the error."""
        with pytest.raises(InvalidPermissionError) as exc_info:
            validate_bitfield(-4, "role import")
        assert "Invalid role import: -4" in str(exc_info.value)
        assert exc_info.value.context == "role import"
        assert exc_info.value.code == "INVALID_PERMISSION"

    def test_permission_mask_message(self) -> None:
        with pytest.raises(InvalidPermissionError, match="valid permission mask"):
            validate_permission_mask(-1)


class TestSafeBitfield:
    """Tests for safe_bitfield()."""

    def test_returns_value(self) -> None:
        assert safe_bitfield(12) == 12

    def test_type_error_message(self) -> None:
        with pytest.raises(InvalidPermissionError, match="expected int, got str"):
            safe_bitfield("12")

    def test_bool_rejected(self) -> None:
        with pytest.raises(InvalidPermissionError, match="got bool"):
            safe_bitfield(True)

    def test_range_checked(self) -> None:
        with pytest.raises(InvalidPermissionError, match="non-negative"):
            safe_bitfield(-1)


class TestZoneNames:
    """Tests for is_valid_zone_name() / validate_zone_name()."""

    def test_accepts_valid_names(self) -> None:
        for name in ("content", "users", "admin", "user-settings", "user123", "a_b"):
            assert is_valid_zone_name(name), name

    def test_length_boundary(self) -> None:
        """128 characters pass, 129 do not."""
        assert is_valid_zone_name("a" * MAX_ZONE_NAME_LENGTH)
        assert not is_valid_zone_name("a" * (MAX_ZONE_NAME_LENGTH + 1))

    def test_rejects_reserved(self) -> None:
        for name in RESERVED_ZONE_NAMES:
            assert not is_valid_zone_name(name), name

    def test_rejects_underscore_edges(self) -> None:
        for name in ("_x", "x_", "_internal", "__dunder__"):
            assert not is_valid_zone_name(name), name

    def test_rejects_empty_and_non_strings(self) -> None:
        for name in ("", None, 5, ["content"]):
            assert not is_valid_zone_name(name)

    def test_specific_messages(self) -> None:
        with pytest.raises(InvalidPermissionError, match="empty"):
            validate_zone_name("")
        with pytest.raises(InvalidPermissionError, match="reserved property name"):
            validate_zone_name("__proto__")
        with pytest.raises(InvalidPermissionError, match="underscore"):
            validate_zone_name("_internal")
        with pytest.raises(InvalidPermissionError, match="maximum length of 128"):
            validate_zone_name("z" * 200)

    def test_long_name_not_echoed_in_full(self) -> None:
        name = "z" * 500
        with pytest.raises(InvalidPermissionError) as exc_info:
            validate_zone_name(name)
        assert name not in str(exc_info.value)

    def test_reserved_name_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Reserved-name rejections are logged as warnings."""
        with caplog.at_level(logging.WARNING, logger="zonecore.permissions.validation"):
            with pytest.raises(InvalidPermissionError):
                validate_zone_name("constructor", "import")
        assert any("constructor" in r.getMessage() for r in caplog.records)


class TestCreateSafeMapping:
    """Tests for create_safe_mapping()."""

    def test_empty_and_fresh(self) -> None:
        first = create_safe_mapping()
        second = create_safe_mapping()
        assert first == {}
        assert first is not second

    def test_reserved_keys_are_plain_data(self) -> None:
        """Lookups never resolve reserved names to methods."""
        mapping = create_safe_mapping()
        assert "toString" not in mapping
        assert mapping.get("hasOwnProperty") is None
        mapping["__proto__"] = 4
        assert mapping["__proto__"] == 4
        assert list(mapping) == ["__proto__"]


class TestDescribeBitfield:
    """Tests for describe_bitfield()."""

    def test_zero(self) -> None:
        assert describe_bitfield(0) == "No permissions"

    def test_single_flags(self) -> None:
        assert describe_bitfield(PermissionMasks.ADMIN) == "ADMIN"
        assert describe_bitfield(PermissionMasks.CREATE) == "CREATE"
        assert describe_bitfield(PermissionMasks.DELETE) == "DELETE"

    def test_combinations(self) -> None:
        assert describe_bitfield(PermissionMasks.ALL_CRUD) == "CREATE | READ | UPDATE | DELETE"
        assert describe_bitfield(PermissionMasks.READ | PermissionMasks.UPDATE) == "READ | UPDATE"
        assert describe_bitfield(PermissionMasks.ALL) == "CREATE | READ | UPDATE | DELETE | ADMIN"

    def test_custom_bits(self) -> None:
        assert describe_bitfield(32) == "CUSTOM(32)"
        assert describe_bitfield(PermissionMasks.READ | 32) == "READ | CUSTOM(32)"
        assert describe_bitfield(32 | 64) == "CUSTOM(96)"

    def test_invalid_never_raises(self) -> None:
        assert describe_bitfield(-1) == "Invalid bitfield: -1"
        assert describe_bitfield(0x100000000) == "Invalid bitfield: 4294967296"
        assert describe_bitfield("x").startswith("Invalid bitfield:")


class TestValidateAllowedPermissions:
    """Tests for validate_allowed_permissions()."""

    def test_subset_passes(self) -> None:
        validate_allowed_permissions(PermissionMasks.READ, PermissionMasks.READ | PermissionMasks.UPDATE)
        validate_allowed_permissions(0, 0)

    def test_disallowed_bits_enumerated(self) -> None:
        with pytest.raises(InvalidPermissionError) as exc_info:
            validate_allowed_permissions(
                PermissionMasks.READ | PermissionMasks.DELETE,
                PermissionMasks.READ | PermissionMasks.UPDATE,
                "api key scope",
            )
        message = str(exc_info.value)
        assert message.startswith("api key scope:")
        assert "Requested: READ | DELETE" in message
        assert "Allowed: READ | UPDATE" in message
        assert "Disallowed: DELETE" in message

    def test_invalid_operands(self) -> None:
        with pytest.raises(InvalidPermissionError, match="allowed permissions"):
            validate_allowed_permissions(PermissionMasks.READ, -1)
        with pytest.raises(InvalidPermissionError, match="permission validation bitfield"):
            validate_allowed_permissions(1.5, PermissionMasks.READ)
