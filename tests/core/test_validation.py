"""Tests for identifier and enum validation helpers."""

import pytest

from neo_authz.config.constants import Action, ResourceType, Role
from neo_authz.core.exceptions import InvalidArgumentError
from neo_authz.core.validation import (
    parse_enum,
    require_enum,
    validate_domain,
    validate_identifier,
    validate_user_id,
)


class TestIdentifiers:

    def test_valid_identifier_is_returned(self):
        assert validate_user_id("user-1") == "user-1"
        assert validate_domain("project-1") == "project-1"

    @pytest.mark.parametrize("value", ["", "   ", None, 42, b"user"])
    def test_invalid_identifiers_rejected(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_identifier(value, "user_id")
        assert exc_info.value.details["field"] == "user_id"

    def test_overlong_identifier_rejected(self):
        with pytest.raises(InvalidArgumentError):
            validate_domain("d" * 256)
        assert validate_domain("d" * 255) == "d" * 255


class TestEnums:

    def test_parse_is_case_insensitive(self):
        assert parse_enum(ResourceType, "voucher") is ResourceType.VOUCHER
        assert parse_enum(Action, "Read") is Action.READ
        assert parse_enum(Role, "owner") is Role.OWNER

    def test_parse_returns_member_unchanged(self):
        assert parse_enum(Role, Role.ADMIN) is Role.ADMIN

    @pytest.mark.parametrize("value", ["spaceship", "*", "", None, 3])
    def test_parse_unknown_is_none(self, value):
        assert parse_enum(ResourceType, value) is None

    def test_require_enum_lists_allowed_values(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            require_enum(Action, "launch", "action")
        assert exc_info.value.details["field"] == "action"
        assert "READ" in exc_info.value.details["allowed"]
