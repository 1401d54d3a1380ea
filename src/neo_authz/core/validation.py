"""Argument validation helpers shared by entities and services."""

from enum import Enum
from typing import Optional, Type, TypeVar

from ..config.constants import MAX_IDENTIFIER_LENGTH
from .exceptions import InvalidArgumentError

E = TypeVar("E", bound=Enum)


def validate_identifier(value, field_name: str) -> str:
    """Return ``value`` if it is a usable identifier, else raise InvalidArgumentError."""
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"{field_name} must be a string",
            details={"field": field_name},
        )
    if not value.strip():
        raise InvalidArgumentError(
            f"{field_name} must not be empty",
            details={"field": field_name},
        )
    if len(value) > MAX_IDENTIFIER_LENGTH:
        raise InvalidArgumentError(
            f"{field_name} cannot exceed {MAX_IDENTIFIER_LENGTH} characters, got: {len(value)}",
            details={"field": field_name},
        )
    return value


def validate_user_id(user_id) -> str:
    return validate_identifier(user_id, "user_id")


def validate_domain(domain) -> str:
    return validate_identifier(domain, "domain")


def parse_enum(enum_cls: Type[E], value) -> Optional[E]:
    """Parse ``value`` into ``enum_cls``; None when it is not a member."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    """Parse ``value`` into ``enum_cls`` or raise InvalidArgumentError."""
    parsed = parse_enum(enum_cls, value)
    if parsed is None:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidArgumentError(
            f"Unknown {field_name}: {value!r}. Must be one of: {allowed}",
            details={"field": field_name, "allowed": [member.value for member in enum_cls]},
        )
    return parsed
