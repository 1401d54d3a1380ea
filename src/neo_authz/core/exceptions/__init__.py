"""Exception hierarchy for neo-authz."""

from .base import NeoAuthzError, get_http_status_code, create_error_response
from .domain import (
    InvalidArgumentError,
    InvariantViolationError,
    NotFoundError,
    PolicyNotFoundError,
    RoleAssignmentNotFoundError,
    PermissionDeniedError,
)
from .infrastructure import UnavailableError, ConfigurationError
from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    # Base Exception
    "NeoAuthzError",

    # Domain Exceptions
    "InvalidArgumentError",
    "InvariantViolationError",
    "NotFoundError",
    "PolicyNotFoundError",
    "RoleAssignmentNotFoundError",
    "PermissionDeniedError",

    # Infrastructure Exceptions
    "UnavailableError",
    "ConfigurationError",

    # Utility Functions
    "HTTP_STATUS_MAP",
    "get_http_status_code",
    "create_error_response",
]
