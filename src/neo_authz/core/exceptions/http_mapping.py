"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoAuthzError
from .domain import (
    InvalidArgumentError,
    InvariantViolationError,
    NotFoundError,
    PolicyNotFoundError,
    RoleAssignmentNotFoundError,
    PermissionDeniedError,
)
from .infrastructure import UnavailableError, ConfigurationError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidArgumentError: 400,

    # 403 Forbidden
    PermissionDeniedError: 403,

    # 404 Not Found
    NotFoundError: 404,
    PolicyNotFoundError: 404,
    RoleAssignmentNotFoundError: 404,

    # 409 Conflict
    InvariantViolationError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,

    # 503 Service Unavailable
    UnavailableError: 503,

    # Default for NeoAuthzError
    NeoAuthzError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception, falling back along the class hierarchy."""
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return 500
