"""Domain-specific exceptions for neo-authz.

These relate to misuse of the engine or to the safety rules it enforces on
roles and policies.
"""

from .base import NeoAuthzError


class InvalidArgumentError(NeoAuthzError):
    """Raised when a caller passes a malformed identifier or an unknown enum value."""
    pass


class InvariantViolationError(NeoAuthzError):
    """Raised when a mutation would break a role invariant (e.g. remove the last owner)."""
    pass


class NotFoundError(NeoAuthzError):
    """Base class for missing administrative objects."""
    pass


class PolicyNotFoundError(NotFoundError):
    """Raised when deleting a policy that does not exist."""
    pass


class RoleAssignmentNotFoundError(NotFoundError):
    """Raised by strict revocation when no assignment was removed."""
    pass


class PermissionDeniedError(NeoAuthzError):
    """Raised when a guarded operation is denied by the enforcer."""
    pass
