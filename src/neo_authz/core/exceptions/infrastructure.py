"""Infrastructure exceptions for neo-authz."""

from .base import NeoAuthzError


class UnavailableError(NeoAuthzError):
    """Raised when the policy store failed or timed out. Never retried internally."""
    pass


class ConfigurationError(NeoAuthzError):
    """Raised when there's a configuration issue."""
    pass
