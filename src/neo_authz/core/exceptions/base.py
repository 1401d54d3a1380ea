"""Base exception for neo-authz.

Every error the engine raises derives from NeoAuthzError and carries a
machine-readable ``error_code`` and a ``details`` dict. Details hold domains,
field names and operations; they never hold policy tuples.
"""

from typing import Any, Dict, Optional


class NeoAuthzError(Exception):
    """Root of the neo-authz error hierarchy."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """HTTP status for ``exception``; see ``http_mapping.HTTP_STATUS_MAP``."""
    from .http_mapping import get_http_status_code as mapped_status
    return mapped_status(exception)


def create_error_response(exception: NeoAuthzError) -> Dict[str, Any]:
    """JSON body rendered by the web integration for a NeoAuthzError."""
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": type(exception).__name__,
        }
    }
