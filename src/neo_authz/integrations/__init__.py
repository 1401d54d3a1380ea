"""Web framework integrations for neo-authz."""

from .fastapi import AuthorizationDependencies, register_exception_handlers

__all__ = [
    "AuthorizationDependencies",
    "register_exception_handlers",
]
