"""Permission services package."""

from .enforcer import Enforcer
from .policy_manager import PolicyManager
from .policy_administration import PolicyAdministration
from .engine import AuthorizationEngine

__all__ = [
    "Enforcer",
    "PolicyManager",
    "PolicyAdministration",
    "AuthorizationEngine",
]
