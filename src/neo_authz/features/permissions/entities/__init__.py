"""Permission entities package.

Domain entities, the role hierarchy and the protocols for storage and caching.
"""

from .hierarchy import (
    RoleHierarchy,
    DEFAULT_ROLE_HIERARCHY,
    DEFAULT_CAPABILITIES,
    ROLE_RANKS,
    rank,
    implies_capability,
)
from .policy import Policy
from .role_assignment import RoleAssignment
from .decision import AuthorizationDecision
from .protocols import PolicyStore, PolicyStoreTransaction, RoleCache

__all__ = [
    # Hierarchy
    "RoleHierarchy",
    "DEFAULT_ROLE_HIERARCHY",
    "DEFAULT_CAPABILITIES",
    "ROLE_RANKS",
    "rank",
    "implies_capability",

    # Domain entities
    "Policy",
    "RoleAssignment",
    "AuthorizationDecision",

    # Protocols
    "PolicyStore",
    "PolicyStoreTransaction",
    "RoleCache",
]
