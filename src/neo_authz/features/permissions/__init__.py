"""Permissions feature for neo-authz.

Feature-First architecture for multi-tenant role and policy authorization:
- entities/: Role hierarchy, policies, role assignments, decisions and protocols
- repositories/: In-memory and PostgreSQL policy stores, redis role cache
- services/: Enforcer, role lifecycle, policy administration and the engine facade
- utils/: Per-domain mutation locks
"""

# Core permission entities and protocols
from .entities import (
    RoleHierarchy, DEFAULT_ROLE_HIERARCHY, DEFAULT_CAPABILITIES,
    Policy, RoleAssignment, AuthorizationDecision,
    PolicyStore, PolicyStoreTransaction, RoleCache
)

# Permission service orchestration
from .services import Enforcer, PolicyManager, PolicyAdministration, AuthorizationEngine

# Concrete repository implementations
from .repositories import InMemoryPolicyStore, AsyncPGPolicyStore, RedisRoleCache

# Engine construction
from .factory import create_authorization_engine, create_policy_store, create_role_cache

__all__ = [
    # Entities
    "RoleHierarchy",
    "DEFAULT_ROLE_HIERARCHY",
    "DEFAULT_CAPABILITIES",
    "Policy",
    "RoleAssignment",
    "AuthorizationDecision",

    # Protocols
    "PolicyStore",
    "PolicyStoreTransaction",
    "RoleCache",

    # Services
    "Enforcer",
    "PolicyManager",
    "PolicyAdministration",
    "AuthorizationEngine",

    # Repository Implementations
    "InMemoryPolicyStore",
    "AsyncPGPolicyStore",
    "RedisRoleCache",

    # Factory
    "create_authorization_engine",
    "create_policy_store",
    "create_role_cache",
]
