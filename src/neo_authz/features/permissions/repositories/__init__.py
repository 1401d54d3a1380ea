"""Permission repositories package.

Concrete implementations of the policy store and role cache protocols.
"""

from .memory_policy_store import InMemoryPolicyStore
from .asyncpg_policy_store import AsyncPGPolicyStore
from .redis_role_cache import RedisRoleCache

__all__ = [
    "InMemoryPolicyStore",
    "AsyncPGPolicyStore",
    "RedisRoleCache",
]
