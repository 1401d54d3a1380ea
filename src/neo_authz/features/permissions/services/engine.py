"""Authorization engine facade.

The object host applications build once at startup and hand to request
handlers. It wires the enforcer, the role manager and policy administration
to one store, one optional cache and one lock registry.
"""

import logging
from typing import List, Optional

from ..entities import DEFAULT_ROLE_HIERARCHY, Policy, PolicyStore, RoleAssignment, RoleCache, RoleHierarchy
from ..utils import DomainLockRegistry
from .enforcer import Enforcer
from .policy_administration import PolicyAdministration
from .policy_manager import PolicyManager

logger = logging.getLogger(__name__)


class AuthorizationEngine:
    """Stable call surface over the permission services."""

    def __init__(
        self,
        store: PolicyStore,
        cache: Optional[RoleCache] = None,
        hierarchy: RoleHierarchy = DEFAULT_ROLE_HIERARCHY,
        strict_role_revocation: bool = False
    ):
        self.store = store
        self.cache = cache
        self.hierarchy = hierarchy
        self.locks = DomainLockRegistry()
        self.enforcer = Enforcer(store, hierarchy=hierarchy, cache=cache)
        self.manager = PolicyManager(
            store,
            enforcer=self.enforcer,
            hierarchy=hierarchy,
            cache=cache,
            locks=self.locks,
            strict_revocation=strict_role_revocation,
        )
        self.administration = PolicyAdministration(store, locks=self.locks)

    async def enforce(self, user_id: str, resource_type, action, domain: str) -> bool:
        return await self.enforcer.check(user_id, resource_type, action, domain)

    async def assign_role(self, user_id: str, domain: str, role) -> None:
        await self.manager.assign_role(user_id, role, domain)

    async def revoke_role(self, user_id: str, domain: str, role) -> None:
        await self.manager.revoke_role(user_id, domain, role)

    async def has_role(self, user_id: str, domain: str, min_role) -> bool:
        return await self.manager.has_role_for_project(user_id, domain, min_role)

    async def list_policies(self, domain: str) -> List[Policy]:
        return await self.administration.list_policies(domain)

    async def add_policy(self, subject: str, resource_type, action, domain: str) -> None:
        await self.administration.create_policy(subject, resource_type, action, domain)

    async def remove_policy(self, subject: str, resource_type, action, domain: str) -> None:
        await self.administration.delete_policy(subject, resource_type, action, domain)

    async def list_role_assignments(self, domain: str) -> List[RoleAssignment]:
        return await self.administration.list_role_assignments(domain)

    async def close(self) -> None:
        """Release the store and the cache."""
        if self.cache is not None:
            await self.cache.close()
        await self.store.close()
        logger.info("Authorization engine closed")

    async def __aenter__(self) -> "AuthorizationEngine":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
