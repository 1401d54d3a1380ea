"""In-memory policy store.

Keeps one partition per domain. Transactions mutate a private copy of the
partition and swap it in on commit, so concurrent readers observe either the
previous or the committed state and a failed transaction leaves nothing
behind.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional, Set, Tuple

from ....config.constants import Action, ResourceType, Role
from ....core.exceptions import InvalidArgumentError
from ....core.validation import require_enum, validate_domain, validate_user_id
from ..entities import Policy, RoleAssignment
from ..utils.domain_locks import DomainLockRegistry

logger = logging.getLogger(__name__)


@dataclass
class _DomainPartition:
    """Role assignments and policies of one domain."""
    assignments: Set[Tuple[str, Role]] = field(default_factory=set)
    policies: Set[Policy] = field(default_factory=set)

    def copy(self) -> "_DomainPartition":
        return _DomainPartition(set(self.assignments), set(self.policies))

    @property
    def is_empty(self) -> bool:
        return not self.assignments and not self.policies


class MemoryPolicyStoreTransaction:
    """Read/write view over one partition."""

    def __init__(self, domain: str, partition: _DomainPartition):
        self.domain = domain
        self._partition = partition
        self.dirty = False

    async def get_roles_for_user(self, user_id: str) -> Set[Role]:
        validate_user_id(user_id)
        return {role for uid, role in self._partition.assignments if uid == user_id}

    async def list_role_assignments(self) -> List[RoleAssignment]:
        return [
            RoleAssignment(user_id=uid, role=role, domain=self.domain)
            for uid, role in sorted(self._partition.assignments, key=lambda item: (item[0], item[1].value))
        ]

    async def add_role_assignment(self, user_id: str, role: Role) -> bool:
        key = (validate_user_id(user_id), require_enum(Role, role, "role"))
        if key in self._partition.assignments:
            return False
        self._partition.assignments.add(key)
        self.dirty = True
        return True

    async def remove_role_assignment(self, user_id: str, role: Role) -> bool:
        key = (validate_user_id(user_id), require_enum(Role, role, "role"))
        if key not in self._partition.assignments:
            return False
        self._partition.assignments.discard(key)
        self.dirty = True
        return True

    async def add_policy(self, policy: Policy) -> bool:
        self._check_domain(policy)
        if policy in self._partition.policies:
            return False
        self._partition.policies.add(policy)
        self.dirty = True
        return True

    async def remove_policy(self, policy: Policy) -> bool:
        self._check_domain(policy)
        if policy not in self._partition.policies:
            return False
        self._partition.policies.discard(policy)
        self.dirty = True
        return True

    async def list_policies(
        self,
        subject: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
        action: Optional[Action] = None
    ) -> List[Policy]:
        policies = [
            policy for policy in self._partition.policies
            if (subject is None or policy.subject == subject)
            and (resource_type is None or policy.resource_type == resource_type)
            and (action is None or policy.action == action)
        ]
        return sorted(policies, key=lambda p: (p.subject, p.resource_type.value, p.action.value))

    def _check_domain(self, policy: Policy) -> None:
        if policy.domain != self.domain:
            raise InvalidArgumentError(
                "Policy domain does not match transaction domain",
                details={"domain": self.domain},
            )


class InMemoryPolicyStore:
    """PolicyStore kept in process memory. Suitable for tests and single-process deployments."""

    def __init__(self):
        self._partitions: Dict[str, _DomainPartition] = {}
        self._locks = DomainLockRegistry()

    def _view(self, domain: str) -> MemoryPolicyStoreTransaction:
        """Read-only view over the committed partition."""
        validate_domain(domain)
        return MemoryPolicyStoreTransaction(domain, self._partitions.get(domain, _DomainPartition()))

    @asynccontextmanager
    async def transaction(self, domain: str) -> AsyncIterator[MemoryPolicyStoreTransaction]:
        validate_domain(domain)
        async with self._locks.acquire(domain):
            current = self._partitions.get(domain)
            working = current.copy() if current is not None else _DomainPartition()
            tx = MemoryPolicyStoreTransaction(domain, working)
            yield tx
            if tx.dirty:
                if working.is_empty:
                    self._partitions.pop(domain, None)
                else:
                    self._partitions[domain] = working
                logger.debug(f"Committed in-memory transaction for domain {domain}")

    async def get_roles_for_user(self, user_id: str, domain: str) -> Set[Role]:
        return await self._view(domain).get_roles_for_user(user_id)

    async def list_role_assignments(self, domain: str) -> List[RoleAssignment]:
        return await self._view(domain).list_role_assignments()

    async def add_role_assignment(self, user_id: str, role: Role, domain: str) -> bool:
        async with self.transaction(domain) as tx:
            return await tx.add_role_assignment(user_id, role)

    async def remove_role_assignment(self, user_id: str, role: Role, domain: str) -> bool:
        async with self.transaction(domain) as tx:
            return await tx.remove_role_assignment(user_id, role)

    async def add_policy(self, policy: Policy) -> bool:
        async with self.transaction(policy.domain) as tx:
            return await tx.add_policy(policy)

    async def remove_policy(self, policy: Policy) -> bool:
        async with self.transaction(policy.domain) as tx:
            return await tx.remove_policy(policy)

    async def list_policies(
        self,
        domain: str,
        subject: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
        action: Optional[Action] = None
    ) -> List[Policy]:
        return await self._view(domain).list_policies(subject, resource_type, action)

    async def close(self) -> None:
        self._partitions.clear()
