"""Protocol interfaces for permission feature dependency injection.

Defines the storage adapter contract the engine depends on and the optional
read-side role cache. Every storage operation is scoped by domain.
"""

from abc import abstractmethod
from typing import AsyncContextManager, List, Optional, Protocol, Set, runtime_checkable

from ....config.constants import Action, ResourceType, Role
from .policy import Policy
from .role_assignment import RoleAssignment


@runtime_checkable
class PolicyStoreTransaction(Protocol):
    """Consistent read/write view of one domain for the duration of a transaction."""

    domain: str

    @abstractmethod
    async def get_roles_for_user(self, user_id: str) -> Set[Role]:
        """Get all roles held by a user in the transaction's domain."""
        ...

    @abstractmethod
    async def list_role_assignments(self) -> List[RoleAssignment]:
        """List all role assignments of the transaction's domain."""
        ...

    @abstractmethod
    async def add_role_assignment(self, user_id: str, role: Role) -> bool:
        """Add an assignment; False if it already existed."""
        ...

    @abstractmethod
    async def remove_role_assignment(self, user_id: str, role: Role) -> bool:
        """Remove an assignment; False if nothing was removed."""
        ...

    @abstractmethod
    async def add_policy(self, policy: Policy) -> bool:
        """Add a policy; False if it already existed."""
        ...

    @abstractmethod
    async def remove_policy(self, policy: Policy) -> bool:
        """Remove a policy; False if nothing was removed."""
        ...

    @abstractmethod
    async def list_policies(
        self,
        subject: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
        action: Optional[Action] = None
    ) -> List[Policy]:
        """List the domain's policies with optional filters."""
        ...


@runtime_checkable
class PolicyStore(Protocol):
    """Storage adapter for role assignments and policies."""

    @abstractmethod
    async def get_roles_for_user(self, user_id: str, domain: str) -> Set[Role]:
        """Get all active roles for the (user, domain) pair."""
        ...

    @abstractmethod
    async def list_role_assignments(self, domain: str) -> List[RoleAssignment]:
        """Full dump of a domain's role assignments."""
        ...

    @abstractmethod
    async def add_role_assignment(self, user_id: str, role: Role, domain: str) -> bool:
        """Idempotently add a role assignment."""
        ...

    @abstractmethod
    async def remove_role_assignment(self, user_id: str, role: Role, domain: str) -> bool:
        """Idempotently remove a role assignment."""
        ...

    @abstractmethod
    async def add_policy(self, policy: Policy) -> bool:
        """Idempotently add a policy."""
        ...

    @abstractmethod
    async def remove_policy(self, policy: Policy) -> bool:
        """Idempotently remove a policy."""
        ...

    @abstractmethod
    async def list_policies(
        self,
        domain: str,
        subject: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
        action: Optional[Action] = None
    ) -> List[Policy]:
        """List a domain's policies with optional filters."""
        ...

    @abstractmethod
    def transaction(self, domain: str) -> AsyncContextManager[PolicyStoreTransaction]:
        """Open a transaction over one domain; commits on clean exit."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release storage resources."""
        ...


@runtime_checkable
class RoleCache(Protocol):
    """Best-effort cache of role lookups.

    Entries live under a per-domain generation. Readers fetch the generation
    before reading the store and write under it; mutations bump it after they
    commit, so a write racing a mutation lands under a generation nobody reads.
    """

    @abstractmethod
    async def get_generation(self, domain: str) -> Optional[int]:
        """Current generation of the domain, None when the cache is unreachable."""
        ...

    @abstractmethod
    async def get_user_roles(self, user_id: str, domain: str, generation: int) -> Optional[Set[Role]]:
        """Get cached roles, None on a miss."""
        ...

    @abstractmethod
    async def set_user_roles(self, user_id: str, domain: str, roles: Set[Role], generation: int) -> None:
        """Cache roles for the (user, domain) pair under ``generation``."""
        ...

    @abstractmethod
    async def invalidate_domain(self, domain: str) -> None:
        """Bump the domain's generation, orphaning every cached entry of it."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release cache resources."""
        ...
