"""Role lifecycle for project domains.

Every mutation holds the domain lock and one store transaction, re-reads the
domain's owners inside it and writes nothing when an invariant would break:
a user holds at most one role per domain, and a domain with any assignment
has at least one owner.
"""

import logging
from typing import Optional, Set

from ....config.constants import Role
from ....core.exceptions import (
    InvariantViolationError,
    PermissionDeniedError,
    RoleAssignmentNotFoundError,
)
from ....core.validation import require_enum, validate_domain, validate_user_id
from ..entities import (
    DEFAULT_ROLE_HIERARCHY,
    PolicyStore,
    PolicyStoreTransaction,
    RoleAssignment,
    RoleCache,
    RoleHierarchy,
)
from ..utils import DomainLockRegistry, locked_transaction
from .enforcer import Enforcer

logger = logging.getLogger(__name__)


async def _owners(tx: PolicyStoreTransaction) -> Set[str]:
    return {
        assignment.user_id
        for assignment in await tx.list_role_assignments()
        if assignment.is_owner
    }


class PolicyManager:
    """Assigns and revokes roles and answers convenience authorization checks."""

    def __init__(
        self,
        store: PolicyStore,
        enforcer: Optional[Enforcer] = None,
        hierarchy: RoleHierarchy = DEFAULT_ROLE_HIERARCHY,
        cache: Optional[RoleCache] = None,
        locks: Optional[DomainLockRegistry] = None,
        strict_revocation: bool = False
    ):
        self.store = store
        self.hierarchy = hierarchy
        self.cache = cache
        self.enforcer = enforcer if enforcer is not None else Enforcer(store, hierarchy=hierarchy, cache=cache)
        self.locks = locks if locks is not None else DomainLockRegistry()
        self.strict_revocation = strict_revocation

    async def _invalidate(self, domain: str) -> None:
        if self.cache is not None:
            await self.cache.invalidate_domain(domain)

    # Queries

    async def get_user_roles_for_domain(self, user_id: str, domain: str) -> Set[Role]:
        """Get the roles a user holds in a domain (empty set when none)."""
        validate_user_id(user_id)
        validate_domain(domain)
        return await self.enforcer.get_roles(user_id, domain)

    async def can_user_access_in_project(self, user_id: str, resource_type, action, domain: str) -> bool:
        return await self.enforcer.check(user_id, resource_type, action, domain)

    async def has_role_for_project(self, user_id: str, domain: str, min_role) -> bool:
        """Whether the user's best role ranks at least ``min_role``. Ignores policies."""
        min_role = require_enum(Role, min_role, "min_role")
        roles = await self.get_user_roles_for_domain(user_id, domain)
        return bool(roles & self.hierarchy.roles_at_least(min_role))

    # Mutations

    async def assign_role(self, user_id: str, role, domain: str) -> bool:
        """Give the user exactly ``role`` in the domain.

        Any other role the user holds is removed in the same transaction.
        A domain's first assignment must be an owner, and demoting the
        domain's only owner is rejected before anything is written.

        Returns:
            True if the stored assignments changed, False if the user already
            held exactly ``role``.

        Raises:
            InvalidArgumentError: If an argument is malformed
            InvariantViolationError: If the change would leave the domain without an owner
        """
        validate_user_id(user_id)
        validate_domain(domain)
        role = require_enum(Role, role, "role")

        async with locked_transaction(self.locks, self.store, domain) as tx:
            current = await tx.get_roles_for_user(user_id)
            if current == {role}:
                return False

            if role != Role.OWNER:
                owners = await _owners(tx)
                if not owners:
                    logger.warning(f"Rejected assignment into ownerless domain {domain}")
                    raise InvariantViolationError(
                        "Domain has no owner; assign an owner first",
                        details={"domain": domain, "operation": "assign_role"},
                    )
                if owners == {user_id}:
                    logger.warning(f"Rejected demotion of last owner in domain {domain}")
                    raise InvariantViolationError(
                        "Cannot remove the last owner of the domain",
                        details={"domain": domain, "operation": "assign_role"},
                    )

            to_remove = current - {role}

            for previous in to_remove:
                await tx.remove_role_assignment(user_id, previous)
            if role not in current:
                await tx.add_role_assignment(user_id, role)

        await self._invalidate(domain)
        logger.info(f"Assigned role {role.value} in domain {domain}")
        return True

    async def revoke_role(self, user_id: str, domain: str, role) -> bool:
        """Remove one role from the user.

        Returns:
            True if an assignment was removed. False when the user did not
            hold the role, unless strict revocation is enabled.

        Raises:
            InvariantViolationError: If the user is the domain's only owner
            RoleAssignmentNotFoundError: In strict mode when nothing was removed
        """
        validate_user_id(user_id)
        validate_domain(domain)
        role = require_enum(Role, role, "role")

        async with locked_transaction(self.locks, self.store, domain) as tx:
            if role == Role.OWNER and await _owners(tx) == {user_id}:
                logger.warning(f"Rejected revocation of last owner in domain {domain}")
                raise InvariantViolationError(
                    "Cannot remove the last owner of the domain",
                    details={"domain": domain, "operation": "revoke_role"},
                )
            removed = await tx.remove_role_assignment(user_id, role)

        if not removed:
            if self.strict_revocation:
                raise RoleAssignmentNotFoundError(
                    f"User does not hold role {role.value} in domain",
                    details={"domain": domain, "role": role.value},
                )
            return False

        await self._invalidate(domain)
        logger.info(f"Revoked role {role.value} in domain {domain}")
        return True

    async def bootstrap_domain(self, owner_id: str, domain: str) -> RoleAssignment:
        """Make ``owner_id`` the first owner of a fresh domain.

        Idempotent for the same owner; rejected once the domain has any
        other assignment.
        """
        validate_user_id(owner_id)
        validate_domain(domain)

        async with locked_transaction(self.locks, self.store, domain) as tx:
            assignments = await tx.list_role_assignments()
            existing = {(a.user_id, a.role) for a in assignments}
            if existing and existing != {(owner_id, Role.OWNER)}:
                raise InvariantViolationError(
                    "Domain already has role assignments",
                    details={"domain": domain, "operation": "bootstrap_domain"},
                )
            created = await tx.add_role_assignment(owner_id, Role.OWNER)

        if created:
            await self._invalidate(domain)
            logger.info(f"Bootstrapped domain {domain}")
        return RoleAssignment(owner_id, Role.OWNER, domain)

    # Guards

    async def require_access(self, user_id: str, resource_type, action, domain: str) -> None:
        """Raise PermissionDeniedError unless the enforcer allows the request."""
        if not await self.can_user_access_in_project(user_id, resource_type, action, domain):
            raise PermissionDeniedError(
                "Access denied",
                details={
                    "domain": domain,
                    "resource_type": str(getattr(resource_type, "value", resource_type)),
                    "action": str(getattr(action, "value", action)),
                },
            )

    async def require_role(self, user_id: str, domain: str, min_role) -> None:
        if not await self.has_role_for_project(user_id, domain, min_role):
            raise PermissionDeniedError(
                "Insufficient role",
                details={"domain": domain, "required_role": require_enum(Role, min_role, "min_role").value},
            )
