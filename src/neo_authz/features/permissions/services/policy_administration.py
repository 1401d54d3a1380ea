"""Administration of explicit policies layered over role capabilities."""

import logging
from typing import List, Optional

from ....config.constants import Action, ResourceType
from ....core.exceptions import PolicyNotFoundError
from ....core.validation import require_enum, validate_domain, validate_identifier
from ..entities import Policy, PolicyStore, RoleAssignment
from ..utils import DomainLockRegistry, locked_transaction

logger = logging.getLogger(__name__)


class PolicyAdministration:
    """Create, delete and list policies; list role assignments."""

    def __init__(self, store: PolicyStore, locks: Optional[DomainLockRegistry] = None):
        self.store = store
        self.locks = locks if locks is not None else DomainLockRegistry()

    async def create_policy(self, subject: str, resource_type, action, domain: str) -> Policy:
        """Add a policy. Adding an existing policy succeeds without change.

        Raises:
            InvalidArgumentError: If the subject or domain is malformed, or the
                resource type or action is unknown
        """
        policy = Policy(subject, resource_type, action, domain)

        async with locked_transaction(self.locks, self.store, domain) as tx:
            created = await tx.add_policy(policy)

        if created:
            logger.info(f"Created policy in domain {domain}")
        return policy

    async def delete_policy(self, subject: str, resource_type, action, domain: str) -> None:
        """Remove the policy identified by its four fields.

        Raises:
            PolicyNotFoundError: If no such policy exists in the domain
        """
        policy = Policy(subject, resource_type, action, domain)

        async with locked_transaction(self.locks, self.store, domain) as tx:
            removed = await tx.remove_policy(policy)

        if not removed:
            raise PolicyNotFoundError(
                "Policy not found",
                details={"domain": domain},
            )
        logger.info(f"Deleted policy in domain {domain}")

    async def list_policies(
        self,
        domain: str,
        subject: Optional[str] = None,
        resource_type=None,
        action=None
    ) -> List[Policy]:
        validate_domain(domain)
        if subject is not None:
            validate_identifier(subject, "subject")
        if resource_type is not None:
            resource_type = require_enum(ResourceType, resource_type, "resource_type")
        if action is not None:
            action = require_enum(Action, action, "action")
        return await self.store.list_policies(
            domain,
            subject=subject,
            resource_type=resource_type,
            action=action,
        )

    async def list_role_assignments(self, domain: str) -> List[RoleAssignment]:
        validate_domain(domain)
        return await self.store.list_role_assignments(domain)
