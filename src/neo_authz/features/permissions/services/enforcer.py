"""Enforcer: the allow/deny decision for one request.

A request is allowed when one of the user's roles in the domain implies the
capability by default, or when an explicit policy in the domain grants it to
the user id or to one of the user's role names. Everything else is denied.
Storage failures propagate; they are never turned into a deny.
"""

import logging
from typing import Optional, Set

from ....config.constants import Action, DecisionReason, ResourceType, Role
from ....core.validation import parse_enum, validate_domain, validate_user_id
from ..entities import (
    AuthorizationDecision,
    DEFAULT_ROLE_HIERARCHY,
    PolicyStore,
    RoleCache,
    RoleHierarchy,
)

logger = logging.getLogger(__name__)


class Enforcer:
    """Evaluates (user, resource type, action, domain) requests against a PolicyStore."""

    def __init__(
        self,
        store: PolicyStore,
        hierarchy: RoleHierarchy = DEFAULT_ROLE_HIERARCHY,
        cache: Optional[RoleCache] = None
    ):
        self.store = store
        self.hierarchy = hierarchy
        self.cache = cache

    async def get_roles(self, user_id: str, domain: str) -> Set[Role]:
        """Roles of the user in the domain, read through the cache when configured."""
        generation = None
        if self.cache is not None:
            # Fetched before the store read so a concurrent mutation orphans our write
            generation = await self.cache.get_generation(domain)
        if generation is not None:
            cached = await self.cache.get_user_roles(user_id, domain, generation)
            if cached is not None:
                return cached

        roles = await self.store.get_roles_for_user(user_id, domain)

        if generation is not None:
            await self.cache.set_user_roles(user_id, domain, roles, generation)
        return roles

    async def check(self, user_id: str, resource_type, action, domain: str) -> bool:
        decision = await self.explain(user_id, resource_type, action, domain)
        return decision.allowed

    async def explain(self, user_id: str, resource_type, action, domain: str) -> AuthorizationDecision:
        """Evaluate a request and report which rule decided it.

        Args:
            user_id: Internal user identifier
            resource_type: ResourceType member or its name
            action: Action member or its name
            domain: Tenant (project) identifier

        Returns:
            AuthorizationDecision; unknown resource types or actions are denied
            with ``UNKNOWN_CAPABILITY``.

        Raises:
            InvalidArgumentError: If user_id or domain is malformed
            UnavailableError: If the store cannot be read
        """
        validate_user_id(user_id)
        validate_domain(domain)

        decision = await self._decide(user_id, resource_type, action, domain)
        logger.debug(f"Decision {decision.reason.value} in domain {domain}")
        return decision

    async def _decide(self, user_id: str, resource_type, action, domain: str) -> AuthorizationDecision:
        parsed_resource = parse_enum(ResourceType, resource_type)
        parsed_action = parse_enum(Action, action)
        if parsed_resource is None or parsed_action is None:
            return AuthorizationDecision.deny(DecisionReason.UNKNOWN_CAPABILITY)

        roles = await self.get_roles(user_id, domain)

        granting = [
            role for role in roles
            if self.hierarchy.implies_capability(role, parsed_resource, parsed_action)
        ]
        if granting:
            return AuthorizationDecision(
                allowed=True,
                reason=DecisionReason.ROLE_CAPABILITY,
                matched_role=self.hierarchy.highest(granting),
            )

        subjects = {user_id} | {role.value for role in roles}
        policies = await self.store.list_policies(
            domain,
            resource_type=parsed_resource,
            action=parsed_action,
        )
        for policy in policies:
            if policy.subject in subjects and policy.matches(parsed_resource, parsed_action):
                return AuthorizationDecision(
                    allowed=True,
                    reason=DecisionReason.POLICY_MATCH,
                    matched_policy=policy,
                )

        return AuthorizationDecision.deny(DecisionReason.NO_MATCH)
