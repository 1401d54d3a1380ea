"""Role hierarchy for the permissions feature.

Roles are totally ordered (OWNER > ADMIN > MEMBER > VIEWER) and each role
carries a default capability set: the (resource type, action) pairs it grants
without any explicit policy. The capability matrix is deployment
configuration; lookups outside it always answer ``False``.
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from ....config.constants import Action, ResourceType, Role
from ....core.validation import parse_enum


CapabilityMatrix = Mapping[Role, Mapping[ResourceType, Iterable[Action]]]

ROLE_RANKS: Mapping[Role, int] = MappingProxyType({
    Role.OWNER: 4,
    Role.ADMIN: 3,
    Role.MEMBER: 2,
    Role.VIEWER: 1,
})

ALL_ACTIONS: FrozenSet[Action] = frozenset(Action)
READ_ONLY: FrozenSet[Action] = frozenset({Action.READ})
CONTRIBUTE: FrozenSet[Action] = frozenset({Action.CREATE, Action.READ, Action.UPDATE})

DEFAULT_CAPABILITIES: CapabilityMatrix = {
    Role.OWNER: {resource_type: ALL_ACTIONS for resource_type in ResourceType},
    Role.ADMIN: {
        ResourceType.USER: ALL_ACTIONS,
        ResourceType.CUSTOMER: ALL_ACTIONS,
        ResourceType.REWARD: ALL_ACTIONS,
        ResourceType.CAMPAIGN: ALL_ACTIONS,
        ResourceType.VOUCHER: ALL_ACTIONS,
        ResourceType.MEMBERSHIP: ALL_ACTIONS,
        ResourceType.API_TOKEN: ALL_ACTIONS,
        ResourceType.API_KEY: ALL_ACTIONS,
        ResourceType.INTEGRATION: ALL_ACTIONS,
        ResourceType.POLICY: ALL_ACTIONS,
        ResourceType.PROJECT_SETTINGS: frozenset({Action.READ, Action.UPDATE, Action.MANAGE}),
        ResourceType.PROJECT: frozenset({Action.READ, Action.UPDATE}),
        ResourceType.AUTH_TOKEN: frozenset({Action.READ, Action.MANAGE}),
        ResourceType.BILLING: READ_ONLY,
        ResourceType.ORGANIZATION: READ_ONLY,
        ResourceType.AUDIT_LOG: READ_ONLY,
    },
    Role.MEMBER: {
        ResourceType.PROJECT: READ_ONLY,
        ResourceType.ORGANIZATION: READ_ONLY,
        ResourceType.MEMBERSHIP: READ_ONLY,
        ResourceType.API_TOKEN: READ_ONLY,
        ResourceType.AUTH_TOKEN: READ_ONLY,
        ResourceType.AUDIT_LOG: READ_ONLY,
        ResourceType.CUSTOMER: CONTRIBUTE,
        ResourceType.REWARD: CONTRIBUTE,
        ResourceType.CAMPAIGN: CONTRIBUTE,
        ResourceType.VOUCHER: CONTRIBUTE,
    },
    Role.VIEWER: {
        ResourceType.PROJECT: READ_ONLY,
        ResourceType.ORGANIZATION: READ_ONLY,
        ResourceType.CUSTOMER: READ_ONLY,
        ResourceType.REWARD: READ_ONLY,
        ResourceType.CAMPAIGN: READ_ONLY,
        ResourceType.VOUCHER: READ_ONLY,
        ResourceType.MEMBERSHIP: READ_ONLY,
    },
}


class RoleHierarchy:
    """Stateless rank and capability lookups."""

    def __init__(self, capabilities: Optional[CapabilityMatrix] = None):
        matrix = DEFAULT_CAPABILITIES if capabilities is None else capabilities
        self._capabilities: Dict[Role, Dict[ResourceType, FrozenSet[Action]]] = {
            Role(role): {
                ResourceType(resource_type): frozenset(Action(action) for action in actions)
                for resource_type, actions in grants.items()
            }
            for role, grants in matrix.items()
        }

    def rank(self, role) -> int:
        """Privilege rank of ``role``; 0 for anything that is not a role."""
        parsed = parse_enum(Role, role)
        return ROLE_RANKS[parsed] if parsed is not None else 0

    def implies_capability(self, role, resource_type, action) -> bool:
        """Whether ``role`` grants ``action`` on ``resource_type`` by default."""
        parsed_role = parse_enum(Role, role)
        parsed_resource = parse_enum(ResourceType, resource_type)
        parsed_action = parse_enum(Action, action)
        if parsed_role is None or parsed_resource is None or parsed_action is None:
            return False
        grants = self._capabilities.get(parsed_role, {})
        return parsed_action in grants.get(parsed_resource, frozenset())

    def roles_at_least(self, min_role) -> FrozenSet[Role]:
        """All roles ranked at or above ``min_role``."""
        threshold = self.rank(min_role)
        if threshold == 0:
            return frozenset()
        return frozenset(role for role, rank in ROLE_RANKS.items() if rank >= threshold)

    def highest(self, roles: Iterable[Role]) -> Optional[Role]:
        """Highest-ranked role of ``roles`` or None when empty."""
        ranked = sorted(roles, key=self.rank, reverse=True)
        return ranked[0] if ranked else None


DEFAULT_ROLE_HIERARCHY = RoleHierarchy()


def rank(role) -> int:
    return DEFAULT_ROLE_HIERARCHY.rank(role)


def implies_capability(role, resource_type, action) -> bool:
    return DEFAULT_ROLE_HIERARCHY.implies_capability(role, resource_type, action)
