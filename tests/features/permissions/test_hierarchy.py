"""Tests for the role hierarchy and default capability matrix."""

import pytest

from neo_authz.config.constants import Action, ResourceType, Role
from neo_authz.features.permissions.entities import (
    DEFAULT_ROLE_HIERARCHY,
    RoleHierarchy,
    implies_capability,
    rank,
)


class TestRank:

    def test_total_order(self):
        assert rank(Role.OWNER) > rank(Role.ADMIN) > rank(Role.MEMBER) > rank(Role.VIEWER) > 0

    def test_names_are_accepted(self):
        assert rank("owner") == 4
        assert rank("VIEWER") == 1

    def test_unknown_role_ranks_zero(self):
        assert rank("SUPERUSER") == 0
        assert rank(None) == 0

    def test_roles_at_least(self):
        assert DEFAULT_ROLE_HIERARCHY.roles_at_least(Role.ADMIN) == {Role.OWNER, Role.ADMIN}
        assert DEFAULT_ROLE_HIERARCHY.roles_at_least(Role.VIEWER) == set(Role)
        assert DEFAULT_ROLE_HIERARCHY.roles_at_least("nobody") == set()

    def test_highest(self):
        assert DEFAULT_ROLE_HIERARCHY.highest([Role.VIEWER, Role.ADMIN, Role.MEMBER]) is Role.ADMIN
        assert DEFAULT_ROLE_HIERARCHY.highest([]) is None


class TestDefaultCapabilities:

    @pytest.mark.parametrize("resource_type", list(ResourceType))
    @pytest.mark.parametrize("action", list(Action))
    def test_owner_has_every_capability(self, resource_type, action):
        assert implies_capability(Role.OWNER, resource_type, action)

    @pytest.mark.parametrize("role, resource_type, action, expected", [
        (Role.ADMIN, ResourceType.USER, Action.DELETE, True),
        (Role.ADMIN, ResourceType.PROJECT, Action.UPDATE, True),
        (Role.ADMIN, ResourceType.PROJECT, Action.DELETE, False),
        (Role.ADMIN, ResourceType.BILLING, Action.READ, True),
        (Role.ADMIN, ResourceType.BILLING, Action.UPDATE, False),
        (Role.ADMIN, ResourceType.AUTH_TOKEN, Action.MANAGE, True),
        (Role.MEMBER, ResourceType.CUSTOMER, Action.CREATE, True),
        (Role.MEMBER, ResourceType.CUSTOMER, Action.DELETE, False),
        (Role.MEMBER, ResourceType.API_TOKEN, Action.READ, True),
        (Role.MEMBER, ResourceType.API_KEY, Action.READ, False),
        (Role.VIEWER, ResourceType.VOUCHER, Action.READ, True),
        (Role.VIEWER, ResourceType.VOUCHER, Action.CREATE, False),
        (Role.VIEWER, ResourceType.AUDIT_LOG, Action.READ, False),
    ])
    def test_matrix(self, role, resource_type, action, expected):
        assert implies_capability(role, resource_type, action) is expected

    def test_capabilities_are_monotonic_in_rank(self):
        ordered = sorted(Role, key=rank)
        for lower, higher in zip(ordered, ordered[1:]):
            for resource_type in ResourceType:
                for action in Action:
                    if implies_capability(lower, resource_type, action):
                        assert implies_capability(higher, resource_type, action), (lower, higher, resource_type, action)

    @pytest.mark.parametrize("role, resource_type, action", [
        ("SUPERUSER", ResourceType.PROJECT, Action.READ),
        (Role.OWNER, "spaceship", Action.READ),
        (Role.OWNER, ResourceType.PROJECT, "launch"),
        (None, None, None),
    ])
    def test_unknown_values_fail_closed(self, role, resource_type, action):
        assert implies_capability(role, resource_type, action) is False


class TestCustomMatrix:

    def test_replacement_matrix(self):
        hierarchy = RoleHierarchy(capabilities={
            Role.VIEWER: {ResourceType.BILLING: [Action.READ]},
        })
        assert hierarchy.implies_capability(Role.VIEWER, ResourceType.BILLING, Action.READ)
        assert not hierarchy.implies_capability(Role.VIEWER, ResourceType.PROJECT, Action.READ)
        assert not hierarchy.implies_capability(Role.OWNER, ResourceType.PROJECT, Action.READ)

    def test_rank_is_independent_of_matrix(self):
        assert RoleHierarchy(capabilities={}).rank(Role.OWNER) == 4
