"""Tests for Policy, RoleAssignment and AuthorizationDecision."""

import dataclasses

import pytest

from neo_authz.config.constants import Action, DecisionReason, ResourceType, Role
from neo_authz.core.exceptions import InvalidArgumentError
from neo_authz.features.permissions.entities import AuthorizationDecision, Policy, RoleAssignment


class TestPolicy:

    def test_enum_fields_are_coerced(self):
        policy = Policy("user-1", "voucher", "create", "p1")
        assert policy.resource_type is ResourceType.VOUCHER
        assert policy.action is Action.CREATE

    def test_equal_policies_hash_equal(self):
        first = Policy("user-1", ResourceType.VOUCHER, Action.CREATE, "p1")
        second = Policy("user-1", "VOUCHER", "CREATE", "p1")
        assert first == second
        assert len({first, second}) == 1

    def test_immutable(self):
        policy = Policy("user-1", ResourceType.VOUCHER, Action.CREATE, "p1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            policy.subject = "user-2"

    @pytest.mark.parametrize("subject, resource_type, action, domain", [
        ("", ResourceType.PROJECT, Action.READ, "p1"),
        ("user-1", "spaceship", Action.READ, "p1"),
        ("user-1", ResourceType.PROJECT, "*", "p1"),
        ("user-1", ResourceType.PROJECT, Action.READ, ""),
        ("user-1", ResourceType.PROJECT, Action.READ, None),
    ])
    def test_invalid_fields_rejected(self, subject, resource_type, action, domain):
        with pytest.raises(InvalidArgumentError):
            Policy(subject, resource_type, action, domain)

    def test_matches(self):
        policy = Policy("VIEWER", ResourceType.VOUCHER, Action.CREATE, "p1")
        assert policy.matches(ResourceType.VOUCHER, Action.CREATE)
        assert not policy.matches(ResourceType.VOUCHER, Action.DELETE)

    def test_to_dict(self):
        policy = Policy("user-1", ResourceType.API_KEY, Action.READ, "p1")
        assert policy.to_dict() == {
            "subject": "user-1",
            "resource_type": "API_KEY",
            "action": "READ",
            "domain": "p1",
        }


class TestRoleAssignment:

    def test_role_is_coerced(self):
        assignment = RoleAssignment("user-1", "owner", "p1")
        assert assignment.role is Role.OWNER
        assert assignment.is_owner

    def test_unknown_role_rejected(self):
        with pytest.raises(InvalidArgumentError):
            RoleAssignment("user-1", "SUPERUSER", "p1")

    def test_blank_user_rejected(self):
        with pytest.raises(InvalidArgumentError):
            RoleAssignment("  ", Role.MEMBER, "p1")


class TestAuthorizationDecision:

    def test_deny_is_falsy(self):
        decision = AuthorizationDecision.deny()
        assert not decision
        assert decision.reason == DecisionReason.NO_MATCH

    def test_to_dict(self):
        policy = Policy("user-1", ResourceType.VOUCHER, Action.CREATE, "p1")
        decision = AuthorizationDecision(True, DecisionReason.POLICY_MATCH, matched_policy=policy)
        assert decision
        assert decision.to_dict() == {
            "allowed": True,
            "reason": "policy_match",
            "matched_role": None,
            "matched_policy": policy.to_dict(),
        }
