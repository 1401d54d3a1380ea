"""Tests for the Enforcer decision algorithm."""

import logging

import pytest
from unittest.mock import AsyncMock

from neo_authz.config.constants import Action, DecisionReason, ResourceType, Role
from neo_authz.config.logging_config import ENFORCER_LOGGER
from neo_authz.core.exceptions import InvalidArgumentError, UnavailableError
from neo_authz.features.permissions.entities import Policy
from neo_authz.features.permissions.services import Enforcer


class TestEnforcer:

    @pytest.mark.asyncio
    async def test_role_capability_allows(self, store, enforcer):
        await store.add_role_assignment("u1", Role.MEMBER, "p1")

        decision = await enforcer.explain("u1", ResourceType.CUSTOMER, Action.CREATE, "p1")

        assert decision.allowed
        assert decision.reason == DecisionReason.ROLE_CAPABILITY
        assert decision.matched_role is Role.MEMBER

    @pytest.mark.asyncio
    async def test_no_roles_no_policies_denies(self, enforcer):
        decision = await enforcer.explain("stranger", ResourceType.PROJECT, Action.READ, "p1")
        assert not decision.allowed
        assert decision.reason == DecisionReason.NO_MATCH

    @pytest.mark.asyncio
    async def test_user_policy_grants_without_roles(self, store, enforcer):
        await store.add_policy(Policy("u1", ResourceType.BILLING, Action.READ, "p1"))

        decision = await enforcer.explain("u1", ResourceType.BILLING, Action.READ, "p1")

        assert decision.allowed
        assert decision.reason == DecisionReason.POLICY_MATCH
        assert decision.matched_policy == Policy("u1", ResourceType.BILLING, Action.READ, "p1")

    @pytest.mark.asyncio
    async def test_role_subject_policy_grants(self, store, enforcer):
        await store.add_role_assignment("u1", Role.VIEWER, "p1")
        await store.add_policy(Policy("VIEWER", ResourceType.VOUCHER, Action.CREATE, "p1"))

        assert await enforcer.check("u1", ResourceType.VOUCHER, Action.CREATE, "p1")
        assert not await enforcer.check("u1", ResourceType.VOUCHER, Action.DELETE, "p1")
        # Role subjects only apply to holders of the role
        assert not await enforcer.check("u2", ResourceType.VOUCHER, Action.CREATE, "p1")

    @pytest.mark.asyncio
    async def test_other_users_policy_does_not_grant(self, store, enforcer):
        await store.add_policy(Policy("u2", ResourceType.BILLING, Action.READ, "p1"))
        assert not await enforcer.check("u1", ResourceType.BILLING, Action.READ, "p1")

    @pytest.mark.asyncio
    async def test_string_capabilities_are_parsed(self, store, enforcer):
        await store.add_role_assignment("u1", Role.ADMIN, "p1")
        assert await enforcer.check("u1", "api_key", "delete", "p1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource_type, action", [
        ("spaceship", Action.READ),
        (ResourceType.PROJECT, "launch"),
        ("*", "*"),
    ])
    async def test_unknown_capability_denies(self, store, enforcer, resource_type, action):
        await store.add_role_assignment("u1", Role.OWNER, "p1")

        decision = await enforcer.explain("u1", resource_type, action, "p1")

        assert not decision.allowed
        assert decision.reason == DecisionReason.UNKNOWN_CAPABILITY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id, domain", [("", "p1"), ("u1", ""), (None, "p1"), ("u1", 7)])
    async def test_malformed_identifiers_raise(self, enforcer, user_id, domain):
        with pytest.raises(InvalidArgumentError):
            await enforcer.check(user_id, ResourceType.PROJECT, Action.READ, domain)

    @pytest.mark.asyncio
    async def test_domains_are_isolated(self, store, enforcer):
        await store.add_role_assignment("u1", Role.OWNER, "p1")
        await store.add_policy(Policy("u1", ResourceType.BILLING, Action.READ, "p1"))

        assert await enforcer.check("u1", ResourceType.PROJECT, Action.DELETE, "p1")
        assert not await enforcer.check("u1", ResourceType.PROJECT, Action.READ, "p2")
        assert not await enforcer.check("u1", ResourceType.BILLING, Action.READ, "p2")

    @pytest.mark.asyncio
    async def test_highest_matching_role_reported(self, store, enforcer):
        # Transient multiplicity left behind by an interrupted role change
        await store.add_role_assignment("u1", Role.VIEWER, "p1")
        await store.add_role_assignment("u1", Role.ADMIN, "p1")

        decision = await enforcer.explain("u1", ResourceType.PROJECT, Action.READ, "p1")

        assert decision.matched_role is Role.ADMIN

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self):
        store = AsyncMock()
        store.get_roles_for_user = AsyncMock(side_effect=UnavailableError("down"))
        enforcer = Enforcer(store)

        with pytest.raises(UnavailableError):
            await enforcer.check("u1", ResourceType.PROJECT, Action.READ, "p1")


class TestEnforcerCache:

    @pytest.mark.asyncio
    async def test_cache_hit_skips_store(self, mock_role_cache):
        store = AsyncMock()
        store.list_policies = AsyncMock(return_value=[])
        mock_role_cache.get_user_roles.return_value = {Role.OWNER}
        enforcer = Enforcer(store, cache=mock_role_cache)

        assert await enforcer.check("u1", ResourceType.BILLING, Action.DELETE, "p1")
        store.get_roles_for_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_miss_populates(self, store, mock_role_cache):
        await store.add_role_assignment("u1", Role.MEMBER, "p1")
        enforcer = Enforcer(store, cache=mock_role_cache)

        assert await enforcer.get_roles("u1", "p1") == {Role.MEMBER}
        mock_role_cache.get_generation.assert_awaited_once_with("p1")
        mock_role_cache.set_user_roles.assert_awaited_once_with("u1", "p1", {Role.MEMBER}, 0)

    @pytest.mark.asyncio
    async def test_unreachable_cache_bypassed(self, store, mock_role_cache):
        await store.add_role_assignment("u1", Role.VIEWER, "p1")
        mock_role_cache.get_generation.return_value = None
        enforcer = Enforcer(store, cache=mock_role_cache)

        assert await enforcer.get_roles("u1", "p1") == {Role.VIEWER}
        mock_role_cache.get_user_roles.assert_not_awaited()
        mock_role_cache.set_user_roles.assert_not_awaited()


class TestDecisionLogging:

    @pytest.mark.asyncio
    async def test_every_outcome_logged(self, store, enforcer, caplog):
        caplog.set_level(logging.DEBUG, logger=ENFORCER_LOGGER)
        await store.add_role_assignment("u1", Role.VIEWER, "p1")
        await store.add_policy(Policy("u2", ResourceType.BILLING, Action.READ, "p1"))

        await enforcer.check("u1", ResourceType.PROJECT, Action.READ, "p1")
        await enforcer.check("u2", ResourceType.BILLING, Action.READ, "p1")
        await enforcer.check("u3", ResourceType.BILLING, Action.READ, "p1")
        await enforcer.check("u1", "SPACESHIP", Action.READ, "p1")

        messages = [record.getMessage() for record in caplog.records if record.name == ENFORCER_LOGGER]
        assert messages == [
            "Decision role_capability in domain p1",
            "Decision policy_match in domain p1",
            "Decision no_match in domain p1",
            "Decision unknown_capability in domain p1",
        ]

    @pytest.mark.asyncio
    async def test_log_records_omit_subjects(self, store, enforcer, caplog):
        caplog.set_level(logging.DEBUG, logger=ENFORCER_LOGGER)
        await store.add_policy(Policy("secret-user", ResourceType.BILLING, Action.READ, "p1"))

        await enforcer.check("secret-user", ResourceType.BILLING, Action.READ, "p1")

        assert "secret-user" not in caplog.text
