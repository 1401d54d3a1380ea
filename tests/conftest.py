"""Pytest configuration and fixtures for neo-authz tests."""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from neo_authz.config.settings import get_settings
from neo_authz.features.permissions.repositories import InMemoryPolicyStore
from neo_authz.features.permissions.services import (
    AuthorizationEngine,
    Enforcer,
    PolicyAdministration,
    PolicyManager,
)
from neo_authz.features.permissions.utils import DomainLockRegistry


PROJECT = "project-alpha"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are lru_cached; keep tests independent of each other."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    """Fresh in-memory policy store."""
    return InMemoryPolicyStore()


@pytest.fixture
def locks():
    return DomainLockRegistry()


@pytest.fixture
def enforcer(store):
    return Enforcer(store)


@pytest.fixture
def manager(store, enforcer, locks):
    return PolicyManager(store, enforcer=enforcer, locks=locks)


@pytest.fixture
def administration(store, locks):
    return PolicyAdministration(store, locks=locks)


@pytest.fixture
def engine(store):
    return AuthorizationEngine(store)


@pytest_asyncio.fixture
async def owned_project(manager):
    """Domain PROJECT bootstrapped with owner ``alice``."""
    await manager.bootstrap_domain("alice", PROJECT)
    return PROJECT


@pytest.fixture
def mock_role_cache():
    """Mock RoleCache that always misses."""
    cache = AsyncMock()
    cache.get_generation = AsyncMock(return_value=0)
    cache.get_user_roles = AsyncMock(return_value=None)
    cache.set_user_roles = AsyncMock()
    cache.invalidate_domain = AsyncMock()
    cache.close = AsyncMock()
    return cache


@pytest.fixture
def mock_connection():
    """Mock asyncpg connection."""
    conn = MagicMock()
    conn.execute = AsyncMock(return_value="INSERT 0 1")
    conn.fetch = AsyncMock(return_value=[])
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    conn.transaction = MagicMock(return_value=transaction)
    return conn


@pytest.fixture
def mock_pool(mock_connection):
    """Mock asyncpg pool whose acquire() yields ``mock_connection``."""
    pool = MagicMock()
    acquire = MagicMock()
    acquire.__aenter__ = AsyncMock(return_value=mock_connection)
    acquire.__aexit__ = AsyncMock(return_value=False)
    pool.acquire = MagicMock(return_value=acquire)
    pool.close = AsyncMock()
    return pool
