"""Builds the authorization engine from settings.

Called once at process start; the resulting engine is injected into request
handlers instead of living in a module-level singleton.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from ...config.constants import StorageBackend
from ...config.settings import AuthzSettings
from ...core.exceptions import ConfigurationError
from .entities import PolicyStore, RoleCache
from .repositories import AsyncPGPolicyStore, InMemoryPolicyStore, RedisRoleCache
from .services import AuthorizationEngine

logger = logging.getLogger(__name__)


def _load_settings() -> AuthzSettings:
    try:
        return AuthzSettings()
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in e.errors()})
        raise ConfigurationError(
            "Invalid authorization settings",
            details={"fields": fields},
        )


async def create_policy_store(settings: AuthzSettings) -> PolicyStore:
    """Create the store selected by ``settings.storage_backend``."""
    if settings.storage_backend == StorageBackend.MEMORY:
        logger.info("Using in-memory policy store")
        return InMemoryPolicyStore()

    if not settings.database_url:
        raise ConfigurationError(
            "database_url is required for the postgres storage backend",
            details={"field": "database_url"},
        )

    dsn = settings.database_url
    if "+asyncpg" in dsn:
        dsn = dsn.replace("+asyncpg", "")

    store = await AsyncPGPolicyStore.create(
        dsn,
        schema=settings.database_schema,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        command_timeout=settings.db_command_timeout,
    )
    if settings.create_tables:
        await store.ensure_schema()
    logger.info(f"Using PostgreSQL policy store in schema {settings.database_schema}")
    return store


def create_role_cache(settings: AuthzSettings) -> Optional[RoleCache]:
    """Create the redis role cache, or None when caching is off."""
    if not settings.uses_cache:
        return None
    logger.info(f"Using redis role cache with TTL {settings.cache_ttl_roles}s")
    return RedisRoleCache.from_url(
        settings.redis_url,
        ttl=settings.cache_ttl_roles,
        key_prefix=settings.cache_key_prefix,
    )


async def create_authorization_engine(settings: Optional[AuthzSettings] = None) -> AuthorizationEngine:
    """Build the engine with its store and optional cache.

    Args:
        settings: Explicit settings; read from the environment when omitted

    Raises:
        ConfigurationError: If the settings are invalid or incomplete
        UnavailableError: If the database cannot be reached
    """
    if settings is None:
        settings = _load_settings()

    store = await create_policy_store(settings)
    cache = create_role_cache(settings)
    return AuthorizationEngine(
        store,
        cache=cache,
        strict_role_revocation=settings.strict_role_revocation,
    )
