"""Redis role cache for neo-authz.

Caches the role set of a (user, domain) pair for the enforcer's read path.
Entries are keyed by a per-domain generation counter; invalidating a domain
is a single INCR and orphaned entries age out with their TTL. The cache is
best-effort: Redis failures are logged and treated as misses.
"""

import json
import logging
from typing import Optional, Set

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ....config.constants import CacheKeys, CacheTTL, Role
from ....core.validation import parse_enum

logger = logging.getLogger(__name__)


class RedisRoleCache:
    """RoleCache protocol implementation backed by redis.asyncio."""

    def __init__(
        self,
        client: Redis,
        ttl: int = CacheTTL.ROLES_DEFAULT,
        key_prefix: str = "authz"
    ):
        self._client = client
        self.ttl = ttl
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, ttl: int = CacheTTL.ROLES_DEFAULT, key_prefix: str = "authz") -> "RedisRoleCache":
        client = redis.from_url(url, decode_responses=True)
        return cls(client, ttl=ttl, key_prefix=key_prefix)

    def _key(self, user_id: str, domain: str, generation: int) -> str:
        return CacheKeys.USER_ROLES.format(
            prefix=self.key_prefix,
            domain=domain,
            generation=generation,
            user_id=user_id,
        )

    def _generation_key(self, domain: str) -> str:
        return CacheKeys.DOMAIN_GENERATION.format(prefix=self.key_prefix, domain=domain)

    async def get_generation(self, domain: str) -> Optional[int]:
        try:
            raw = await self._client.get(self._generation_key(domain))
        except RedisError as e:
            logger.warning(f"Role cache generation read failed for domain {domain}: {type(e).__name__}")
            return None

        if raw is None:
            return 0
        try:
            return int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed role cache generation for domain {domain}")
            return None

    async def get_user_roles(self, user_id: str, domain: str, generation: int) -> Optional[Set[Role]]:
        try:
            raw = await self._client.get(self._key(user_id, domain, generation))
        except RedisError as e:
            logger.warning(f"Role cache read failed for domain {domain}: {type(e).__name__}")
            return None

        if raw is None:
            return None

        try:
            values = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Discarding malformed role cache entry for domain {domain}")
            return None

        roles = {parse_enum(Role, value) for value in values}
        if None in roles:
            # Entry written by an incompatible deployment
            return None
        return roles

    async def set_user_roles(self, user_id: str, domain: str, roles: Set[Role], generation: int) -> None:
        payload = json.dumps(sorted(role.value for role in roles))
        try:
            await self._client.set(self._key(user_id, domain, generation), payload, ex=self.ttl)
        except RedisError as e:
            logger.warning(f"Role cache write failed for domain {domain}: {type(e).__name__}")

    async def invalidate_domain(self, domain: str) -> None:
        try:
            await self._client.incr(self._generation_key(domain))
        except RedisError as e:
            logger.error(f"Role cache invalidation failed for domain {domain}: {type(e).__name__}")

    async def close(self) -> None:
        await self._client.aclose()
