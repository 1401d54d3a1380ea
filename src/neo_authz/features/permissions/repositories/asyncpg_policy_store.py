"""AsyncPG-based policy store implementation.

Concrete implementation of the PolicyStore protocol on PostgreSQL. Each
mutating transaction takes a transaction-scoped advisory lock on the domain
so check-then-act sequences are serialized across processes, not only
within one event loop.
"""

import asyncio
import logging
import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Set

import asyncpg

from ....config.constants import Action, DatabaseSchemas, ResourceType, Role
from ....core.exceptions import ConfigurationError, InvalidArgumentError, UnavailableError
from ....core.validation import parse_enum, require_enum, validate_domain, validate_user_id
from ..entities import Policy, RoleAssignment
from .queries import render_queries

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

SCHEMA_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


def _affected_rows(status: str) -> int:
    """Row count from an asyncpg command status such as ``DELETE 1``."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


def _roles_from_rows(rows) -> Set[Role]:
    roles = set()
    for row in rows:
        role = parse_enum(Role, row["role"])
        if role is None:
            logger.warning("Skipping role assignment row with unknown role value")
            continue
        roles.add(role)
    return roles


def _policies_from_rows(rows, domain: str) -> List[Policy]:
    policies = []
    for row in rows:
        resource_type = parse_enum(ResourceType, row["resource_type"])
        action = parse_enum(Action, row["action"])
        if resource_type is None or action is None:
            logger.warning(f"Skipping policy row with unknown capability in domain {domain}")
            continue
        policies.append(Policy(row["subject"], resource_type, action, domain))
    return policies


def _optional_value(value) -> Optional[str]:
    return value.value if value is not None else None


class AsyncPGPolicyStoreTransaction:
    """Statements bound to one connection inside an open transaction."""

    def __init__(self, connection: asyncpg.Connection, queries: dict, domain: str):
        self.domain = domain
        self._conn = connection
        self._queries = queries

    async def _execute(self, name: str, *args) -> int:
        try:
            status = await self._conn.execute(self._queries[name], *args)
        except STORAGE_ERRORS as e:
            logger.error(f"Policy store statement {name} failed for domain {self.domain}: {type(e).__name__}")
            raise UnavailableError(f"Policy store unavailable: {type(e).__name__}", details={"domain": self.domain})
        return _affected_rows(status)

    async def _fetch(self, name: str, *args):
        try:
            return await self._conn.fetch(self._queries[name], *args)
        except STORAGE_ERRORS as e:
            logger.error(f"Policy store query {name} failed for domain {self.domain}: {type(e).__name__}")
            raise UnavailableError(f"Policy store unavailable: {type(e).__name__}", details={"domain": self.domain})

    async def get_roles_for_user(self, user_id: str) -> Set[Role]:
        rows = await self._fetch("select_user_roles", self.domain, validate_user_id(user_id))
        return _roles_from_rows(rows)

    async def list_role_assignments(self) -> List[RoleAssignment]:
        rows = await self._fetch("select_role_assignments", self.domain)
        assignments = []
        for row in rows:
            role = parse_enum(Role, row["role"])
            if role is None:
                logger.warning(f"Skipping role assignment row with unknown role in domain {self.domain}")
                continue
            assignments.append(RoleAssignment(row["user_id"], role, self.domain))
        return assignments

    async def add_role_assignment(self, user_id: str, role: Role) -> bool:
        role = require_enum(Role, role, "role")
        return await self._execute("insert_role_assignment", self.domain, validate_user_id(user_id), role.value) > 0

    async def remove_role_assignment(self, user_id: str, role: Role) -> bool:
        role = require_enum(Role, role, "role")
        return await self._execute("delete_role_assignment", self.domain, validate_user_id(user_id), role.value) > 0

    async def add_policy(self, policy: Policy) -> bool:
        self._check_domain(policy)
        return await self._execute(
            "insert_policy", self.domain, policy.subject, policy.resource_type.value, policy.action.value
        ) > 0

    async def remove_policy(self, policy: Policy) -> bool:
        self._check_domain(policy)
        return await self._execute(
            "delete_policy", self.domain, policy.subject, policy.resource_type.value, policy.action.value
        ) > 0

    async def list_policies(
        self,
        subject: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
        action: Optional[Action] = None
    ) -> List[Policy]:
        rows = await self._fetch(
            "select_policies", self.domain, subject, _optional_value(resource_type), _optional_value(action)
        )
        return _policies_from_rows(rows, self.domain)

    def _check_domain(self, policy: Policy) -> None:
        if policy.domain != self.domain:
            raise InvalidArgumentError(
                "Policy domain does not match transaction domain",
                details={"domain": self.domain},
            )


class AsyncPGPolicyStore:
    """AsyncPG implementation of the PolicyStore protocol."""

    def __init__(self, pool: asyncpg.Pool, schema: str = DatabaseSchemas.DEFAULT):
        self._pool = pool
        self.schema = self._validate_schema_name(schema)
        self._queries = render_queries(self.schema)

    @classmethod
    async def create(
        cls,
        dsn: str,
        schema: str = DatabaseSchemas.DEFAULT,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: Optional[float] = None
    ) -> "AsyncPGPolicyStore":
        """Create a connection pool and a store bound to it."""
        cls._validate_schema_name(schema)
        try:
            pool = await asyncpg.create_pool(
                dsn=dsn,
                min_size=min_size,
                max_size=max_size,
                command_timeout=command_timeout,
            )
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to create policy store pool: {type(e).__name__}")
            raise UnavailableError(f"Policy store unavailable: {type(e).__name__}")
        return cls(pool, schema)

    @staticmethod
    def _validate_schema_name(schema: str) -> str:
        """Validate schema name to prevent SQL injection."""
        if not isinstance(schema, str) or not SCHEMA_NAME_PATTERN.match(schema):
            raise ConfigurationError(f"Invalid schema name: {schema}")
        return schema

    async def ensure_schema(self) -> None:
        """Create the schema and tables if they do not exist."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(self._queries["create_schema"])
                    await conn.execute(self._queries["create_role_assignments_table"])
                    await conn.execute(self._queries["create_policies_table"])
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to create policy store tables in {self.schema}: {type(e).__name__}")
            raise UnavailableError(f"Policy store unavailable: {type(e).__name__}")
        logger.info(f"Policy store tables ready in schema {self.schema}")

    @asynccontextmanager
    async def transaction(self, domain: str) -> AsyncIterator[AsyncPGPolicyStoreTransaction]:
        validate_domain(domain)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(self._queries["domain_advisory_lock"], domain)
                    yield AsyncPGPolicyStoreTransaction(conn, self._queries, domain)
        except STORAGE_ERRORS as e:
            logger.error(f"Policy store transaction failed for domain {domain}: {type(e).__name__}")
            raise UnavailableError(f"Policy store unavailable: {type(e).__name__}", details={"domain": domain})

    @asynccontextmanager
    async def _autocommit(self, domain: str) -> AsyncIterator[AsyncPGPolicyStoreTransaction]:
        """Unlocked autocommit view for single statements."""
        validate_domain(domain)
        try:
            async with self._pool.acquire() as conn:
                yield AsyncPGPolicyStoreTransaction(conn, self._queries, domain)
        except STORAGE_ERRORS as e:
            logger.error(f"Policy store connection failed for domain {domain}: {type(e).__name__}")
            raise UnavailableError(f"Policy store unavailable: {type(e).__name__}", details={"domain": domain})

    async def get_roles_for_user(self, user_id: str, domain: str) -> Set[Role]:
        async with self._autocommit(domain) as view:
            return await view.get_roles_for_user(user_id)

    async def list_role_assignments(self, domain: str) -> List[RoleAssignment]:
        async with self._autocommit(domain) as view:
            return await view.list_role_assignments()

    async def add_role_assignment(self, user_id: str, role: Role, domain: str) -> bool:
        async with self._autocommit(domain) as view:
            return await view.add_role_assignment(user_id, role)

    async def remove_role_assignment(self, user_id: str, role: Role, domain: str) -> bool:
        async with self._autocommit(domain) as view:
            return await view.remove_role_assignment(user_id, role)

    async def add_policy(self, policy: Policy) -> bool:
        async with self._autocommit(policy.domain) as view:
            return await view.add_policy(policy)

    async def remove_policy(self, policy: Policy) -> bool:
        async with self._autocommit(policy.domain) as view:
            return await view.remove_policy(policy)

    async def list_policies(
        self,
        domain: str,
        subject: Optional[str] = None,
        resource_type: Optional[ResourceType] = None,
        action: Optional[Action] = None
    ) -> List[Policy]:
        async with self._autocommit(domain) as view:
            return await view.list_policies(subject, resource_type, action)

    async def close(self) -> None:
        await self._pool.close()
