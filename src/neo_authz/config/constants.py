"""Constants and enums for neo-authz.

This module defines the closed enumerations the authorization engine works
with (roles, resource types, actions) together with cache and storage
configuration values shared by the repositories.
"""

from enum import Enum
from typing import Final


class _CaseInsensitiveEnum(str, Enum):
    """String enum that also accepts lower/mixed-case values on lookup."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().upper()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class Role(_CaseInsensitiveEnum):
    """Coarse privilege level held by a user within a domain."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"


class ResourceType(_CaseInsensitiveEnum):
    """Resource types a deployment recognizes."""

    PROJECT = "PROJECT"
    ORGANIZATION = "ORGANIZATION"
    USER = "USER"
    BILLING = "BILLING"
    API_TOKEN = "API_TOKEN"
    API_KEY = "API_KEY"
    AUDIT_LOG = "AUDIT_LOG"
    AUTH_TOKEN = "AUTH_TOKEN"
    CUSTOMER = "CUSTOMER"
    REWARD = "REWARD"
    CAMPAIGN = "CAMPAIGN"
    VOUCHER = "VOUCHER"
    MEMBERSHIP = "MEMBERSHIP"
    INTEGRATION = "INTEGRATION"
    PROJECT_SETTINGS = "PROJECT_SETTINGS"
    POLICY = "POLICY"


class Action(_CaseInsensitiveEnum):
    """Actions that can be performed on a resource type."""

    READ = "READ"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    MANAGE = "MANAGE"


class DecisionReason(str, Enum):
    """Why the enforcer reached a decision."""

    ROLE_CAPABILITY = "role_capability"
    POLICY_MATCH = "policy_match"
    UNKNOWN_CAPABILITY = "unknown_capability"
    NO_MATCH = "no_match"


class StorageBackend(str, Enum):
    """Supported policy store backends."""

    MEMORY = "memory"
    POSTGRES = "postgres"


class CacheKeys:
    """Cache key patterns for Redis."""

    USER_ROLES: Final[str] = "{prefix}:roles:{domain}:g{generation}:{user_id}"
    DOMAIN_GENERATION: Final[str] = "{prefix}:gen:{domain}"


class CacheTTL:
    """Cache TTL values in seconds."""

    ROLES_DEFAULT: Final[int] = 300     # 5 minutes


class DatabaseSchemas:
    """Database schema and table names."""

    DEFAULT: Final[str] = "admin"
    ROLE_ASSIGNMENTS_TABLE: Final[str] = "authz_role_assignments"
    POLICIES_TABLE: Final[str] = "authz_policies"


# Identifier columns are VARCHAR(255)
MAX_IDENTIFIER_LENGTH: Final[int] = 255
