"""
Configuration management for the authorization engine.

Settings are read from the environment (prefix ``AUTHZ_``) or a ``.env``
file using pydantic-settings.
"""
import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheTTL, DatabaseSchemas, StorageBackend

SCHEMA_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


class AuthzSettings(BaseSettings):
    """Authorization engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Storage
    storage_backend: StorageBackend = Field(default=StorageBackend.MEMORY)
    database_url: Optional[str] = Field(default=None)
    database_schema: str = Field(default=DatabaseSchemas.DEFAULT)
    db_pool_min_size: int = Field(default=1, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=5.0, gt=0)
    create_tables: bool = Field(default=False)

    # Redis role cache
    redis_url: Optional[str] = Field(default=None)
    cache_enabled: bool = Field(default=False)
    cache_ttl_roles: int = Field(default=CacheTTL.ROLES_DEFAULT, ge=1)
    cache_key_prefix: str = Field(default="authz")

    # Behaviour
    strict_role_revocation: bool = Field(default=False)

    @field_validator("database_schema")
    @classmethod
    def validate_schema_name(cls, value: str) -> str:
        if not SCHEMA_NAME_PATTERN.match(value):
            raise ValueError(f"Invalid schema name: {value}")
        return value

    @property
    def uses_postgres(self) -> bool:
        return self.storage_backend == StorageBackend.POSTGRES

    @property
    def uses_cache(self) -> bool:
        return self.cache_enabled and bool(self.redis_url)


@lru_cache()
def get_settings() -> AuthzSettings:
    """Get cached settings instance."""
    return AuthzSettings()
