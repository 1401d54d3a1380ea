"""Configuration module for neo-authz."""

from .constants import (
    Role,
    ResourceType,
    Action,
    DecisionReason,
    StorageBackend,
    CacheKeys,
    CacheTTL,
    DatabaseSchemas,
    MAX_IDENTIFIER_LENGTH,
)
from .logging_config import LoggingConfig, setup_logging, get_logger
from .settings import AuthzSettings, get_settings

__all__ = [
    "Role",
    "ResourceType",
    "Action",
    "DecisionReason",
    "StorageBackend",
    "CacheKeys",
    "CacheTTL",
    "DatabaseSchemas",
    "MAX_IDENTIFIER_LENGTH",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    "AuthzSettings",
    "get_settings",
]
