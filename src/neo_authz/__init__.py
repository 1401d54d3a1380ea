"""Neo-Authz - multi-tenant role and policy authorization engine.

Decides whether a user may perform an action on a resource type inside a
project domain, from per-domain roles and explicit policies, and keeps the
role invariants of every domain intact under concurrent administration.

Logging is not configured on import; host applications call
``setup_logging()`` at startup.
"""

from .__version__ import __version__

from .config import (
    Role,
    ResourceType,
    Action,
    DecisionReason,
    AuthzSettings,
    get_settings,
    setup_logging,
    get_logger,
)

from .core.exceptions import (
    # Base Exception
    NeoAuthzError,

    # Common Exceptions
    InvalidArgumentError,
    InvariantViolationError,
    NotFoundError,
    PolicyNotFoundError,
    RoleAssignmentNotFoundError,
    PermissionDeniedError,
    UnavailableError,
    ConfigurationError,

    # Utility Functions
    get_http_status_code,
    create_error_response,
)

from .features.permissions import (
    RoleHierarchy,
    DEFAULT_ROLE_HIERARCHY,
    Policy,
    RoleAssignment,
    AuthorizationDecision,
    PolicyStore,
    RoleCache,
    Enforcer,
    PolicyManager,
    PolicyAdministration,
    AuthorizationEngine,
    InMemoryPolicyStore,
    AsyncPGPolicyStore,
    RedisRoleCache,
    create_authorization_engine,
)

__all__ = [
    # Enums
    "Role",
    "ResourceType",
    "Action",
    "DecisionReason",

    # Configuration
    "AuthzSettings",
    "get_settings",
    "setup_logging",
    "get_logger",

    # Exceptions
    "NeoAuthzError",
    "InvalidArgumentError",
    "InvariantViolationError",
    "NotFoundError",
    "PolicyNotFoundError",
    "RoleAssignmentNotFoundError",
    "PermissionDeniedError",
    "UnavailableError",
    "ConfigurationError",
    "get_http_status_code",
    "create_error_response",

    # Permissions
    "RoleHierarchy",
    "DEFAULT_ROLE_HIERARCHY",
    "Policy",
    "RoleAssignment",
    "AuthorizationDecision",
    "PolicyStore",
    "RoleCache",
    "Enforcer",
    "PolicyManager",
    "PolicyAdministration",
    "AuthorizationEngine",
    "InMemoryPolicyStore",
    "AsyncPGPolicyStore",
    "RedisRoleCache",
    "create_authorization_engine",

    # Version
    "__version__",
]
