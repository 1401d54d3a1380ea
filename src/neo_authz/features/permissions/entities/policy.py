"""Policy domain entity for neo-authz permissions feature.

A policy is an explicit grant of one action on one resource type to one
subject (a user id or a role name) inside one domain. Policies are layered
over the default capabilities of roles.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ....config.constants import Action, ResourceType
from ....core.validation import require_enum, validate_domain, validate_identifier


@dataclass(frozen=True)
class Policy:
    """Immutable (subject, resource_type, action, domain) tuple."""

    subject: str
    resource_type: ResourceType
    action: Action
    domain: str

    def __post_init__(self):
        """Validate identifiers and coerce enum fields."""
        validate_identifier(self.subject, "subject")
        validate_domain(self.domain)
        object.__setattr__(self, "resource_type", require_enum(ResourceType, self.resource_type, "resource_type"))
        object.__setattr__(self, "action", require_enum(Action, self.action, "action"))

    def matches(self, resource_type: ResourceType, action: Action) -> bool:
        """Check if this policy grants ``action`` on ``resource_type``."""
        return self.resource_type == resource_type and self.action == action

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "resource_type": self.resource_type.value,
            "action": self.action.value,
            "domain": self.domain,
        }

    def __str__(self) -> str:
        return f"Policy({self.subject}, {self.resource_type.value}, {self.action.value}, {self.domain})"
