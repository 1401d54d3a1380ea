"""Role assignment entity: ``user_id`` holds ``role`` within ``domain``."""

from dataclasses import dataclass
from typing import Any, Dict

from ....config.constants import Role
from ....core.validation import require_enum, validate_domain, validate_user_id


@dataclass(frozen=True)
class RoleAssignment:
    """Immutable (user_id, role, domain) tuple. Role changes are revoke + assign."""

    user_id: str
    role: Role
    domain: str

    def __post_init__(self):
        validate_user_id(self.user_id)
        validate_domain(self.domain)
        object.__setattr__(self, "role", require_enum(Role, self.role, "role"))

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "role": self.role.value,
            "domain": self.domain,
        }

    def __str__(self) -> str:
        return f"RoleAssignment({self.user_id}, {self.role.value}, {self.domain})"
