"""Transient result of one enforcer evaluation."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ....config.constants import DecisionReason, Role
from .policy import Policy


@dataclass(frozen=True)
class AuthorizationDecision:
    """Allow/deny outcome together with what produced it. Never persisted."""

    allowed: bool
    reason: DecisionReason
    matched_role: Optional[Role] = None
    matched_policy: Optional[Policy] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def deny(cls, reason: DecisionReason = DecisionReason.NO_MATCH) -> "AuthorizationDecision":
        return cls(allowed=False, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value,
            "matched_role": self.matched_role.value if self.matched_role else None,
            "matched_policy": self.matched_policy.to_dict() if self.matched_policy else None,
        }
