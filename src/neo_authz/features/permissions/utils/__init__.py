"""Permission feature utilities."""

from .domain_locks import DomainLockRegistry, locked_transaction

__all__ = [
    "DomainLockRegistry",
    "locked_transaction",
]
