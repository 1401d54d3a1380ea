"""Per-domain mutual exclusion for role and policy mutations."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from ..entities.protocols import PolicyStore, PolicyStoreTransaction


class DomainLockRegistry:
    """Lazily created asyncio locks keyed by domain.

    A lock lives only while someone holds or waits for it, so the registry
    does not grow with the number of domains ever mutated. Locks are bound to
    the event loop that first awaits them.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def acquire(self, domain: str) -> AsyncIterator[None]:
        lock = self._locks.get(domain)
        if lock is None:
            lock = self._locks[domain] = asyncio.Lock()
        self._users[domain] = self._users.get(domain, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[domain] -= 1
            if self._users[domain] == 0:
                del self._users[domain]
                del self._locks[domain]

    def is_locked(self, domain: str) -> bool:
        lock = self._locks.get(domain)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


@asynccontextmanager
async def locked_transaction(
    locks: DomainLockRegistry,
    store: PolicyStore,
    domain: str
) -> AsyncIterator[PolicyStoreTransaction]:
    """Hold the domain lock and a store transaction for a check-then-act sequence."""
    async with locks.acquire(domain):
        async with store.transaction(domain) as tx:
            yield tx
