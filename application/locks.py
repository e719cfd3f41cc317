"""In-process critical sections keyed by record identity"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable


class KeyedLocks:
    """One asyncio.Lock per key, created on first use.

    Serializes check-then-act sequences (room capacity, duplicate invoices)
    within a single process. Separate worker processes do not share these
    locks.
    """

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}

    def _lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        async with self._lock_for(key):
            yield
