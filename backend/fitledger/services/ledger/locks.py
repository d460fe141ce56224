"""
Per-user locks serializing writes to a user's derived state.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class UserLockRegistry:
    """
    One asyncio.Lock per user id.

    Created once per process and shared by every request. Users never
    contend with each other.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        """Hold the user's lock for the duration of the block."""
        async with self.get(user_id):
            yield

    def __len__(self) -> int:
        return len(self._locks)
