import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class SlotLockRegistry:
    """
    One asyncio lock per slot code.

    Serialises the availability check and the writes that follow it, so two
    requests for the same slot cannot both pass the check. Only covers a
    single process. A slot's lock is dropped once nobody holds or waits for
    it, so the registry only grows with in-flight requests.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._users: dict[str, int] = defaultdict(int)
        self._mutex = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._locks)

    async def _acquire_entry(self, slot: str) -> asyncio.Lock:
        async with self._mutex:
            self._users[slot] += 1
            return self._locks[slot]

    async def _release_entry(self, slot: str) -> None:
        async with self._mutex:
            self._users[slot] -= 1
            if self._users[slot] == 0:
                del self._users[slot]
                del self._locks[slot]

    @asynccontextmanager
    async def hold(self, slot: str) -> AsyncIterator[None]:
        lock = await self._acquire_entry(slot)
        try:
            async with lock:
                yield
        finally:
            await self._release_entry(slot)
