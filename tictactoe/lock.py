from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class GameLocks:
    """Per-game mutual exclusion for read-modify-write sequences.

    Locks are created on first use and dropped as soon as no task holds or
    waits for them, so evicted games don't leak entries. Bookkeeping relies on
    running on a single event loop.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, game_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(game_id, asyncio.Lock())
        self._users[game_id] = self._users.get(game_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[game_id] -= 1
            if not self._users[game_id]:
                del self._users[game_id]
                self._locks.pop(game_id, None)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._locks
