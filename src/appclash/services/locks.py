"""Per-game mutual exclusion for read-modify-write cycles."""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from appclash.domain.errors import ConcurrencyConflict
from appclash.domain.models import GameID


class GameLocks:
    """One ``asyncio.Lock`` per game id, acquired with a bounded wait.

    Locks are kept in a weak-value map: an entry lives only while a holder
    or waiter references it, so finished and deleted games leave nothing
    behind.
    """

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout = timeout_seconds
        self._locks: weakref.WeakValueDictionary[GameID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._locks)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _lock_for(self, game_id: GameID) -> asyncio.Lock:
        lock = self._locks.get(game_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[game_id] = lock
        return lock

    def is_locked(self, game_id: GameID) -> bool:
        lock = self._locks.get(game_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, game_id: GameID) -> AsyncIterator[None]:
        """Hold the game's update slot, or raise ``ConcurrencyConflict``."""

        lock = self._lock_for(game_id)
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self._timeout)
        except TimeoutError:
            raise ConcurrencyConflict(
                f"game {game_id} is busy; retry the move"
            ) from None
        try:
            yield
        finally:
            lock.release()
