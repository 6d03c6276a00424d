"""Best-effort leaderboard reporting, decoupled from the game-state commit."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from appclash.repository.leaderboard import SqlLeaderboard

logger = logging.getLogger(__name__)


class ScoreReporter(Protocol):
    """Anything that can durably count a win. Must tolerate retries."""

    def report_win(self, game_id: str, player_id: str, player_name: str) -> bool: ...


class LeaderboardReporter:
    """Report wins into the SQL leaderboard."""

    def __init__(self, leaderboard: SqlLeaderboard) -> None:
        self._leaderboard = leaderboard

    def report_win(self, game_id: str, player_id: str, player_name: str) -> bool:
        return self._leaderboard.record_win(game_id, player_id, player_name)


class ScoreDispatcher:
    """Run score reports as background tasks with bounded retries.

    Failures are logged and swallowed; the game snapshot is the source of
    truth for who won.
    """

    def __init__(
        self,
        reporter: ScoreReporter,
        *,
        attempts: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self._reporter = reporter
        self._attempts = max(attempts, 1)
        self._backoff = max(backoff_seconds, 0.0)
        self._tasks: set[asyncio.Task[bool]] = set()

    def dispatch(self, game_id: str, player_id: str, player_name: str) -> asyncio.Task[bool]:
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._report(game_id, player_id, player_name),
            name=f"appclash-score-{game_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _report(self, game_id: str, player_id: str, player_name: str) -> bool:
        delay = self._backoff
        for attempt in range(1, self._attempts + 1):
            try:
                await asyncio.to_thread(self._reporter.report_win, game_id, player_id, player_name)
                return True
            except Exception:
                logger.exception(
                    "score report for game %s failed (attempt %d/%d)",
                    game_id,
                    attempt,
                    self._attempts,
                )
            if attempt < self._attempts:
                await asyncio.sleep(delay)
                delay *= 2
        logger.error("giving up on score report for game %s (winner %s)", game_id, player_id)
        return False

    async def drain(self) -> None:
        """Wait for every in-flight report to finish."""

        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
