"""Async services sitting between the HTTP layer and the domain."""

from appclash.services.game_service import GameService
from appclash.services.locks import GameLocks
from appclash.services.score_reporter import LeaderboardReporter, ScoreDispatcher, ScoreReporter

__all__ = [
    "GameLocks",
    "GameService",
    "LeaderboardReporter",
    "ScoreDispatcher",
    "ScoreReporter",
]
