"""Persistence adapters for games and the leaderboard."""

from appclash.repository.base import GAME_ADAPTER, MESSAGE_ADAPTER, GameStore
from appclash.repository.database import create_db_engine, create_session_factory
from appclash.repository.json_store import JsonGameStore
from appclash.repository.leaderboard import LeaderboardEntry, SqlLeaderboard
from appclash.repository.sql_store import SqlGameStore

__all__ = [
    "GAME_ADAPTER",
    "MESSAGE_ADAPTER",
    "GameStore",
    "JsonGameStore",
    "LeaderboardEntry",
    "SqlGameStore",
    "SqlLeaderboard",
    "create_db_engine",
    "create_session_factory",
]
