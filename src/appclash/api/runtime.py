"""Runtime primitives backing the App Clash HTTP API."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from appclash.config import Settings, get_settings
from appclash.domain.models import Game, GameMessage
from appclash.domain.moves import MoveResult
from appclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from appclash.domain.scoring import player_scores
from appclash.repository import (
    GAME_ADAPTER,
    MESSAGE_ADAPTER,
    GameStore,
    JsonGameStore,
    SqlGameStore,
    SqlLeaderboard,
    create_db_engine,
    create_session_factory,
)
from appclash.repository.database import check_database_health
from appclash.services import GameLocks, GameService, LeaderboardReporter, ScoreDispatcher
from appclash.services.score_reporter import ScoreReporter

logger = logging.getLogger(__name__)


def to_game_dict(game: Game, *, rules: RulesConfig = DEFAULT_RULES) -> dict[str, Any]:
    """Return the client view of a game: the full snapshot minus the RNG salt."""

    payload = GAME_ADAPTER.dump_python(game, mode="json")
    payload.pop("seed", None)
    payload["move_state"] = str(game.move_state)
    payload["current_player"] = game.current_player
    payload["scores"] = player_scores(game.app_pile, game.player_order, rules=rules)
    return payload


def to_message_dict(message: GameMessage | None) -> dict[str, Any] | None:
    if message is None:
        return None
    return MESSAGE_ADAPTER.dump_python(message, mode="json")


def to_move_dict(result: MoveResult, *, rules: RulesConfig = DEFAULT_RULES) -> dict[str, Any]:
    return {
        "game": None if result.delete_game else to_game_dict(result.game, rules=rules),
        "message": to_message_dict(result.message),
        "winner": result.winner,
        "deleted": result.delete_game,
    }


def _build_store(settings: Settings, session_factory: sessionmaker[Session]) -> GameStore:
    if settings.store_backend == "sql":
        return SqlGameStore(session_factory)
    return JsonGameStore(settings.data_dir)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        reporter: ScoreReporter | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.engine = create_db_engine(
            self.settings.database_url, echo=self.settings.database_echo
        )
        session_factory = create_session_factory(self.engine)
        self.store = _build_store(self.settings, session_factory)
        self.leaderboard = SqlLeaderboard(session_factory)
        self.scores = ScoreDispatcher(
            reporter or LeaderboardReporter(self.leaderboard),
            attempts=self.settings.score_report_attempts,
            backoff_seconds=self.settings.score_report_backoff_seconds,
        )
        self.locks = GameLocks(self.settings.lock_timeout_seconds)
        self.games = GameService(
            self.store,
            locks=self.locks,
            scores=self.scores,
            leaderboard=self.leaderboard,
            store_timeout_seconds=self.settings.store_timeout_seconds,
            rules=rules,
        )
        logger.info("API state ready (store backend: %s)", self.settings.store_backend)

    def database_ok(self) -> bool:
        return check_database_health(self.engine)

    async def shutdown(self) -> None:
        await self.scores.drain()
        self.engine.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
