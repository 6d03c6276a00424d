"""Async orchestration of game moves.

Every move follows the same cycle: validate the caller, take the game's
lock, load the snapshot, run the pure resolver, then conditionally save the
result against the version that was loaded.  Blocking store calls run in a
worker thread.  Leaderboard updates happen after the lock is released and
never fail the move.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from typing import TypeVar

from appclash.domain import moves
from appclash.domain.deck import UNKNOWN_PLAYER_NAME, create_game
from appclash.domain.errors import InvalidArgument, StoreUnavailable, Unauthenticated
from appclash.domain.models import Game, GameID, PlayerID
from appclash.domain.moves import MoveResult
from appclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from appclash.repository.base import GameStore
from appclash.repository.leaderboard import LeaderboardEntry, SqlLeaderboard
from appclash.services.locks import GameLocks
from appclash.services.score_reporter import ScoreDispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _require_caller(caller: str | None) -> PlayerID:
    if not caller:
        raise Unauthenticated("a signed-in player is required")
    return PlayerID(caller)


def _require_game_id(game_id: str | None) -> GameID:
    if not game_id:
        raise InvalidArgument("gameId is required")
    return GameID(game_id)


class GameService:
    """Entry point for every game operation exposed over the API."""

    def __init__(
        self,
        store: GameStore,
        *,
        locks: GameLocks,
        scores: ScoreDispatcher | None = None,
        leaderboard: SqlLeaderboard | None = None,
        store_timeout_seconds: float = 10.0,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self._store = store
        self._locks = locks
        self._scores = scores
        self._leaderboard = leaderboard
        self._store_timeout = store_timeout_seconds
        self._rules = rules

    @property
    def rules(self) -> RulesConfig:
        return self._rules

    async def _call_store(self, func: Callable[..., T], *args: object) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args), timeout=self._store_timeout
            )
        except TimeoutError:
            raise StoreUnavailable("the game store did not respond in time") from None

    async def _write_store(self, func: Callable[..., T], *args: object) -> T:
        """Run a store write and return its real outcome.

        The worker thread cannot be cancelled, so a write that outlives the
        timeout is awaited to completion; callers keep the game lock until
        it has either committed or failed.
        """

        write = asyncio.ensure_future(asyncio.to_thread(func, *args))
        try:
            return await asyncio.wait_for(asyncio.shield(write), timeout=self._store_timeout)
        except TimeoutError:
            logger.warning(
                "store %s exceeded %.1fs; waiting for it to finish",
                getattr(func, "__name__", "write"),
                self._store_timeout,
            )
            return await write

    async def create_game(
        self,
        player_ids: Sequence[str],
        player_names: Mapping[str, str] | None = None,
        *,
        game_id: str | None = None,
    ) -> Game:
        """Deal a new game for a filled lobby and store it at version 1."""

        new_id = GameID(game_id or uuid.uuid4().hex)
        game = create_game(
            new_id,
            [PlayerID(pid) for pid in player_ids],
            {PlayerID(pid): name for pid, name in (player_names or {}).items()},
            rules=self._rules,
        )
        return await self._write_store(self._store.create, game)

    async def get_game(self, game_id: str) -> Game:
        return await self._call_store(self._store.load, _require_game_id(game_id))

    async def list_games(self) -> list[GameID]:
        return await self._call_store(self._store.list_games)

    async def play_card(
        self,
        caller: str | None,
        game_id: str | None,
        hand_index: int,
        card_type: str,
        target_player_id: str | None = None,
    ) -> MoveResult:
        target = PlayerID(target_player_id) if target_player_id else None
        return await self._apply(
            caller,
            game_id,
            lambda game, actor: moves.play_card(
                game, actor, hand_index, card_type, target, rules=self._rules
            ),
        )

    async def discard(
        self, caller: str | None, game_id: str | None, hand_index: int
    ) -> MoveResult:
        return await self._apply(
            caller,
            game_id,
            lambda game, actor: moves.discard(game, actor, hand_index, rules=self._rules),
        )

    async def defend(
        self,
        caller: str | None,
        game_id: str | None,
        hand_index: int,
        card_type: str,
    ) -> MoveResult:
        return await self._apply(
            caller,
            game_id,
            lambda game, actor: moves.defend(
                game, actor, hand_index, card_type, rules=self._rules
            ),
        )

    async def submit_to_attack(self, caller: str | None, game_id: str | None) -> MoveResult:
        return await self._apply(
            caller,
            game_id,
            lambda game, actor: moves.submit_to_attack(game, actor, rules=self._rules),
        )

    async def resign(self, caller: str | None, game_id: str | None) -> MoveResult:
        return await self._apply(caller, game_id, moves.resign)

    async def return_to_lobby(self, caller: str | None, game_id: str | None) -> MoveResult:
        """Mark the caller as gone; the game is deleted once every seat is gone."""

        return await self._apply(
            caller,
            game_id,
            lambda game, actor: moves.return_to_lobby(game, actor, rules=self._rules),
        )

    async def leaderboard(self, limit: int = 100) -> list[LeaderboardEntry]:
        if self._leaderboard is None:
            return []
        return await self._call_store(self._leaderboard.top_scores, limit)

    async def _apply(
        self,
        caller: str | None,
        game_id: str | None,
        transition: Callable[[Game, PlayerID], MoveResult],
    ) -> MoveResult:
        actor = _require_caller(caller)
        key = _require_game_id(game_id)

        async with self._locks.hold(key):
            game = await self._call_store(self._store.load, key)
            result = transition(game, actor)
            if result.delete_game:
                await self._write_store(self._store.delete, key)
                logger.info("game %s deleted after every player left", key)
            else:
                result.game = await self._write_store(self._store.save, result.game, game.version)

        if result.winner is not None:
            self._report_winner(result.game, result.winner)
        return result

    def _report_winner(self, game: Game, winner: PlayerID) -> None:
        if self._scores is None:
            logger.info("game %s won by %s; no score reporter configured", game.id, winner)
            return
        name = game.player_names.get(winner, UNKNOWN_PLAYER_NAME)
        self._scores.dispatch(game.id, winner, name)
