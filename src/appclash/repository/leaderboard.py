"""Durable per-player win counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from appclash.repository.tables import RecordedWin, ScoreRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LeaderboardEntry:
    player_id: str
    player_name: str
    wins: int


class SqlLeaderboard:
    """Win counters stored in the ``scores`` table.

    Each win is recorded under its game id in ``recorded_wins``; reporting
    the same game twice leaves the counter untouched.
    """

    RECORD_ATTEMPTS = 3

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def record_win(self, game_id: str, player_id: str, player_name: str) -> bool:
        """Count one win for ``player_id`` and refresh the display name.

        Returns False when this game's win was already counted. A clash on
        the player's score row is retried; after ``RECORD_ATTEMPTS`` the
        ``IntegrityError`` propagates to the caller.
        """

        attempt = 1
        while True:
            try:
                return self._record_once(game_id, player_id, player_name)
            except IntegrityError:
                if attempt >= self.RECORD_ATTEMPTS:
                    raise
                logger.warning(
                    "score row for %s changed concurrently; retrying win for game %s (%d/%d)",
                    player_id,
                    game_id,
                    attempt,
                    self.RECORD_ATTEMPTS,
                )
                attempt += 1

    def _record_once(self, game_id: str, player_id: str, player_name: str) -> bool:
        with self._session_factory() as session:
            if session.get(RecordedWin, game_id) is not None:
                logger.info("win for game %s already recorded", game_id)
                return False
            session.add(RecordedWin(game_id=game_id, player_id=player_id))
            try:
                session.flush()
            except IntegrityError:
                # Another report for this game committed first.
                session.rollback()
                logger.info("win for game %s recorded concurrently", game_id)
                return False

            bumped = session.execute(
                update(ScoreRecord)
                .where(ScoreRecord.player_id == player_id)
                .values(wins=ScoreRecord.wins + 1, player_name=player_name)
            )
            if bumped.rowcount == 0:
                session.add(ScoreRecord(player_id=player_id, player_name=player_name, wins=1))
            session.commit()
        logger.info("recorded win for %s (%s) in game %s", player_name, player_id, game_id)
        return True

    def wins_for(self, player_id: str) -> int:
        with self._session_factory() as session:
            score = session.get(ScoreRecord, player_id)
            return score.wins if score is not None else 0

    def top_scores(self, limit: int = 100) -> list[LeaderboardEntry]:
        """Return the highest win counts, best first."""

        with self._session_factory() as session:
            rows = session.scalars(
                select(ScoreRecord)
                .order_by(ScoreRecord.wins.desc(), ScoreRecord.player_id)
                .limit(limit)
            ).all()
            return [
                LeaderboardEntry(player_id=row.player_id, player_name=row.player_name, wins=row.wins)
                for row in rows
            ]
