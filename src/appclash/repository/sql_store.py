"""SQLAlchemy-backed game store using a conditional UPDATE as compare-and-swap."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from appclash.domain.errors import ConcurrencyConflict, FailedPrecondition, NotFound
from appclash.domain.models import Game, GameID
from appclash.repository.base import GAME_ADAPTER, GameStore
from appclash.repository.tables import GameRecord


def _encode(game: Game) -> str:
    return GAME_ADAPTER.dump_json(game).decode("utf-8")


class SqlGameStore(GameStore):
    """Persist games as JSON payloads in the ``games`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create(self, game: Game) -> Game:
        stored = replace(game, version=1)
        try:
            with self._session_factory() as session, session.begin():
                session.add(
                    GameRecord(
                        id=stored.id,
                        version=stored.version,
                        status=str(stored.status),
                        payload=_encode(stored),
                    )
                )
        except IntegrityError as exc:
            raise FailedPrecondition(f"game {game.id} already exists") from exc
        return stored

    def load(self, game_id: GameID) -> Game:
        with self._session_factory() as session:
            record = session.get(GameRecord, game_id)
            if record is None:
                raise NotFound(f"Game {game_id} not found")
            return GAME_ADAPTER.validate_json(record.payload)

    def save(self, game: Game, expected_version: int) -> Game:
        stored = replace(game, version=expected_version + 1)
        with self._session_factory() as session, session.begin():
            result = session.execute(
                update(GameRecord)
                .where(GameRecord.id == game.id, GameRecord.version == expected_version)
                .values(version=stored.version, status=str(stored.status), payload=_encode(stored))
            )
            if result.rowcount == 0:
                exists = session.scalar(select(GameRecord.id).where(GameRecord.id == game.id))
                if exists is None:
                    raise NotFound(f"Game {game.id} not found")
                raise ConcurrencyConflict(
                    f"game {game.id} moved past version {expected_version}"
                )
        return stored

    def delete(self, game_id: GameID) -> None:
        with self._session_factory() as session, session.begin():
            session.execute(delete(GameRecord).where(GameRecord.id == game_id))

    def list_games(self) -> list[GameID]:
        with self._session_factory() as session:
            ids = session.scalars(select(GameRecord.id).order_by(GameRecord.id)).all()
        return [GameID(game_id) for game_id in ids]
