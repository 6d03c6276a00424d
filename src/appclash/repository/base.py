"""Abstract game store contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import TypeAdapter

from appclash.domain.models import Game, GameID, GameMessage

GAME_ADAPTER: TypeAdapter[Game] = TypeAdapter(Game)
MESSAGE_ADAPTER: TypeAdapter[GameMessage] = TypeAdapter(GameMessage)


class GameStore(ABC):
    """Read/write access to game snapshots with optimistic versioning.

    ``save`` only succeeds when the stored record still carries
    ``expected_version``; otherwise it raises
    :class:`~appclash.domain.errors.ConcurrencyConflict`.  The stored copy is
    returned with its version bumped.
    """

    @abstractmethod
    def create(self, game: Game) -> Game:
        """Insert a new game at version 1."""

    @abstractmethod
    def load(self, game_id: GameID) -> Game:
        """Return the latest snapshot or raise ``NotFound``."""

    @abstractmethod
    def save(self, game: Game, expected_version: int) -> Game:
        """Conditionally replace the snapshot written at ``expected_version``."""

    @abstractmethod
    def delete(self, game_id: GameID) -> None:
        """Remove a game if it exists."""

    @abstractmethod
    def list_games(self) -> list[GameID]:
        """Return every stored game id in sorted order."""
