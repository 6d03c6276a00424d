"""JSON-based store for App Clash games."""

from __future__ import annotations

import os
import re
import threading
from dataclasses import replace
from pathlib import Path

from appclash.domain.errors import ConcurrencyConflict, FailedPrecondition, InvalidArgument, NotFound
from appclash.domain.models import Game, GameID
from appclash.repository.base import GAME_ADAPTER, GameStore

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonGameStore(GameStore):
    """Persist games as JSON snapshots on disk.

    The version check and the replace happen under one process-wide lock;
    the file itself is swapped in with ``os.replace`` so readers never see a
    half-written snapshot.
    """

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path_for(self, game_id: GameID) -> Path:
        if not _SAFE_ID.match(game_id):
            raise InvalidArgument(f"malformed game id {game_id!r}")
        return self.base_path / f"game_{game_id}.json"

    def _write(self, game: Game) -> None:
        path = self._path_for(game.id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_bytes(GAME_ADAPTER.dump_json(game, indent=2))
        os.replace(tmp, path)

    def create(self, game: Game) -> Game:
        with self._lock:
            if self._path_for(game.id).exists():
                raise FailedPrecondition(f"game {game.id} already exists")
            stored = replace(game, version=1)
            self._write(stored)
        return stored

    def load(self, game_id: GameID) -> Game:
        """Load a previously saved game snapshot."""

        path = self._path_for(game_id)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            raise NotFound(f"Game {game_id} not found") from None
        return GAME_ADAPTER.validate_json(data)

    def save(self, game: Game, expected_version: int) -> Game:
        with self._lock:
            current = self.load(game.id)
            if current.version != expected_version:
                raise ConcurrencyConflict(
                    f"game {game.id} is at version {current.version}, expected {expected_version}"
                )
            stored = replace(game, version=expected_version + 1)
            self._write(stored)
        return stored

    def delete(self, game_id: GameID) -> None:
        """Remove a game snapshot if it exists."""

        with self._lock:
            path = self._path_for(game_id)
            if path.exists():
                path.unlink()

    def list_games(self) -> list[GameID]:
        """Return all game ids currently persisted in the store."""

        prefix = "game_"
        suffix = ".json"
        ids = [
            GameID(path.name[len(prefix) : -len(suffix)])
            for path in self.base_path.glob("game_*.json")
        ]
        return sorted(ids)
