"""Tests for the SQL leaderboard."""

from __future__ import annotations

import pytest
from sqlalchemy import Update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from appclash.repository import SqlLeaderboard, create_db_engine, create_session_factory


@pytest.fixture
def leaderboard():
    engine = create_db_engine("sqlite://")
    yield SqlLeaderboard(create_session_factory(engine))
    engine.dispose()


class _NoMatch:
    rowcount = 0


def _stale_score_sessions(engine, stale_updates: int) -> sessionmaker[Session]:
    """Sessions whose first score updates match nothing, as if the row were not there yet."""

    remaining = {"updates": stale_updates}

    class StaleScoreSession(Session):
        def execute(self, statement, *args, **kwargs):
            if (
                remaining["updates"]
                and isinstance(statement, Update)
                and statement.table.name == "scores"
            ):
                remaining["updates"] -= 1
                return _NoMatch()
            return super().execute(statement, *args, **kwargs)

    return sessionmaker(
        bind=engine, class_=StaleScoreSession, autoflush=False, expire_on_commit=False
    )


def test_record_win_counts_once_per_game(leaderboard):
    assert leaderboard.record_win("g1", "alice", "Alice")
    assert not leaderboard.record_win("g1", "alice", "Alice")
    assert leaderboard.wins_for("alice") == 1


def test_wins_accumulate_and_names_refresh(leaderboard):
    leaderboard.record_win("g1", "alice", "Alice")
    leaderboard.record_win("g2", "alice", "Alice B.")
    leaderboard.record_win("g3", "bob", "Bob")

    top = leaderboard.top_scores()
    assert [(row.player_id, row.player_name, row.wins) for row in top] == [
        ("alice", "Alice B.", 2),
        ("bob", "Bob", 1),
    ]


def test_score_row_created_by_another_win_is_retried(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'scores.db'}")
    SqlLeaderboard(create_session_factory(engine)).record_win("g1", "alice", "Alice")
    racing = SqlLeaderboard(_stale_score_sessions(engine, stale_updates=1))

    assert racing.record_win("g2", "alice", "Alice")

    assert racing.wins_for("alice") == 2
    assert not racing.record_win("g2", "alice", "Alice")
    engine.dispose()


def test_persistent_score_clash_propagates_without_recording(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'scores.db'}")
    plain = SqlLeaderboard(create_session_factory(engine))
    plain.record_win("g1", "alice", "Alice")
    racing = SqlLeaderboard(
        _stale_score_sessions(engine, stale_updates=SqlLeaderboard.RECORD_ATTEMPTS)
    )

    with pytest.raises(IntegrityError):
        racing.record_win("g2", "alice", "Alice")

    assert plain.wins_for("alice") == 1
    # the game id was rolled back, so a later report still counts
    assert plain.record_win("g2", "alice", "Alice")
    assert plain.wins_for("alice") == 2
    engine.dispose()


def test_top_scores_limit_and_tiebreak(leaderboard):
    for index, player in enumerate(["carol", "bob", "alice"]):
        leaderboard.record_win(f"g{index}", player, player.title())

    assert [row.player_id for row in leaderboard.top_scores(limit=2)] == ["alice", "bob"]


def test_unknown_player_has_no_wins(leaderboard):
    assert leaderboard.wins_for("nobody") == 0
    assert leaderboard.top_scores() == []
