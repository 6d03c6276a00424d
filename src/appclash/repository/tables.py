"""SQLAlchemy tables backing the SQL game store and the leaderboard."""

from datetime import UTC, datetime
from typing import ClassVar

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Mixin for rows that track created_at and updated_at."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class GameRecord(Base, TimestampMixin):
    """One game snapshot.

    ``version`` is the optimistic-concurrency counter; writers update the row
    only where it still equals the version they read.

    Attributes:
        id: Game id
        version: Monotonic write counter
        status: Copy of the snapshot status, for listing without decoding
        payload: JSON-encoded :class:`~appclash.domain.models.Game`
    """

    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<GameRecord(id='{self.id}', version={self.version}, status='{self.status}')>"


class ScoreRecord(Base, TimestampMixin):
    """Durable win counter for one player."""

    __tablename__ = "scores"

    player_id: Mapped[str] = mapped_column(String, primary_key=True)
    player_name: Mapped[str] = mapped_column(String, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ScoreRecord(player_id='{self.player_id}', wins={self.wins})>"


class RecordedWin(Base):
    """One row per game whose win has been counted; makes reporting idempotent."""

    __tablename__ = "recorded_wins"

    game_id: Mapped[str] = mapped_column(String, primary_key=True)
    player_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
