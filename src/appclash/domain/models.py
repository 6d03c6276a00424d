"""Dataclasses describing every App Clash game entity.

Cards are a tagged variant: one frozen dataclass per kind, discriminated by
the ``kind`` field so that snapshots round-trip through pydantic without a
loosely typed "card dict".  Only :class:`AppCard` carries a value and an
owner.

The :class:`Game` aggregate is the unit of persistence.  The resolver never
mutates a game it receives; it works on :meth:`Game.copy` and returns the
copy.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Annotated, Literal, NewType

from pydantic import Field

from .enums import CardKind, GameStatus, MessageType, MoveState

# --- Strongly typed identifiers -------------------------------------------------

GameID = NewType("GameID", str)
PlayerID = NewType("PlayerID", str)


# --- Cards ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AppCard:
    """Scoring card; ``owner`` is set while it sits in the app pile."""

    id: str
    value: int
    owner: PlayerID | None = None
    kind: Literal["app"] = "app"

    def with_owner(self, owner: PlayerID | None) -> AppCard:
        return replace(self, owner=owner)


@dataclass(frozen=True, slots=True)
class DownloadApp:
    id: str
    kind: Literal["Download App"] = "Download App"


@dataclass(frozen=True, slots=True)
class ComputerVirus:
    id: str
    kind: Literal["Computer Virus"] = "Computer Virus"


@dataclass(frozen=True, slots=True)
class HackerTheft:
    id: str
    kind: Literal["Hacker Theft"] = "Hacker Theft"


@dataclass(frozen=True, slots=True)
class ITGuy:
    id: str
    kind: Literal["IT Guy"] = "IT Guy"


@dataclass(frozen=True, slots=True)
class Firewall:
    id: str
    kind: Literal["Firewall"] = "Firewall"


Card = Annotated[
    AppCard | DownloadApp | ComputerVirus | HackerTheft | ITGuy | Firewall,
    Field(discriminator="kind"),
]

CARD_TYPES: dict[CardKind, type] = {
    CardKind.APP: AppCard,
    CardKind.DOWNLOAD_APP: DownloadApp,
    CardKind.COMPUTER_VIRUS: ComputerVirus,
    CardKind.HACKER_THEFT: HackerTheft,
    CardKind.IT_GUY: ITGuy,
    CardKind.FIREWALL: Firewall,
}


def is_app_card(card: object) -> bool:
    return isinstance(card, AppCard)


# --- Game records ---------------------------------------------------------------


@dataclass(slots=True)
class PendingAttack:
    """An attack waiting for the target to defend or submit."""

    type: CardKind
    from_player: PlayerID
    to_player: PlayerID
    card: Card


@dataclass(slots=True)
class GameMessage:
    """Last notification shown to the table. Display hint only."""

    type: MessageType
    ts: datetime
    by: PlayerID | None = None
    to: PlayerID | None = None
    attacker: PlayerID | None = None
    defender: PlayerID | None = None
    card: Card | None = None
    card_type: str | None = None


@dataclass(slots=True)
class Game:
    """Root aggregate for a single four-player game."""

    id: GameID
    player_order: list[PlayerID]
    player_names: dict[PlayerID, str]
    hands: dict[PlayerID, list[Card]] = field(default_factory=dict)
    app_deck: list[AppCard] = field(default_factory=list)
    app_pile: list[AppCard] = field(default_factory=list)
    burned: list[Card] = field(default_factory=list)
    unused: list[Card] = field(default_factory=list)
    current_turn: int = 0
    last_draw_turn: dict[PlayerID, int] = field(default_factory=dict)
    pending_attack: PendingAttack | None = None
    current_message: GameMessage | None = None
    status: GameStatus = GameStatus.ACTIVE
    winner: PlayerID | None = None
    resigned_by: PlayerID | None = None
    resigned_at: datetime | None = None
    resigned_players: list[PlayerID] = field(default_factory=list)
    exited_players: list[PlayerID] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    # Incremented by the store on every committed write.
    version: int = 0
    # Secret salt for the deterministic RNG; never sent to clients.
    seed: str = ""

    @property
    def current_player(self) -> PlayerID:
        return self.player_order[self.current_turn]

    @property
    def move_state(self) -> MoveState:
        if self.pending_attack is None:
            return MoveState.AWAITING_MOVE
        return MoveState.AWAITING_RESPONSE

    @property
    def is_terminal(self) -> bool:
        return self.status != GameStatus.ACTIVE

    def hand_of(self, player_id: PlayerID) -> list[Card]:
        return self.hands.get(player_id, [])

    def copy(self) -> Game:
        """Return a copy whose containers can be mutated independently.

        Cards are immutable, so copying the lists that hold them is enough.
        """

        return replace(
            self,
            player_order=list(self.player_order),
            player_names=dict(self.player_names),
            hands={pid: list(hand) for pid, hand in self.hands.items()},
            app_deck=list(self.app_deck),
            app_pile=list(self.app_pile),
            burned=list(self.burned),
            unused=list(self.unused),
            last_draw_turn=dict(self.last_draw_turn),
            resigned_players=list(self.resigned_players),
            exited_players=list(self.exited_players),
        )

    def all_cards(self) -> Iterator[Card]:
        """Yield every card the game holds, wherever it currently lives."""

        for hand in self.hands.values():
            yield from hand
        yield from self.app_deck
        yield from self.app_pile
        yield from self.burned
        yield from self.unused
        if self.pending_attack is not None:
            yield self.pending_attack.card

    def total_cards(self) -> int:
        return sum(1 for _ in self.all_cards())
