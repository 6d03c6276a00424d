"""Declarative rule configuration for the App Clash domain."""

from __future__ import annotations

from dataclasses import dataclass, field

from appclash.domain.enums import CardKind


@dataclass(frozen=True, slots=True)
class DeckRules:
    """Composition of the two decks built when a game is created."""

    # value -> number of copies
    app_cards: dict[int, int] = field(default_factory=lambda: {1: 10, 2: 8, 3: 6, 4: 4})
    action_cards: dict[CardKind, int] = field(
        default_factory=lambda: {
            CardKind.DOWNLOAD_APP: 30,
            CardKind.COMPUTER_VIRUS: 20,
            CardKind.HACKER_THEFT: 20,
            CardKind.IT_GUY: 15,
            CardKind.FIREWALL: 15,
        }
    )
    # Card id prefixes used by clients to pick artwork.
    id_prefixes: dict[CardKind, str] = field(
        default_factory=lambda: {
            CardKind.DOWNLOAD_APP: "download",
            CardKind.COMPUTER_VIRUS: "virus",
            CardKind.HACKER_THEFT: "hacker",
            CardKind.IT_GUY: "itguy",
            CardKind.FIREWALL: "firewall",
        }
    )

    @property
    def app_card_total(self) -> int:
        return sum(self.app_cards.values())

    @property
    def action_card_total(self) -> int:
        return sum(self.action_cards.values())


@dataclass(frozen=True, slots=True)
class TableRules:
    """Seating, hand and scoring constants."""

    player_count: int = 4
    hand_size: int = 3
    win_threshold: int = 7
    min_app_value: int = 1
    max_app_value: int = 4


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Bundle of every rules section."""

    deck: DeckRules = field(default_factory=DeckRules)
    table: TableRules = field(default_factory=TableRules)


DEFAULT_RULES = RulesConfig()
