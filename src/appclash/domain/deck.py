"""Deck construction and the game-creation trigger."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from appclash.domain.enums import CardKind
from appclash.domain.errors import InvalidArgument
from appclash.domain.models import CARD_TYPES, AppCard, Card, Game, GameID, PlayerID
from appclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from appclash.utils.rng import generate_seed, new_salt, shuffled

logger = logging.getLogger(__name__)

UNKNOWN_PLAYER_NAME = "Unknown Player"


def build_app_deck(rules: RulesConfig = DEFAULT_RULES) -> list[AppCard]:
    """Return the unshuffled app deck (ids ``app_<value>_<n>``)."""

    return [
        AppCard(id=f"app_{value}_{i}", value=value)
        for value, copies in sorted(rules.deck.app_cards.items())
        for i in range(copies)
    ]


def build_action_deck(rules: RulesConfig = DEFAULT_RULES) -> list[Card]:
    """Return the unshuffled non-app deck in the rules' declaration order."""

    cards: list[Card] = []
    for kind, copies in rules.deck.action_cards.items():
        card_type = CARD_TYPES[kind]
        prefix = rules.deck.id_prefixes[kind]
        cards.extend(card_type(id=f"{prefix}_{i}") for i in range(copies))
    return cards


def make_card(kind: CardKind, card_id: str, value: int | None = None) -> Card:
    """Build a single card of ``kind``; ``value`` is required for app cards."""

    if kind == CardKind.APP:
        if value is None:
            raise ValueError("app cards need a value")
        return AppCard(id=card_id, value=value)
    return CARD_TYPES[kind](id=card_id)


def create_game(
    game_id: GameID,
    player_ids: Sequence[PlayerID],
    player_names: Mapping[PlayerID, str] | None = None,
    *,
    salt: str | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> Game:
    """Build the initial record for a filled lobby.

    Shuffles the non-app pile, randomizes the seating, deals the opening
    hands from the tail of the pile and shuffles the app deck.
    """

    table = rules.table
    if len(player_ids) != table.player_count or len(set(player_ids)) != table.player_count:
        raise InvalidArgument(
            f"a game needs exactly {table.player_count} distinct players, got {list(player_ids)}"
        )

    salt = salt or new_salt()
    names = dict(player_names or {})

    unused = shuffled(generate_seed(salt, 0, "unused"), build_action_deck(rules))
    player_order = shuffled(generate_seed(salt, 0, "seating"), list(player_ids))

    hands: dict[PlayerID, list[Card]] = {}
    for player_id in player_order:
        hand: list[Card] = []
        for _ in range(table.hand_size):
            if unused:
                hand.append(unused.pop())
        hands[player_id] = hand

    app_deck = shuffled(generate_seed(salt, 0, "app_deck"), build_app_deck(rules))

    game = Game(
        id=game_id,
        player_order=player_order,
        player_names={pid: names.get(pid, UNKNOWN_PLAYER_NAME) for pid in player_ids},
        hands=hands,
        app_deck=app_deck,
        unused=unused,
        seed=salt,
    )
    logger.info("created game %s with seating %s", game_id, player_order)
    return game
