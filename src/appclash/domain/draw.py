"""Turn and draw policy: the start-of-turn draw and the refill to three."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from appclash.domain.models import Card, Game, PlayerID, is_app_card
from appclash.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DrawResult:
    """New hand and draw pile after a draw step.

    ``filtered`` holds app cards that turned up in the hand or the draw pile;
    they never join a hand and the resolver moves them to the burn pile.
    """

    hand: list[Card]
    unused: list[Card]
    filtered: list[Card] = field(default_factory=list)
    drew: bool = False


def is_auto_draw_due(game: Game, player_id: PlayerID) -> bool:
    """True when ``player_id`` has not taken the draw for the current turn."""

    return game.last_draw_turn.get(player_id) != game.current_turn


def apply_auto_draw(game: Game, player_id: PlayerID) -> DrawResult:
    """Pop one card from the tail of the draw pile into the player's hand.

    Only happens once per player per turn index and is a no-op when the pile
    is empty.  Neither the game nor its lists are modified.
    """

    hand = list(game.hand_of(player_id))
    unused = list(game.unused)
    if not is_auto_draw_due(game, player_id) or not unused:
        return DrawResult(hand=hand, unused=unused)

    card = unused.pop()
    if is_app_card(card):
        logger.warning("game %s: app card %s found in draw pile, filtering", game.id, card.id)
        return DrawResult(hand=hand, unused=unused, filtered=[card], drew=True)
    hand.append(card)
    return DrawResult(hand=hand, unused=unused, drew=True)


def draw_to_three(
    hand: list[Card],
    unused: list[Card],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> DrawResult:
    """Refill ``hand`` from the tail of ``unused`` up to the hand size."""

    filtered = [card for card in hand if is_app_card(card)]
    new_hand = [card for card in hand if not is_app_card(card)]
    new_unused = list(unused)
    while len(new_hand) < rules.table.hand_size and new_unused:
        card = new_unused.pop()
        if is_app_card(card):
            filtered.append(card)
        else:
            new_hand.append(card)
    if filtered:
        logger.warning("filtered %d app card(s) while refilling a hand", len(filtered))
    return DrawResult(hand=new_hand, unused=new_unused, filtered=filtered)
