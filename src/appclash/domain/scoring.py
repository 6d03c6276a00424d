"""Win evaluation over the shared app pile."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from appclash.domain.models import AppCard, PlayerID
from appclash.domain.rules_config import DEFAULT_RULES, RulesConfig


def clamp_value(value: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Clamp an app card value into ``[0, max_app_value]`` for scoring."""

    return max(0, min(rules.table.max_app_value, value or 0))


def player_scores(
    app_pile: Iterable[AppCard],
    player_order: Sequence[PlayerID],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> dict[PlayerID, int]:
    """Sum the clamped value of every app card each seated player owns.

    Cards owned by someone outside ``player_order`` are ignored.
    """

    scores: dict[PlayerID, int] = {pid: 0 for pid in player_order}
    for card in app_pile:
        if card.owner is not None and card.owner in scores:
            scores[card.owner] += clamp_value(card.value, rules)
    return scores


def evaluate_winner(
    app_pile: Iterable[AppCard],
    player_order: Sequence[PlayerID],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> PlayerID | None:
    """Return the first player in seating order at or above the threshold."""

    scores = player_scores(app_pile, player_order, rules=rules)
    for player_id in player_order:
        if scores[player_id] >= rules.table.win_threshold:
            return player_id
    return None
