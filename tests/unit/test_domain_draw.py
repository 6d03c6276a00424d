"""Tests for the start-of-turn draw and the refill to three."""

from __future__ import annotations

from appclash.domain.draw import apply_auto_draw, draw_to_three, is_auto_draw_due
from appclash.domain.models import AppCard, Firewall, Game, GameID, ITGuy, PlayerID

P1, P2, P3, P4 = (PlayerID(f"p{i}") for i in range(1, 5))


def _game(**overrides) -> Game:
    game = Game(
        id=GameID("g1"),
        player_order=[P1, P2, P3, P4],
        player_names={},
        hands={P1: [ITGuy(id="itguy_0")]},
        unused=[Firewall(id="firewall_0"), Firewall(id="firewall_1")],
    )
    for key, value in overrides.items():
        setattr(game, key, value)
    return game


def test_draws_from_tail_once_per_turn():
    game = _game()
    assert is_auto_draw_due(game, P1)

    result = apply_auto_draw(game, P1)
    assert result.drew
    assert result.hand == [ITGuy(id="itguy_0"), Firewall(id="firewall_1")]
    assert result.unused == [Firewall(id="firewall_0")]
    # the game itself is untouched
    assert len(game.unused) == 2

    game.last_draw_turn[P1] = game.current_turn
    assert not is_auto_draw_due(game, P1)
    again = apply_auto_draw(game, P1)
    assert not again.drew
    assert again.hand == game.hands[P1]


def test_no_draw_from_empty_pile():
    result = apply_auto_draw(_game(unused=[]), P1)
    assert not result.drew
    assert result.hand == [ITGuy(id="itguy_0")]


def test_app_card_in_pile_is_filtered():
    stray = AppCard(id="app_1_0", value=1)
    result = apply_auto_draw(_game(unused=[Firewall(id="firewall_0"), stray]), P1)
    assert result.drew
    assert result.filtered == [stray]
    assert result.hand == [ITGuy(id="itguy_0")]


def test_draw_to_three_refills_and_filters():
    stray = AppCard(id="app_2_0", value=2)
    pile = [Firewall(id=f"firewall_{i}") for i in range(3)] + [AppCard(id="app_1_0", value=1)]
    result = draw_to_three([ITGuy(id="itguy_0"), stray], pile)

    assert result.hand == [ITGuy(id="itguy_0"), Firewall(id="firewall_2"), Firewall(id="firewall_1")]
    assert result.unused == [Firewall(id="firewall_0")]
    assert sorted(card.id for card in result.filtered) == ["app_1_0", "app_2_0"]


def test_draw_to_three_stops_when_pile_runs_out():
    result = draw_to_three([], [Firewall(id="firewall_0")])
    assert result.hand == [Firewall(id="firewall_0")]
    assert result.unused == []
