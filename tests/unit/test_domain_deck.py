"""Tests for deck construction and game creation."""

from __future__ import annotations

from collections import Counter

import pytest

from appclash.domain.deck import (
    UNKNOWN_PLAYER_NAME,
    build_action_deck,
    build_app_deck,
    create_game,
    make_card,
)
from appclash.domain.enums import CardKind, GameStatus
from appclash.domain.errors import InvalidArgument
from appclash.domain.models import AppCard, Firewall, GameID, PlayerID

PLAYERS = [PlayerID("alice"), PlayerID("bob"), PlayerID("carol"), PlayerID("dave")]


def test_app_deck_composition():
    deck = build_app_deck()
    assert len(deck) == 28
    assert Counter(card.value for card in deck) == {1: 10, 2: 8, 3: 6, 4: 4}
    assert all(card.owner is None for card in deck)
    assert "app_4_3" in {card.id for card in deck}


def test_action_deck_composition():
    deck = build_action_deck()
    assert len(deck) == 100
    assert Counter(card.kind for card in deck) == {
        "Download App": 30,
        "Computer Virus": 20,
        "Hacker Theft": 20,
        "IT Guy": 15,
        "Firewall": 15,
    }
    ids = {card.id for card in deck}
    assert len(ids) == 100
    assert {"download_0", "virus_19", "hacker_0", "itguy_14", "firewall_0"} <= ids


def test_make_card():
    assert make_card(CardKind.FIREWALL, "firewall_9") == Firewall(id="firewall_9")
    assert make_card(CardKind.APP, "app_2_0", 2) == AppCard(id="app_2_0", value=2)
    with pytest.raises(ValueError):
        make_card(CardKind.APP, "app_2_0")


def test_create_game_deals_three_cards_each():
    game = create_game(GameID("g1"), PLAYERS, {PLAYERS[0]: "Alice"}, salt="fixed")

    assert sorted(game.player_order) == sorted(PLAYERS)
    assert all(len(game.hands[pid]) == 3 for pid in PLAYERS)
    assert len(game.unused) == 100 - 12
    assert len(game.app_deck) == 28
    assert game.total_cards() == 128
    assert game.current_turn == 0
    assert game.status == GameStatus.ACTIVE
    assert game.pending_attack is None
    assert game.player_names[PLAYERS[0]] == "Alice"
    assert game.player_names[PLAYERS[1]] == UNKNOWN_PLAYER_NAME
    assert game.seed == "fixed"


def test_create_game_is_reproducible_for_a_salt():
    first = create_game(GameID("g1"), PLAYERS, salt="fixed")
    second = create_game(GameID("g1"), PLAYERS, salt="fixed")
    other = create_game(GameID("g1"), PLAYERS, salt="other")

    assert first.player_order == second.player_order
    assert first.hands == second.hands
    assert first.app_deck == second.app_deck
    assert (first.unused, first.app_deck) != (other.unused, other.app_deck)


def test_create_game_without_salt_picks_one():
    game = create_game(GameID("g1"), PLAYERS)
    assert len(game.seed) == 32


@pytest.mark.parametrize(
    "players",
    [
        PLAYERS[:3],
        PLAYERS + [PlayerID("eve")],
        [PLAYERS[0], PLAYERS[0], PLAYERS[1], PLAYERS[2]],
    ],
)
def test_create_game_requires_four_distinct_players(players):
    with pytest.raises(InvalidArgument):
        create_game(GameID("g1"), players)
