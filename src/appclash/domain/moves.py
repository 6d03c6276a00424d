"""Move resolution: the App Clash state machine.

A game is either *awaiting a move* (no pending attack; the player at
``current_turn`` acts) or *awaiting a response* (the target of the pending
attack must defend or submit).  ``finished`` and ``resigned`` are terminal.

Each public function validates everything up front, then works on a copy of
the game and returns it inside a :class:`MoveResult`.  A failed validation
raises a :class:`~appclash.domain.errors.GameError` and leaves no trace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from appclash.domain.draw import apply_auto_draw, draw_to_three
from appclash.domain.enums import CardKind, GameStatus, MessageType, MoveState
from appclash.domain.errors import DataIntegrityError, FailedPrecondition, InvalidArgument
from appclash.domain.models import AppCard, Card, Game, GameMessage, PendingAttack, PlayerID
from appclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from appclash.domain.scoring import evaluate_winner
from appclash.utils.rng import generate_seed, random_choice, shuffled

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MoveResult:
    """Outcome of a resolver call."""

    game: Game
    message: GameMessage | None = None
    winner: PlayerID | None = None
    delete_game: bool = False


# --- Validation -----------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(UTC)


def _require_member(game: Game, actor: PlayerID) -> None:
    if actor not in game.player_order:
        raise FailedPrecondition(f"player {actor} is not seated in game {game.id}")


def _require_active(game: Game) -> None:
    if game.is_terminal:
        raise FailedPrecondition(f"game {game.id} is {game.status}")


def _require_state(game: Game, state: MoveState) -> None:
    if game.move_state != state:
        if state == MoveState.AWAITING_MOVE:
            raise FailedPrecondition("an attack is waiting for a response")
        raise FailedPrecondition("there is no attack to respond to")


def _require_turn(game: Game, actor: PlayerID) -> None:
    if not 0 <= game.current_turn < len(game.player_order):
        raise DataIntegrityError(f"turn index {game.current_turn} is out of range")
    if game.current_player != actor:
        raise FailedPrecondition(f"it is not {actor}'s turn")


def _require_responder(game: Game, actor: PlayerID) -> PendingAttack:
    pending = game.pending_attack
    if pending is None:  # pragma: no cover - guarded by _require_state
        raise FailedPrecondition("there is no attack to respond to")
    if pending.to_player != actor:
        raise FailedPrecondition(f"only {pending.to_player} may respond to this attack")
    return pending


def parse_card_kind(card_type: str | CardKind) -> CardKind:
    """Translate a declared card type into :class:`CardKind`."""

    try:
        return CardKind(card_type)
    except ValueError:
        raise InvalidArgument(f"unknown card type {card_type!r}") from None


def _check_index(hand: list[Card], hand_index: int) -> None:
    if isinstance(hand_index, bool) or not 0 <= hand_index < len(hand):
        raise FailedPrecondition(f"hand index {hand_index} is outside a hand of {len(hand)}")


def _check_declared(card: Card, declared: CardKind) -> None:
    if card.kind != declared:
        raise InvalidArgument(f"card {card.id} is {card.kind}, not {declared}")


def _check_app_value(card: AppCard, rules: RulesConfig) -> None:
    table = rules.table
    if not isinstance(card.value, int) or not table.min_app_value <= card.value <= table.max_app_value:
        logger.error("invalid app card value on %s: %r", card.id, card.value)
        raise DataIntegrityError(f"app card {card.id} has invalid value {card.value!r}")


# --- Mutation helpers (operate on a private copy) -------------------------------


def _auto_draw(game: Game, actor: PlayerID) -> None:
    drawn = apply_auto_draw(game, actor)
    game.hands[actor] = drawn.hand
    game.unused = drawn.unused
    game.burned.extend(drawn.filtered)
    if drawn.drew:
        game.last_draw_turn[actor] = game.current_turn


def _refill(game: Game, player_id: PlayerID, rules: RulesConfig) -> None:
    refilled = draw_to_three(game.hand_of(player_id), game.unused, rules=rules)
    game.hands[player_id] = refilled.hand
    game.unused = refilled.unused
    game.burned.extend(refilled.filtered)


def _advance_turn(game: Game, actor: PlayerID, base_turn: int | None = None) -> None:
    base = game.current_turn if base_turn is None else base_turn
    next_turn = (base + 1) % len(game.player_order)
    game.current_turn = next_turn
    game.last_draw_turn[actor] = next_turn


def _settle_winner(game: Game, rules: RulesConfig) -> PlayerID | None:
    winner = evaluate_winner(game.app_pile, game.player_order, rules=rules)
    if winner is not None:
        game.status = GameStatus.FINISHED
        game.winner = winner
        logger.info("game %s finished, winner %s", game.id, winner)
    return winner


def _seed(game: Game, context: str) -> str:
    return generate_seed(game.seed, game.version, context)


# --- Transitions ----------------------------------------------------------------


def play_card(
    game: Game,
    actor: PlayerID,
    hand_index: int,
    card_type: str | CardKind,
    target: PlayerID | None = None,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveResult:
    """Play the card at ``hand_index``: download an app or launch an attack."""

    _require_member(game, actor)
    _require_active(game)
    _require_state(game, MoveState.AWAITING_MOVE)
    _require_turn(game, actor)

    declared = parse_card_kind(card_type)
    if declared == CardKind.APP:
        raise InvalidArgument("app cards cannot be played from a hand")
    if declared.is_attack:
        if target is None:
            raise InvalidArgument(f"{declared} needs a target player")
        if target not in game.player_order:
            raise InvalidArgument(f"target {target} is not seated in game {game.id}")
        if target == actor:
            raise InvalidArgument("a player cannot attack themselves")
    elif not game.app_deck:
        raise FailedPrecondition("No app cards left")

    nxt = game.copy()
    _auto_draw(nxt, actor)
    hand = nxt.hands[actor]
    _check_index(hand, hand_index)
    played = hand[hand_index]
    _check_declared(played, declared)

    if declared == CardKind.DOWNLOAD_APP:
        app_card = nxt.app_deck[-1]
        _check_app_value(app_card, rules)
        nxt.app_deck.pop()
        del hand[hand_index]
        owned = app_card.with_owner(actor)
        nxt.app_pile.append(owned)
        nxt.burned.append(played)
        _refill(nxt, actor, rules)
        _advance_turn(nxt, actor)
        message = GameMessage(type=MessageType.DOWNLOAD_APP, ts=_now(), by=actor, card=owned)
        nxt.current_message = message
        logger.info("game %s: %s downloaded %s (value %d)", game.id, actor, owned.id, owned.value)
        winner = _settle_winner(nxt, rules)
        return MoveResult(game=nxt, message=message, winner=winner)

    del hand[hand_index]
    _refill(nxt, actor, rules)
    nxt.pending_attack = PendingAttack(
        type=declared, from_player=actor, to_player=PlayerID(target), card=played
    )
    message = GameMessage(
        type=MessageType.ATTACK,
        ts=_now(),
        by=actor,
        to=target,
        card=played,
        card_type=str(declared),
    )
    nxt.current_message = message
    logger.info("game %s: %s attacks %s with %s", game.id, actor, target, declared)
    return MoveResult(game=nxt, message=message)


def discard(
    game: Game,
    actor: PlayerID,
    hand_index: int,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveResult:
    """Burn the card at ``hand_index`` and pass the turn."""

    _require_member(game, actor)
    _require_active(game)
    _require_state(game, MoveState.AWAITING_MOVE)
    _require_turn(game, actor)

    nxt = game.copy()
    _auto_draw(nxt, actor)
    hand = nxt.hands[actor]
    _check_index(hand, hand_index)
    discarded = hand.pop(hand_index)
    nxt.burned.append(discarded)
    _refill(nxt, actor, rules)
    _advance_turn(nxt, actor)
    message = GameMessage(type=MessageType.DISCARD, ts=_now(), by=actor, card=discarded)
    nxt.current_message = message
    return MoveResult(game=nxt, message=message)


def defend(
    game: Game,
    actor: PlayerID,
    hand_index: int,
    card_type: str | CardKind,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveResult:
    """Block the pending attack with the card at ``hand_index``.

    Both cards are burned and the turn moves to the player after the
    attacker.
    """

    _require_member(game, actor)
    _require_active(game)
    _require_state(game, MoveState.AWAITING_RESPONSE)
    pending = _require_responder(game, actor)
    declared = parse_card_kind(card_type)

    nxt = game.copy()
    hand = nxt.hands.setdefault(actor, [])
    _check_index(hand, hand_index)
    _check_declared(hand[hand_index], declared)
    defending = hand.pop(hand_index)
    nxt.burned.append(pending.card)
    nxt.burned.append(defending)
    nxt.pending_attack = None
    _refill(nxt, actor, rules)
    _advance_turn(nxt, actor, base_turn=nxt.player_order.index(pending.from_player))
    message = GameMessage(
        type=MessageType.DEFEND,
        ts=_now(),
        by=actor,
        attacker=pending.from_player,
        defender=actor,
        card=defending,
        card_type=str(declared),
    )
    nxt.current_message = message
    logger.info("game %s: %s blocked %s from %s", game.id, actor, pending.type, pending.from_player)
    return MoveResult(game=nxt, message=message)


def submit_to_attack(
    game: Game,
    actor: PlayerID,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveResult:
    """Accept the pending attack and apply its effect."""

    _require_member(game, actor)
    _require_active(game)
    _require_state(game, MoveState.AWAITING_RESPONSE)
    pending = _require_responder(game, actor)

    nxt = game.copy()
    nxt.burned.append(pending.card)
    nxt.pending_attack = None

    message = GameMessage(
        type=MessageType.SUBMIT_ATTACK,
        ts=_now(),
        by=actor,
        attacker=pending.from_player,
        defender=actor,
        card=pending.card,
        card_type=str(pending.type),
    )
    if pending.type == CardKind.COMPUTER_VIRUS:
        if _apply_virus(nxt, actor):
            message.type = MessageType.VIRUS_RETURN
    elif pending.type == CardKind.HACKER_THEFT:
        if _apply_theft(nxt, actor, pending.from_player):
            message.type = MessageType.HACKER_THEFT

    _refill(nxt, actor, rules)
    _advance_turn(nxt, actor, base_turn=nxt.player_order.index(pending.from_player))
    nxt.current_message = message
    winner = _settle_winner(nxt, rules)
    return MoveResult(game=nxt, message=message, winner=winner)


def _pick_target_value(game: Game, target: PlayerID, context: str) -> int | None:
    """Pick one of the target's app cards uniformly and return its value.

    Values with more copies are proportionally more likely to be hit.
    """

    owned = [card for card in game.app_pile if card.owner == target]
    if not owned:
        return None
    picked: AppCard = random_choice(_seed(game, context), owned)["choice"]
    return picked.value


def _apply_virus(game: Game, target: PlayerID) -> bool:
    value = _pick_target_value(game, target, "virus")
    if value is None:
        return False
    kept: list[AppCard] = []
    returned: list[AppCard] = []
    for card in game.app_pile:
        if card.owner == target and card.value == value:
            returned.append(card.with_owner(None))
        else:
            kept.append(card)
    game.app_pile = kept
    game.app_deck = shuffled(_seed(game, "virus_reshuffle"), game.app_deck + returned)
    logger.info("game %s: virus returned %d card(s) of value %d", game.id, len(returned), value)
    return True


def _apply_theft(game: Game, target: PlayerID, attacker: PlayerID) -> bool:
    value = _pick_target_value(game, target, "theft")
    if value is None:
        return False
    game.app_pile = [
        card.with_owner(attacker) if card.owner == target and card.value == value else card
        for card in game.app_pile
    ]
    logger.info("game %s: %s stole value-%d apps from %s", game.id, attacker, value, target)
    return True


def resign(game: Game, actor: PlayerID) -> MoveResult:
    """End the game by resignation. Cards are left where they are."""

    _require_member(game, actor)
    _require_active(game)

    nxt = game.copy()
    nxt.status = GameStatus.RESIGNED
    nxt.resigned_by = actor
    nxt.resigned_at = _now()
    if actor not in nxt.resigned_players:
        nxt.resigned_players.append(actor)
    logger.info("game %s: %s resigned", game.id, actor)
    return MoveResult(game=nxt)


def return_to_lobby(
    game: Game,
    actor: PlayerID,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveResult:
    """Record that ``actor`` left the game screen.

    ``delete_game`` is set once every seat has either resigned or exited.
    """

    _require_member(game, actor)

    nxt = game.copy()
    if actor not in nxt.exited_players:
        nxt.exited_players.append(actor)
    departed = set(nxt.exited_players) | set(nxt.resigned_players)
    return MoveResult(game=nxt, delete_game=len(departed) >= rules.table.player_count)
