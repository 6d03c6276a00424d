"""Enumerations used by the App Clash rules layer."""

from __future__ import annotations

from enum import StrEnum


class CardKind(StrEnum):
    """Card kinds; values match the strings clients send as ``cardType``."""

    APP = "app"
    DOWNLOAD_APP = "Download App"
    COMPUTER_VIRUS = "Computer Virus"
    HACKER_THEFT = "Hacker Theft"
    IT_GUY = "IT Guy"
    FIREWALL = "Firewall"

    @property
    def is_attack(self) -> bool:
        return self in ATTACK_KINDS


ATTACK_KINDS: frozenset[CardKind] = frozenset(
    {
        CardKind.COMPUTER_VIRUS,
        CardKind.HACKER_THEFT,
        CardKind.IT_GUY,
        CardKind.FIREWALL,
    }
)


class GameStatus(StrEnum):
    """Lifecycle of a game record. Both non-active states are terminal."""

    ACTIVE = "active"
    FINISHED = "finished"
    RESIGNED = "resigned"


class MoveState(StrEnum):
    """Resolver state derived from the presence of a pending attack."""

    AWAITING_MOVE = "awaiting_move"
    AWAITING_RESPONSE = "awaiting_response"


class MessageType(StrEnum):
    """Notification event types stored in ``Game.current_message``."""

    DOWNLOAD_APP = "download_app"
    ATTACK = "attack"
    DISCARD = "discard"
    DEFEND = "defend"
    SUBMIT_ATTACK = "submit_attack"
    VIRUS_RETURN = "virus_return"
    HACKER_THEFT = "hacker_theft"
