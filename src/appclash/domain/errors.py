"""Error taxonomy shared by the resolver, the stores and the API layer.

Every failure a move can produce maps onto one of these classes.  The
``code`` values mirror the canonical RPC status names so clients written
against the callable-function contract keep working.
"""

from __future__ import annotations

from typing import ClassVar


class GameError(Exception):
    """Base class for all rule and store failures."""

    code: ClassVar[str] = "unknown"
    http_status: ClassVar[int] = 500
    retryable: ClassVar[bool] = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"error": self.message, "code": self.code, "retryable": self.retryable}


class Unauthenticated(GameError):
    """No verified caller identity accompanied the request."""

    code = "unauthenticated"
    http_status = 401


class InvalidArgument(GameError):
    """A required field is missing or malformed."""

    code = "invalid-argument"
    http_status = 400


class NotFound(GameError):
    """The referenced game does not exist."""

    code = "not-found"
    http_status = 404


class FailedPrecondition(GameError):
    """The action is not valid in the current game state."""

    code = "failed-precondition"
    http_status = 400


class DataIntegrityError(GameError):
    """Stored game data violates an invariant (e.g. an app card worth 9)."""

    code = "internal"
    http_status = 500


class ConcurrencyConflict(GameError):
    """Another writer holds or has already advanced the game record.

    The caller should re-read the latest snapshot and retry the whole move.
    """

    code = "aborted"
    http_status = 409
    retryable = True


class StoreUnavailable(GameError):
    """The game store did not answer within its time budget."""

    code = "unavailable"
    http_status = 503
    retryable = True
