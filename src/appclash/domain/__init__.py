"""Domain model and rules for App Clash.

This package holds everything that decides what a move does:

* Dataclasses for cards and the game aggregate (see :mod:`models`).
* Enumerations and the error taxonomy shared with the outer layers.
* Rule constants (see :mod:`rules_config`).
* Pure rule functions: deck setup, the draw policy, move resolution and win
  evaluation.

Nothing in here performs I/O; persistence and locking live in
:mod:`appclash.repository` and :mod:`appclash.services`.
"""

from . import deck, draw, enums, errors, models, moves, rules_config, scoring

__all__ = [
    "deck",
    "draw",
    "enums",
    "errors",
    "models",
    "moves",
    "rules_config",
    "scoring",
]
