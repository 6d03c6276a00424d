"""Deterministic random number generation for App Clash.

Every random decision the resolver makes (deck shuffles, seat order, the app
card hit by a Computer Virus or Hacker Theft) is drawn from a seed built out
of the game's secret salt, the snapshot version the move was computed
against, and a context label.  This gives:

- Reproducibility: replaying a move against the same snapshot gives the same
  result, so a retried request cannot "re-roll" an unlucky outcome
- Auditability: the seed can be logged next to the move
- Secrecy: the salt never leaves the server, so clients cannot predict draws

Examples:
    >>> seed = generate_seed("s3cr3t", 12, "virus")
    >>> seed
    's3cr3t:12:virus'
    >>> random_choice(seed, ["a", "b", "c"])["choice"] in {"a", "b", "c"}
    True
"""

import hashlib
import random
import secrets
from typing import Any, TypeVar

T = TypeVar("T")


def new_salt() -> str:
    """Return a fresh per-game salt."""
    return secrets.token_hex(16)


def generate_seed(salt: str, version: int, context: str) -> str:
    """Generate a deterministic seed from game state.

    Format: "salt:version:context"

    Args:
        salt: Per-game secret salt (``Game.seed``)
        version: Snapshot version the move is computed against
        context: What the randomness is for (e.g. ``"deal"``, ``"virus"``)

    Returns:
        Seed string for the RNG helpers in this module

    Raises:
        ValueError: If version is negative
    """
    if version < 0:
        raise ValueError(f"version must be non-negative, got {version}")

    return f"{salt}:{version}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def shuffled(seed: str, items: list[T]) -> list[T]:
    """Return a shuffled copy of ``items`` (Fisher-Yates) for the given seed.

    The input list is left untouched.

    Examples:
        >>> sorted(shuffled("x", [3, 1, 2]))
        [1, 2, 3]
        >>> shuffled("x", [1, 2, 3, 4]) == shuffled("x", [1, 2, 3, 4])
        True
    """
    result = list(items)
    random.Random(_seed_to_int(seed)).shuffle(result)
    return result


def random_choice(seed: str, options: list[Any]) -> dict[str, Any]:
    """Choose uniformly from options with deterministic seed.

    Args:
        seed: Deterministic seed string
        options: List of options to choose from (must be non-empty)

    Returns:
        Dictionary containing:
            - choice: The selected option
            - index: Index of the selected option
            - seed: The seed used

    Raises:
        ValueError: If options list is empty
    """
    if not options:
        raise ValueError("options list cannot be empty")

    rng = random.Random(_seed_to_int(seed))
    index = rng.randint(0, len(options) - 1)

    return {
        "choice": options[index],
        "index": index,
        "seed": seed,
    }
