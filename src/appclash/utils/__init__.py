"""Utility functions for the App Clash engine."""

from appclash.utils.rng import (
    generate_seed,
    new_salt,
    random_choice,
    shuffled,
)

__all__ = [
    "generate_seed",
    "new_salt",
    "random_choice",
    "shuffled",
]
