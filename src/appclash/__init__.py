"""App Clash: authoritative rules engine for a four-player card game."""

__version__ = "0.1.0"
