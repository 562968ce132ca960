"""Token-safe translation of game/mod language files."""

__version__ = "0.1.0"
