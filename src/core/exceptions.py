"""
Custom exceptions.

NOTE: Rule violations (illegal moves, spinning twice, ...) are not errors in this game. Those requests are simply ignored.
Exceptions are reserved for input that cannot be interpreted at all.
"""


class GameError(Exception):
    """Top-level exception for anything raised by this package."""


class InvalidRequestError(GameError):
    """Request coming from the UI could not be interpreted (ex. a square name that does not exist)."""


class InvalidFENError(GameError):
    """Piece placement string could not be parsed into a board."""


class ConfigurationError(GameError):
    """A setting read from the environment is out of range."""
