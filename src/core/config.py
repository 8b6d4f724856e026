"""Game settings. Defaults can be overridden through environment variables."""

import os
from typing import Mapping

from src.core.exceptions import ConfigurationError


def read_slot_count(environ: Mapping[str, str] = os.environ) -> int:
    """Number of reels on the slot machine. A spin without reels would leave the player stuck, so at least 1."""
    raw_value = environ.get("SLOT_CHESS_SLOT_COUNT", "3")
    try:
        slot_count = int(raw_value)
    except ValueError as e:
        raise ConfigurationError(
            f"SLOT_CHESS_SLOT_COUNT must be a whole number, got {raw_value!r}."
        ) from e
    if slot_count < 1:
        raise ConfigurationError(
            f"SLOT_CHESS_SLOT_COUNT must be at least 1, got {slot_count}."
        )
    return slot_count


# Number of reels on the slot machine, i.e. the number of piece types drawn per spin.
SLOT_COUNT = read_slot_count()

# How long the UI animates the reels before asking for the final result. Presentation only.
SPIN_DISPLAY_SECONDS = float(os.getenv("SLOT_CHESS_SPIN_DISPLAY_SECONDS", "2.0"))

STARTING_POSITION = os.getenv(
    "SLOT_CHESS_STARTING_POSITION", "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
)
