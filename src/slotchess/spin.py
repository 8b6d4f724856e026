"""
The slot machine ("Spin").

Each turn the player to move may pull the lever once. The reels show piece types,
drawn uniformly (with replacement) from the types the player still has on the board.
The tally of the reels is the turn's budget of moves per piece type.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, TypeVar

from src.core.config import SLOT_COUNT
from src.core.shared_types import Color, PieceType
from src.slotchess.board import Board

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can pick an element from a sequence. `random.Random` fits, tests can inject their own."""

    def choice(self, seq: Sequence[T]) -> T: ...


@dataclass(frozen=True)
class SpinResult:
    slots: tuple[PieceType, ...]
    remaining_moves: dict[str, int]


def eligible_piece_types(board: Board, color: Color) -> list[PieceType]:
    """The king is never on the reels"""
    return board.alive_piece_types(color)


def tally(slots: Sequence[PieceType]) -> dict[str, int]:
    """Count how often each piece type came up: that is how many moves the type gets this turn"""
    return {piece_type.value: count for piece_type, count in Counter(slots).items()}


def spin(
    board: Board,
    color: Color,
    rng: Optional[RandomSource] = None,
    slot_count: int = SLOT_COUNT,
) -> Optional[SpinResult]:
    """
    Draw the reels for the player with the `color` pieces.
    ---

    Every reel is an independent, uniform draw from the distinct piece types still alive.
    (Having 8 pawns left does not make a pawn more likely than your last knight.)

    Returns None if there is nothing to draw from (only the king is left).
    """
    rng = rng or random.Random()
    piece_types = eligible_piece_types(board, color)
    if not piece_types:
        logger.info("No piece types left to spin for %s", color)
        return None

    slots = tuple(rng.choice(piece_types) for _ in range(slot_count))
    result = SpinResult(slots=slots, remaining_moves=tally(slots))
    logger.info(
        "%s spun %s", color, " ".join(piece_type.value for piece_type in slots)
    )
    return result
