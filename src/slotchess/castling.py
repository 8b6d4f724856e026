"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.slotchess.square import BOARD_DIMENSIONS, Position


class CastlingDirection(Enum):
    """Values are the files the rook starts from / ends up on."""

    KING_SIDE = (BOARD_DIMENSIONS[1] - 1, 5)
    QUEEN_SIDE = (0, 3)

    @property
    def rook_from_col(self) -> int:
        return self.value[0]

    @property
    def rook_to_col(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: castling is a property of the king move (two files sideways), not of fixed starting squares.
    Which rook takes part follows from the direction the king moves in.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_king_move(cls, king_from: Position, king_to: Position) -> Self:
        direction = (
            CastlingDirection.KING_SIDE
            if king_to.col > king_from.col
            else CastlingDirection.QUEEN_SIDE
        )
        row = king_from.row
        return cls(
            king_from=king_from,
            king_to=king_to,
            rook_from=Position(row, direction.rook_from_col),
            rook_to=Position(row, direction.rook_to_col),
        )

    def path(self) -> list[Position]:
        """Squares strictly between the king and the rook. These must be empty and may not be under attack."""
        start = min(self.king_from.col, self.rook_from.col) + 1
        end = max(self.king_from.col, self.rook_from.col)
        return [Position(self.king_from.row, col) for col in range(start, end)]


def is_castling_geometry(king_from: Position, king_to: Position) -> bool:
    """A king move counts as a castling attempt when it goes exactly two files sideways along its row."""
    return king_from.row == king_to.row and abs(king_to.col - king_from.col) == 2


def castling_squares(
    king_from: Position, king_to: Position
) -> Optional[CastlingSquares]:
    if not is_castling_geometry(king_from, king_to):
        return None
    return CastlingSquares.from_king_move(king_from, king_to)
