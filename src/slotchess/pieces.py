"""Defines the chess pieces"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.shared_types import Color, PieceType

# Pieces the slot machine can hand out. The king never shows up on a reel.
SLOT_PIECE_TYPES: tuple[PieceType, ...] = (
    PieceType.PAWN,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color
    # Gates castling and the double pawn advance
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = PieceType(character.upper())
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            self.type.value.upper()
            if self.color == Color.WHITE
            else self.type.value.lower()
        )

    def moved(self) -> Self:
        """Copy of this piece that is flagged as having moved."""
        return replace(self, has_moved=True)

    def is_same_kind(self, other: "Piece") -> bool:
        """Same type and color, regardless of whether either of them has moved."""
        return self.type == other.type and self.color == other.color
