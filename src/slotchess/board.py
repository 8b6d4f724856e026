"""The Game board: 8x8 grid of optional pieces. Pure data, the rules live in moves.py / check.py"""

from dataclasses import dataclass
from typing import Optional, Self

from src.core.config import STARTING_POSITION
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType
from src.slotchess.pieces import SLOT_PIECE_TYPES, Piece
from src.slotchess.square import BOARD_DIMENSIONS, Position, all_positions

VALID_FEN_CHARACTERS = set("pnbrqkPNBRQK12345678")


@dataclass
class Board:
    position: dict[Position, Optional[Piece]]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on row 0 (the 8th rank), starting with the rook on a8
        * pawns cover row 1 (7th rank) entirely
        * rows 2 through 5 have 8 consecutive empty squares
        * row 6 holds the white pawns (capital letters)
        * row 7 holds the white pieces.

        FEN lists the ranks top to bottom, which is exactly the row order of the grid.
        Every piece starts out as not having moved.
        """
        fen_by_rows = fen_str.split("/")
        if len(fen_by_rows) != BOARD_DIMENSIONS[0]:
            raise InvalidFENError(
                f"Expected {BOARD_DIMENSIONS[0]} ranks separated by '/', got {len(fen_by_rows)}: {fen_str!r}"
            )

        position: dict[Position, Optional[Piece]] = {
            square: None for square in all_positions()
        }
        for row, fen_one_row in enumerate(fen_by_rows):
            if not set(fen_one_row) <= VALID_FEN_CHARACTERS:
                raise InvalidFENError(
                    f"Unknown character in rank {fen_one_row!r} of {fen_str!r}"
                )
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    if col >= BOARD_DIMENSIONS[1]:
                        raise InvalidFENError(
                            f"Rank {fen_one_row!r} describes more than {BOARD_DIMENSIONS[1]} squares."
                        )
                    position[Position(row, col)] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
            if col != BOARD_DIMENSIONS[1]:
                raise InvalidFENError(
                    f"Rank {fen_one_row!r} does not describe exactly {BOARD_DIMENSIONS[1]} squares."
                )
        return cls(position)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Position(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def to_rows(self) -> list[list[Optional[str]]]:
        """Grid of FEN letters (None for an empty square). This is what the UI draws."""
        return [
            [
                piece.to_fen() if (piece := self.piece(Position(row, col))) else None
                for col in range(BOARD_DIMENSIONS[1])
            ]
            for row in range(BOARD_DIMENSIONS[0])
        ]

    def copy(self) -> "Board":
        # Pieces are frozen, so a shallow copy of the mapping is enough
        return Board(dict(self.position))

    def piece(self, square: Position) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Position) -> bool:
        return self.piece(square) is None

    def is_any_occupied(self, squares: list[Position]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Position]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.type == piece_type and piece.color == color
        ]

    def locate_color(self, color: Color) -> list[Position]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Optional[Position]:
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    def alive_piece_types(self, color: Color) -> list[PieceType]:
        """Distinct non-king piece types still on the board for a player, in slot order"""
        present = {
            piece.type
            for piece in self.position.values()
            if piece is not None and piece.color == color
        }
        return [piece_type for piece_type in SLOT_PIECE_TYPES if piece_type in present]

    def place_piece(self, piece: Piece, square: Position) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Position) -> Optional[Piece]:
        removed = self.position.get(square)
        self.position[square] = None
        return removed

    def move_piece(self, from_square: Position, to_square: Position) -> None:
        """Update the position on the board. Whatever stood on the target square is captured."""
        piece_that_moved = self.piece(from_square)
        if piece_that_moved is None:
            return
        self.position[from_square] = None
        self.position[to_square] = piece_that_moved.moved()
