"""
Snapshot of a game of Slot Chess.

A GameState is never mutated. Every accepted action (move, spin, ending the turn) produces a new one.
NOTE: the Board inside is a plain (mutable) object. executor.py works on copies, and Game.snapshot() hands out copies.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType, Status
from src.slotchess.board import Board
from src.slotchess.check import is_checkmate, is_in_check
from src.slotchess.moves import LastMove
from src.slotchess.square import Position


@dataclass(frozen=True)
class GameState:
    board: Board
    king_positions: dict[Color, Position]
    color_to_move: Color = Color.WHITE
    last_move: Optional[LastMove] = None
    is_check: bool = False
    is_checkmate: bool = False
    status: Status = Status.IN_PROGRESS
    winner: Optional[Color] = None
    # piece type letter -> moves left this turn (filled by the spin)
    remaining_moves: dict[str, int] = field(default_factory=dict)
    has_spun: bool = False
    spin_in_progress: bool = False
    # what the reels show. Empty until the player spins
    slots: tuple[PieceType, ...] = ()

    @classmethod
    def from_board(cls, board: Board, color_to_move: Color = Color.WHITE) -> Self:
        """
        Start a game from the given board, nobody has spun yet.
        If the player to move is already mated, the game is over before it starts.

        Raises InvalidFENError unless both players have exactly one king.
        """
        king_positions: dict[Color, Position] = {}
        for color in Color:
            kings = board.locate_pieces(PieceType.KING, color)
            if len(kings) != 1:
                raise InvalidFENError(
                    f"Expected exactly one {color} king, found {len(kings)}."
                )
            king_positions[color] = kings[0]

        check = is_in_check(board, color_to_move, king_positions.get(color_to_move))
        mate = check and is_checkmate(
            color_to_move, board, king_positions.get(color_to_move)
        )
        return cls(
            board=board,
            king_positions=king_positions,
            color_to_move=color_to_move,
            is_check=check,
            is_checkmate=mate,
            status=Status.CHECKMATE if mate else Status.IN_PROGRESS,
            winner=color_to_move.opponent if mate else None,
        )

    @classmethod
    def initial(cls) -> Self:
        return cls.from_board(Board.starting_position())

    @property
    def is_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    def king_position(self, color: Color) -> Optional[Position]:
        return self.king_positions.get(color)

    def remaining_for(self, piece_type: PieceType) -> int:
        return self.remaining_moves.get(piece_type.value, 0)

    def has_remaining_moves(self) -> bool:
        return any(count > 0 for count in self.remaining_moves.values())

    def copy(self) -> "GameState":
        """Detached copy: changing its board or allowance does not reach the game it came from."""
        return replace(
            self,
            board=self.board.copy(),
            king_positions=dict(self.king_positions),
            remaining_moves=dict(self.remaining_moves),
        )
