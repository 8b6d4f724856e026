"""
Check / checkmate detection.

The movement rules of moves.py only care about geometry. Here we layer the
'you may not leave your own king under attack' rule on top of them.
"""

import logging
from typing import Optional

from src.core.shared_types import Color, PieceType
from src.slotchess.board import Board
from src.slotchess.moves import (
    LastMove,
    en_passant_victim,
    is_legal_move,
    is_square_attacked,
)
from src.slotchess.square import Position, all_positions

logger = logging.getLogger(__name__)


def _king_position(
    board: Board, color: Color, king_position: Optional[Position]
) -> Optional[Position]:
    return king_position if king_position is not None else board.find_king(color)


def is_in_check(
    board: Board, color: Color, king_position: Optional[Position] = None
) -> bool:
    """True if any of the opponent's pieces could move onto the king's square."""
    king_square = _king_position(board, color, king_position)
    if king_square is None:
        return False
    return is_square_attacked(board, king_square, color.opponent)


def simulate_move(board: Board, from_square: Position, to_square: Position) -> Board:
    """
    Copy the board and make the move on the copy.
    Takes en passant into account (removes the pawn that got taken).
    """
    new_board = board.copy()
    victim = en_passant_victim(board, from_square, to_square)
    new_board.move_piece(from_square, to_square)
    if victim is not None:
        new_board.remove_piece(victim)
    return new_board


def would_expose_check(
    board: Board,
    from_square: Position,
    to_square: Position,
    king_position: Optional[Position] = None,
) -> bool:
    """Return True if the move puts (or leaves) your own king in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. moving the king? Check if its new square is attacked.
       Any other piece? Check if the king (which stays where it was) is attacked.
    """
    moving_piece = board.piece(from_square)
    if moving_piece is None:
        return True

    new_board = simulate_move(board, from_square, to_square)
    if moving_piece.type == PieceType.KING:
        return is_square_attacked(new_board, to_square, moving_piece.color.opponent)

    king_square = _king_position(board, moving_piece.color, king_position)
    if king_square is None:
        return False
    return is_square_attacked(new_board, king_square, moving_piece.color.opponent)


def legal_destinations(
    board: Board,
    from_square: Position,
    last_move: Optional[LastMove] = None,
    king_position: Optional[Position] = None,
) -> list[Position]:
    """All squares the piece can move to without exposing its own king. Simply tries all 64 of them.

    NOTE: kings are never captured. A player who gave check and still has moves left on the reels
    may not take the king with the next one.
    """
    return [
        to_square
        for to_square in all_positions()
        if not _holds_king(board, to_square)
        and is_legal_move(board, from_square, to_square, last_move)
        and not would_expose_check(board, from_square, to_square, king_position)
    ]


def _holds_king(board: Board, square: Position) -> bool:
    piece = board.piece(square)
    return piece is not None and piece.type == PieceType.KING


def is_checkmate(
    color: Color,
    board: Board,
    king_position: Optional[Position] = None,
    last_move: Optional[LastMove] = None,
) -> bool:
    """
    In check, and no piece of yours has any move that gets you out of it.

    NOTE: The slot machine allowances play no role here. Every piece is considered.
    """
    king_square = _king_position(board, color, king_position)
    if not is_in_check(board, color, king_square):
        return False

    for from_square in board.locate_color(color):
        for to_square in all_positions():
            if is_legal_move(
                board, from_square, to_square, last_move
            ) and not would_expose_check(board, from_square, to_square, king_square):
                logger.debug(
                    "%s escapes check with %s%s",
                    color,
                    from_square.to_algebraic(),
                    to_square.to_algebraic(),
                )
                return False
    return True
