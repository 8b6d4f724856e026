"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the legality check for each piece type.

Whether a move leaves your own king in check is NOT checked here. That is layered on top by check.py
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.core.shared_types import Color, PieceType
from src.slotchess.castling import castling_squares
from src.slotchess.pieces import Piece
from src.slotchess.square import Position

logger = logging.getLogger(__name__)

Vector = tuple[int, int]

# White moves UP the board (towards row 0), black moves DOWN
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Position) -> Optional[Piece]: ...
    def is_empty(self, square: Position) -> bool: ...
    def locate_color(self, color: Color) -> list[Position]: ...


@dataclass(frozen=True)
class LastMove:
    """The previous move made in the game. Only used to decide if an en passant capture is available."""

    from_square: Position
    to_square: Position
    piece: Piece

    def is_double_pawn_advance(self) -> bool:
        return (
            self.piece.type == PieceType.PAWN
            and self.from_square.col == self.to_square.col
            and abs(self.to_square.row - self.from_square.row) == 2
        )


# --- PATH HELPERS ---
def unit_vector(from_square: Position, to_square: Position) -> Vector:
    """Direction of travel, one step at the time along rows and columns"""
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    step_row = 0 if d_row == 0 else (1 if d_row > 0 else -1)
    step_col = 0 if d_col == 0 else (1 if d_col > 0 else -1)
    return step_row, step_col


def squares_between(from_square: Position, to_square: Position) -> list[Position]:
    """
    Walk from one square towards the other along the unit direction vector.
    Both end points are excluded. Stops at the edge of the board.
    """
    step_row, step_col = unit_vector(from_square, to_square)
    squares_found: list[Position] = []
    square = from_square.offset(step_row, step_col)
    while square.is_within_bounds() and square != to_square:
        squares_found.append(square)
        square = square.offset(step_row, step_col)
    return squares_found


def has_obstacles_between(
    board: Board, from_square: Position, to_square: Position
) -> bool:
    """Sliding pieces cannot jump: any occupied square on the way blocks the move"""
    return any(
        not board.is_empty(square) for square in squares_between(from_square, to_square)
    )


# --- MOVEMENT RULES ---
def is_legal_pawn_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - can move by two when it has not moved yet and stands on its starting rank. Both squares must be empty.
    - takes diagonally
    - takes en passant: the enemy pawn that just advanced two squares and landed right next to it.
    """
    pawn = board.piece(from_square)
    assert pawn is not None
    direction = PAWN_DIRECTION[pawn.color]
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    target_empty = board.is_empty(to_square)

    if d_col == 0 and d_row == direction:
        return target_empty

    if d_col == 0 and d_row == 2 * direction:
        middle = from_square.offset(direction, 0)
        return (
            not pawn.has_moved
            and from_square.row == PAWN_START_ROW[pawn.color]
            and target_empty
            and board.is_empty(middle)
        )

    if abs(d_col) == 1 and d_row == direction:
        if not target_empty:
            # NOTE: same color targets were already filtered out by is_legal_move()
            return True
        return is_en_passant_available(pawn, from_square, to_square, last_move)

    return False


def is_en_passant_available(
    pawn: Piece,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """
    The en passant window is exactly one reply long:
    the last move must be the opponent's pawn advancing two squares from its own starting rank,
    landing on the same row as our pawn, on the file we are moving into.
    """
    if last_move is None or not last_move.is_double_pawn_advance():
        return False
    if last_move.piece.color == pawn.color:
        return False
    opponent_start_row = PAWN_START_ROW[pawn.color.opponent]
    return (
        last_move.from_square.row == opponent_start_row
        and last_move.to_square.row == from_square.row
        and last_move.to_square.col == to_square.col
    )


def en_passant_victim(
    board: Board, from_square: Position, to_square: Position
) -> Optional[Position]:
    """
    A pawn that moves diagonally onto an empty square is taking en passant.
    The pawn that gets taken stands on the file moved into, on the row the capturing pawn started from.
    """
    pawn = board.piece(from_square)
    if pawn is None or pawn.type != PieceType.PAWN:
        return None
    if abs(to_square.col - from_square.col) != 1 or not board.is_empty(to_square):
        return None
    victim_square = Position(from_square.row, to_square.col)
    victim = board.piece(victim_square)
    if victim is None or victim.type != PieceType.PAWN or victim.color == pawn.color:
        return None
    return victim_square


def is_legal_knight_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """Knights always move such that {|delta_row|, |delta_col|} = {1, 2}. They jump, so nothing can block them."""
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    return (d_row, d_col) in [(1, 2), (2, 1)]


def is_legal_bishop_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    return d_row == d_col and not has_obstacles_between(board, from_square, to_square)


def is_legal_rook_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """Rooks move either horizontally or vertically"""
    same_line = from_square.row == to_square.row or from_square.col == to_square.col
    return same_line and not has_obstacles_between(board, from_square, to_square)


def is_legal_queen_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_legal_bishop_move(
        board, from_square, to_square, last_move
    ) or is_legal_rook_move(board, from_square, to_square, last_move)


def is_king_step(from_square: Position, to_square: Position) -> bool:
    return (
        max(
            abs(to_square.row - from_square.row), abs(to_square.col - from_square.col)
        )
        <= 1
    )


def is_legal_king_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove],
) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move: two files sideways.
    """
    if is_king_step(from_square, to_square):
        return True
    return is_legal_castling(board, from_square, to_square)


def is_legal_castling(board: Board, king_from: Position, king_to: Position) -> bool:
    """
    **you are allowed to castle if**

    * Your king has not moved yet.
    * The rook on the side you are castling towards (a- or h-file of the king's row) has not moved yet.
    * Every square in between the king and that rook is empty.
    * None of those squares is under attack.

    NOTE: On the queen side this includes the b-file square, even though the king never crosses it.
    """
    king = board.piece(king_from)
    if king is None or king.has_moved:
        return False

    squares = castling_squares(king_from, king_to)
    if squares is None:
        return False

    rook = board.piece(squares.rook_from)
    if rook is None or not rook.is_same_kind(Piece(PieceType.ROOK, king.color)):
        return False
    if rook.has_moved:
        return False

    for square in squares.path():
        if not board.is_empty(square):
            logger.debug("Castling blocked: %s is occupied", square.to_algebraic())
            return False
        if is_square_attacked(board, square, king.color.opponent):
            logger.debug("Castling blocked: %s is attacked", square.to_algebraic())
            return False
    return True


# -- STRATEGY PATTERN: MOVEMENT RULES ---
IsLegalFn = Callable[[Board, Position, Position, Optional[LastMove]], bool]
MOVEMENT_RULES: dict[PieceType, IsLegalFn] = {
    PieceType.PAWN: is_legal_pawn_move,
    PieceType.KNIGHT: is_legal_knight_move,
    PieceType.BISHOP: is_legal_bishop_move,
    PieceType.ROOK: is_legal_rook_move,
    PieceType.QUEEN: is_legal_queen_move,
    PieceType.KING: is_legal_king_move,
}


def is_legal_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    last_move: Optional[LastMove] = None,
) -> bool:
    """
    Is the move allowed by the movement rules of the piece standing on `from_square`?
    ---

    Does NOT check whether your own king ends up in check.
    """
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return False
    if from_square == to_square:
        return False

    piece = board.piece(from_square)
    if piece is None:
        return False

    target = board.piece(to_square)
    if target is not None and target.color == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(board, from_square, to_square, last_move)


# --- CAPTURING RULES / ATTACKING RULES ---
def can_attack(board: Board, from_square: Position, to_square: Position) -> bool:
    """
    Could the piece on `from_square` land on `to_square`?
    ---

    Same rules as moving, with two exceptions:
    * castling never attacks anything, the king only reaches its neighbouring squares
    * en passant is not considered (it can never land on an occupied square anyway)

    NOTE: A pawn therefore 'attacks' the empty square right in front of it, and does not attack an empty diagonal square.
    """
    piece = board.piece(from_square)
    if piece is None:
        return False
    if piece.type == PieceType.KING:
        target = board.piece(to_square)
        if target is not None and target.color == piece.color:
            return False
        return from_square != to_square and is_king_step(from_square, to_square)
    return is_legal_move(board, from_square, to_square, last_move=None)


def is_square_attacked(board: Board, square: Position, by_color: Color) -> bool:
    """Does any piece of `by_color` have a move landing on the given square?"""
    return any(
        can_attack(board, origin, square) for origin in board.locate_color(by_color)
    )
