"""
Applying moves and ending turns.

Every function takes a GameState and returns a new one. The moves handed in here must already have
been validated (movement rules + not exposing your own king), see Game.current_legal_moves().
"""

import logging
from dataclasses import replace

from src.core.shared_types import Color, PieceType, Status
from src.slotchess.castling import castling_squares
from src.slotchess.check import is_checkmate, is_in_check
from src.slotchess.moves import LastMove, en_passant_victim
from src.slotchess.spin import SpinResult
from src.slotchess.square import Position
from src.slotchess.state import GameState

logger = logging.getLogger(__name__)


def apply_move(state: GameState, from_square: Position, to_square: Position) -> GameState:
    """
    Make a (validated) move
    -----

    1. update the board (NOTE: if castling, move the king and the rook. If en passant, remove the pawn taken)
    2. update the cached king position
    3. spend one move of the piece type's allowance (only if the player spun this turn)
    4. decide if the turn passes to the opponent
    5. record the last move (en passant window for the reply)
    6. check / checkmate status of the opponent
    """
    piece = state.board.piece(from_square)
    if piece is None:
        # nothing to move. Leave everything as it was
        return state

    # update the board
    board = state.board.copy()
    victim = en_passant_victim(state.board, from_square, to_square)
    board.move_piece(from_square, to_square)
    if victim is not None:
        board.remove_piece(victim)
        logger.info("En passant: pawn on %s taken", victim.to_algebraic())

    king_positions = dict(state.king_positions)
    if piece.type == PieceType.KING:
        king_positions[piece.color] = to_square
        castling = castling_squares(from_square, to_square)
        if castling is not None and board.piece(castling.rook_from) is not None:
            board.move_piece(castling.rook_from, castling.rook_to)
            logger.info(
                "%s castles, rook %s -> %s",
                piece.color,
                castling.rook_from.to_algebraic(),
                castling.rook_to.to_algebraic(),
            )

    # spend the allowance
    remaining_moves = dict(state.remaining_moves)
    if state.has_spun and remaining_moves.get(piece.type.value):
        remaining_moves[piece.type.value] -= 1

    # Before spinning, any move ends the turn. After spinning: only once the budget is used up.
    if state.has_spun:
        turn_over = not any(count > 0 for count in remaining_moves.values())
    else:
        turn_over = True

    logger.info(
        "%s moved %s %s -> %s",
        piece.color,
        piece.type.name.lower(),
        from_square.to_algebraic(),
        to_square.to_algebraic(),
    )

    new_state = replace(
        state,
        board=board,
        king_positions=king_positions,
        last_move=LastMove(from_square, to_square, piece),
        remaining_moves=remaining_moves,
    )
    new_state = _update_check_status(new_state, mover=piece.color)
    if turn_over and not new_state.is_over:
        new_state = end_turn(new_state)
    return new_state


def end_turn(state: GameState) -> GameState:
    """
    Pass the turn to the opponent
    ---

    Unused allowance is forfeited, and the opponent gets to spin again.
    The last move is kept when it was made by the player passing the turn: the opponent may still reply en passant.
    A player passing on the opponent's last move gives up that reply for good.
    """
    next_color = state.color_to_move.opponent
    last_move = state.last_move
    if last_move is not None and last_move.piece.color != state.color_to_move:
        last_move = None
    logger.info("Turn passes to %s", next_color)
    return replace(
        state,
        color_to_move=next_color,
        last_move=last_move,
        remaining_moves={},
        has_spun=False,
        spin_in_progress=False,
        slots=(),
    )


def start_spin(state: GameState) -> GameState:
    """The reels are turning: no moves can be made until they stop"""
    return replace(state, spin_in_progress=True)


def apply_spin(state: GameState, result: SpinResult) -> GameState:
    """The reels stopped. Their tally is the budget for the rest of the turn"""
    return replace(
        state,
        remaining_moves=dict(result.remaining_moves),
        slots=result.slots,
        has_spun=True,
        spin_in_progress=False,
    )


def _update_check_status(state: GameState, mover: Color) -> GameState:
    """
    After a move, check if the opponent got put in check (or mated).

    NOTE: the mover might keep the turn for a while (slot allowance left), the flags still describe the opponent's king.
    """
    opponent = mover.opponent
    king_square = state.king_position(opponent)
    check = is_in_check(state.board, opponent, king_square)
    mate = check and is_checkmate(opponent, state.board, king_square, state.last_move)

    if mate:
        logger.info("Checkmate! %s wins", mover)
        return replace(
            state,
            is_check=True,
            is_checkmate=True,
            status=Status.CHECKMATE,
            winner=mover,
            remaining_moves={},
            spin_in_progress=False,
        )
    if check:
        logger.info("%s is in check", opponent)
    return replace(state, is_check=check, is_checkmate=False)
