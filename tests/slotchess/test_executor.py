"""Unit tests for /src/slotchess/executor.py"""

from dataclasses import replace

import pytest

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType, Status
from src.slotchess import executor
from src.slotchess.board import Board
from src.slotchess.moves import LastMove
from src.slotchess.pieces import Piece
from src.slotchess.spin import SpinResult
from src.slotchess.square import Position
from src.slotchess.state import GameState

ROOKS_AND_PAWN_FEN = "4k3/8/8/8/8/8/P7/R3K2R"
CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R"


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def spun(state: GameState, *slots: PieceType) -> GameState:
    """State right after the reels stopped on `slots`"""
    counts: dict[str, int] = {}
    for piece_type in slots:
        counts[piece_type.value] = counts.get(piece_type.value, 0) + 1
    return executor.apply_spin(state, SpinResult(tuple(slots), counts))


# --- MOVES BEFORE SPINNING ---
def test_move_before_spinning_passes_the_turn() -> None:
    state = GameState.initial()
    new_state = executor.apply_move(state, sq("e2"), sq("e4"))

    assert new_state.color_to_move == Color.BLACK
    assert new_state.board.is_empty(sq("e2"))
    assert new_state.board.piece(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert new_state.last_move == LastMove(sq("e2"), sq("e4"), Piece(PieceType.PAWN, Color.WHITE))
    assert not new_state.has_spun
    assert new_state.remaining_moves == {}


def test_original_state_is_untouched() -> None:
    state = GameState.initial()
    executor.apply_move(state, sq("e2"), sq("e4"))

    assert state.board.to_fen() == Board.starting_position().to_fen()
    assert state.color_to_move == Color.WHITE
    assert state.last_move is None


def test_moving_from_an_empty_square_changes_nothing() -> None:
    state = GameState.initial()
    assert executor.apply_move(state, sq("e4"), sq("e5")) is state


def test_capture_removes_the_piece() -> None:
    state = GameState.from_board(Board.from_fen("4k3/8/8/3p4/8/8/8/3RK3"))
    new_state = executor.apply_move(state, sq("d1"), sq("d5"))
    assert new_state.board.locate_color(Color.BLACK) == [sq("e8")]


# --- MOVES AFTER SPINNING ---
def test_allowance_keeps_the_turn() -> None:
    """Reels show R, R, P: two rook moves and one pawn move, in any order"""
    state = spun(
        GameState.from_board(Board.from_fen(ROOKS_AND_PAWN_FEN)),
        PieceType.ROOK,
        PieceType.ROOK,
        PieceType.PAWN,
    )
    assert state.remaining_moves == {"R": 2, "P": 1}

    state = executor.apply_move(state, sq("h1"), sq("h2"))
    assert state.color_to_move == Color.WHITE
    assert state.remaining_moves == {"R": 1, "P": 1}

    state = executor.apply_move(state, sq("h2"), sq("h3"))
    assert state.color_to_move == Color.WHITE
    assert state.remaining_moves == {"R": 0, "P": 1}
    assert state.remaining_for(PieceType.ROOK) == 0
    assert state.has_remaining_moves()

    state = executor.apply_move(state, sq("a2"), sq("a3"))
    assert state.color_to_move == Color.BLACK
    assert state.remaining_moves == {}
    assert not state.has_spun
    assert state.slots == ()


def test_spin_bookkeeping() -> None:
    state = executor.start_spin(GameState.initial())
    assert state.spin_in_progress
    assert not state.has_spun

    state = executor.apply_spin(
        state, SpinResult((PieceType.KNIGHT,) * 3, {"N": 3})
    )
    assert not state.spin_in_progress
    assert state.has_spun
    assert state.slots == (PieceType.KNIGHT,) * 3
    assert state.remaining_for(PieceType.KNIGHT) == 3
    assert state.remaining_for(PieceType.PAWN) == 0


# --- CASTLING ---
def test_king_side_castling_moves_the_rook() -> None:
    state = GameState.from_board(Board.from_fen(CASTLING_FEN))
    new_state = executor.apply_move(state, sq("e1"), sq("g1"))

    assert new_state.board.piece(sq("g1")) == Piece(PieceType.KING, Color.WHITE, has_moved=True)
    assert new_state.board.piece(sq("f1")) == Piece(PieceType.ROOK, Color.WHITE, has_moved=True)
    assert new_state.board.is_empty(sq("h1"))
    assert new_state.board.is_empty(sq("e1"))
    assert new_state.king_position(Color.WHITE) == sq("g1")


def test_queen_side_castling_moves_the_rook() -> None:
    state = GameState.from_board(Board.from_fen(CASTLING_FEN), Color.BLACK)
    new_state = executor.apply_move(state, sq("e8"), sq("c8"))

    assert new_state.board.piece(sq("c8")) == Piece(PieceType.KING, Color.BLACK, has_moved=True)
    assert new_state.board.piece(sq("d8")) == Piece(PieceType.ROOK, Color.BLACK, has_moved=True)
    assert new_state.board.is_empty(sq("a8"))
    assert new_state.king_position(Color.BLACK) == sq("c8")
    assert new_state.color_to_move == Color.WHITE


def test_king_step_updates_the_cache() -> None:
    state = GameState.from_board(Board.from_fen(CASTLING_FEN))
    new_state = executor.apply_move(state, sq("e1"), sq("f2"))
    assert new_state.king_position(Color.WHITE) == sq("f2")
    assert new_state.king_position(Color.WHITE) == new_state.board.find_king(Color.WHITE)
    # the rooks stay where they are
    assert new_state.board.piece(sq("h1")) == Piece(PieceType.ROOK, Color.WHITE)
    assert new_state.board.piece(sq("a1")) == Piece(PieceType.ROOK, Color.WHITE)


# --- EN PASSANT ---
def test_en_passant_removes_the_pawn_taken() -> None:
    state = GameState.from_board(Board.from_fen("4k3/8/8/3pP3/8/8/8/4K3"))
    state = replace(
        state, last_move=LastMove(sq("d7"), sq("d5"), Piece(PieceType.PAWN, Color.BLACK))
    )
    new_state = executor.apply_move(state, sq("e5"), sq("d6"))

    assert new_state.board.is_empty(sq("d5"))
    assert new_state.board.piece(sq("d6")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert new_state.board.locate_color(Color.BLACK) == [sq("e8")]


# --- ENDING THE TURN ---
def test_end_turn_clears_the_spin() -> None:
    state = spun(GameState.initial(), PieceType.QUEEN, PieceType.QUEEN, PieceType.PAWN)
    state = executor.apply_move(state, sq("e2"), sq("e4"))
    last_move = state.last_move

    new_state = executor.end_turn(state)
    assert new_state.color_to_move == Color.BLACK
    assert new_state.remaining_moves == {}
    assert not new_state.has_spun
    assert not new_state.spin_in_progress
    assert new_state.slots == ()
    assert new_state.last_move == last_move


# --- CHECK / CHECKMATE ---
def test_checking_move_sets_the_flag() -> None:
    state = GameState.from_board(Board.from_fen("4k3/8/8/8/8/8/8/R3K3"))
    new_state = executor.apply_move(state, sq("a1"), sq("a8"))

    assert new_state.is_check
    assert not new_state.is_checkmate
    assert new_state.status == Status.IN_PROGRESS
    assert new_state.color_to_move == Color.BLACK


def test_leaving_check_clears_the_flag() -> None:
    state = GameState.from_board(Board.from_fen("R3k3/8/8/8/8/8/8/4K3"), Color.BLACK)
    assert state.is_check

    new_state = executor.apply_move(state, sq("e8"), sq("e7"))
    assert not new_state.is_check


def test_checkmate_ends_the_game() -> None:
    state = GameState.from_board(Board.from_fen("6k1/5ppp/8/8/8/8/8/R5K1"))
    new_state = executor.apply_move(state, sq("a1"), sq("a8"))

    assert new_state.is_check
    assert new_state.is_checkmate
    assert new_state.status == Status.CHECKMATE
    assert new_state.winner == Color.WHITE
    assert new_state.is_over
    # the turn does not pass once the game is over
    assert new_state.color_to_move == Color.WHITE


def test_checkmate_forfeits_the_rest_of_the_allowance() -> None:
    state = spun(
        GameState.from_board(Board.from_fen("6k1/5ppp/8/8/8/8/8/R5K1")),
        PieceType.ROOK,
        PieceType.ROOK,
        PieceType.ROOK,
    )
    new_state = executor.apply_move(state, sq("a1"), sq("a8"))

    assert new_state.status == Status.CHECKMATE
    assert new_state.remaining_moves == {}
    assert not new_state.has_remaining_moves()


def test_initial_position_already_mated() -> None:
    state = GameState.from_board(Board.from_fen("R5k1/5ppp/8/8/8/8/8/6K1"), Color.BLACK)
    assert state.is_checkmate
    assert state.status == Status.CHECKMATE
    assert state.winner == Color.WHITE


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/8/8/8/8/4K3",  # no black king
        "4k3/8/8/8/8/8/8/8",  # no white king
        "4k3/8/8/8/8/8/8/K3K3",  # two white kings
    ],
)
def test_game_needs_exactly_one_king_each(fen: str) -> None:
    with pytest.raises(InvalidFENError):
        GameState.from_board(Board.from_fen(fen))


def test_copy_is_detached() -> None:
    state = spun(GameState.initial(), PieceType.PAWN, PieceType.PAWN, PieceType.PAWN)
    copied = state.copy()
    assert copied == state

    copied.board.remove_piece(sq("e2"))
    copied.remaining_moves["P"] = 0
    copied.king_positions[Color.WHITE] = sq("a1")

    assert state.board.piece(sq("e2")) == Piece(PieceType.PAWN, Color.WHITE)
    assert state.remaining_moves == {"P": 3}
    assert state.king_position(Color.WHITE) == sq("e1")
