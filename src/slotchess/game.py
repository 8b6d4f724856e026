"""
The Game class will be the entrypoint into the domain layer for the service layer (and through it, the UI).
It is responsible for orchestrating all the business logic required to play a turn of Slot Chess:
selecting pieces, listing their legal moves, spinning the slot machine, making moves and ending turns.

Every public method either swaps in a new GameState, or leaves the current one untouched.
Requests that break the rules are ignored (and logged), they never raise.
"""

import logging
from typing import Optional, Self

from src.core.config import SLOT_COUNT
from src.core.shared_types import Color, PieceType
from src.slotchess import executor
from src.slotchess.board import Board
from src.slotchess.check import legal_destinations
from src.slotchess.pieces import Piece
from src.slotchess.spin import RandomSource, spin
from src.slotchess.square import Position
from src.slotchess.state import GameState

logger = logging.getLogger(__name__)


class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    def __init__(
        self,
        state: GameState,
        rng: Optional[RandomSource] = None,
        slot_count: int = SLOT_COUNT,
    ) -> None:
        self.state = state
        self.rng = rng
        self.slot_count = slot_count
        self.selected: Optional[Position] = None
        self.valid_moves: list[Position] = []

    @classmethod
    def new_game(
        cls, rng: Optional[RandomSource] = None, slot_count: int = SLOT_COUNT
    ) -> Self:
        """Standard starting position, White to move, nobody has spun yet."""
        return cls(GameState.initial(), rng=rng, slot_count=slot_count)

    @classmethod
    def from_fen(
        cls,
        position: str,
        color_to_move: Color = Color.WHITE,
        rng: Optional[RandomSource] = None,
        slot_count: int = SLOT_COUNT,
    ) -> Self:
        """Start from a custom position (piece placement part of a FEN string)."""
        board = Board.from_fen(position)
        return cls(
            GameState.from_board(board, color_to_move), rng=rng, slot_count=slot_count
        )

    def snapshot(self) -> GameState:
        """A copy of the current state, safe to hand to the UI."""
        return self.state.copy()

    def reset(self) -> None:
        """Throw away the current game and set up the pieces again."""
        self.state = GameState.initial()
        self._clear_selection()

    # --- SELECTING / MOVING ---
    def select_square(self, position: Position) -> None:
        """
        A click on the board
        ----

        1. A piece is selected and the square is one of its valid moves? --> make the move
        2. The square holds one of your pieces? --> select that piece instead
        3. Anything else --> deselect
        """
        if self.selected is not None and position in self.valid_moves:
            self.attempt_move(self.selected, position)
            self._clear_selection()
            return

        piece = self.state.board.piece(position)
        if piece is not None and piece.color == self.state.color_to_move:
            self.selected = position
            self.valid_moves = self.current_legal_moves(position)
            return

        self._clear_selection()

    def attempt_move(self, from_square: Position, to_square: Position) -> bool:
        """
        Attempt to make a move
        -----

        Returns whether the move was made. Illegal moves leave the state as it was.
        """
        if self.state.spin_in_progress:
            logger.debug("Move ignored: the reels are still spinning")
            return False

        if to_square not in self.current_legal_moves(from_square):
            logger.debug(
                "Move ignored: %s -> %s is not allowed",
                from_square.to_algebraic(),
                to_square.to_algebraic(),
            )
            return False

        self.state = executor.apply_move(self.state, from_square, to_square)
        self._clear_selection()
        return True

    def current_legal_moves(self, position: Position) -> list[Position]:
        """
        List of squares the piece on `position` may move to right now
        ----

        **Combines the following**

        1. it must be your piece, and your turn (and the game must still be going)
        2. the slot machine must allow this piece type to move (see `is_piece_eligible()`)
        3. the movement rules of the piece
        4. you may not leave your own king under attack
        """
        if self.state.is_over or self.state.spin_in_progress:
            return []

        piece = self.state.board.piece(position)
        if piece is None or piece.color != self.state.color_to_move:
            return []

        if not self.is_piece_eligible(piece):
            logger.debug(
                "No valid moves: %s may not move right now",
                piece.type.name.lower(),
            )
            return []

        return legal_destinations(
            self.state.board,
            position,
            last_move=self.state.last_move,
            king_position=self.state.king_position(piece.color),
        )

    def is_piece_eligible(self, piece: Piece) -> bool:
        """
        Which piece types may move this turn?
        ---

        * Before spinning, White may only move pawns. Black may move anything.
          (NOTE: this asymmetry is part of the game as designed, it is not a bug.)
        * After spinning, only the piece types with moves left on the reels.
        """
        if self.state.has_spun:
            return self.state.remaining_for(piece.type) > 0
        if self.state.color_to_move == Color.WHITE:
            return piece.type == PieceType.PAWN
        return True

    def has_any_legal_move_this_turn(self) -> bool:
        """Used by the UI to tell a stuck player to spin or end the turn."""
        return any(
            self.current_legal_moves(square)
            for square in self.state.board.locate_color(self.state.color_to_move)
        )

    def end_turn_manually(self) -> bool:
        """Forfeit what is left on the reels and pass the turn."""
        if self.state.is_over or self.state.spin_in_progress:
            logger.debug("End turn ignored")
            return False
        self.state = executor.end_turn(self.state)
        self._clear_selection()
        return True

    # --- SLOT MACHINE ---
    def can_spin(self) -> bool:
        return not (
            self.state.is_over or self.state.has_spun or self.state.spin_in_progress
        )

    def start_spin(self) -> bool:
        """
        Pull the lever
        ---

        Only once per turn. If only your king is left there is nothing to spin for: the turn passes immediately.
        While the reels are turning (the UI animates them) no moves can be made.
        """
        if not self.can_spin():
            logger.debug("Spin ignored")
            return False

        if not self.state.board.alive_piece_types(self.state.color_to_move):
            self.state = executor.end_turn(self.state)
            self._clear_selection()
            return False

        self.state = executor.start_spin(self.state)
        self._clear_selection()
        return True

    def finish_spin(self) -> tuple[PieceType, ...]:
        """The reels stop: the one and only draw of the turn happens here. Returns what the reels show."""
        if not self.state.spin_in_progress:
            logger.debug("No spin to finish")
            return self.state.slots

        result = spin(
            self.state.board,
            self.state.color_to_move,
            rng=self.rng,
            slot_count=self.slot_count,
        )
        if result is None:
            self.state = executor.end_turn(self.state)
            return ()
        self.state = executor.apply_spin(self.state, result)
        return result.slots

    def spin(self) -> tuple[PieceType, ...]:
        """Start and stop the reels in one go (no animation)."""
        if not self.start_spin():
            return self.state.slots
        return self.finish_spin()

    # -- PRIVATE HELPERS ---
    def _clear_selection(self) -> None:
        self.selected = None
        self.valid_moves = []
