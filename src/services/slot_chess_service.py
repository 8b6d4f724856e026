"""Orchestration of communication from the UI to the game logic (and the reverse direction)."""

import logging
from typing import Optional

from src.api.models import (
    GameSnapshotResponse,
    MoveRequest,
    NewGameRequest,
    SelectSquareRequest,
)
from src.core.config import SPIN_DISPLAY_SECONDS
from src.slotchess.game import Game
from src.slotchess.spin import RandomSource
from src.slotchess.square import Position

logger = logging.getLogger(__name__)


class SlotChessService:
    """Holds the single in-memory game the UI component plays on."""

    def __init__(self, game: Optional[Game] = None, rng: Optional[RandomSource] = None) -> None:
        self.rng = rng
        self.game = game if game is not None else Game.new_game(rng=rng)

    # -- UI gestures ---
    def new_game(self, request: NewGameRequest) -> GameSnapshotResponse:
        """Start over (optionally from a custom position)."""
        if request.starting_position is None:
            self.game = Game.new_game(rng=self.rng)
        else:
            self.game = Game.from_fen(
                request.starting_position,
                color_to_move=request.color_to_move,
                rng=self.rng,
            )
        logger.info("New game started")
        return self.get_state()

    def select_square(self, request: SelectSquareRequest) -> GameSnapshotResponse:
        """The player clicked a square."""
        self.game.select_square(Position.from_algebraic(request.square))
        return self.get_state()

    def make_move(self, request: MoveRequest) -> GameSnapshotResponse:
        """Make a move attempt. An illegal move simply returns the unchanged state."""
        self.game.attempt_move(
            Position.from_algebraic(request.from_square),
            Position.from_algebraic(request.to_square),
        )
        return self.get_state()

    def start_spin(self) -> GameSnapshotResponse:
        """Reels start turning. The UI animates for `spin_display_seconds` and then calls `finish_spin()`"""
        self.game.start_spin()
        return self.get_state()

    def finish_spin(self) -> GameSnapshotResponse:
        self.game.finish_spin()
        return self.get_state()

    def spin(self) -> GameSnapshotResponse:
        """Spin without waiting for an animation."""
        self.game.spin()
        return self.get_state()

    def end_turn(self) -> GameSnapshotResponse:
        self.game.end_turn_manually()
        return self.get_state()

    def get_state(self) -> GameSnapshotResponse:
        """Convert the current GameState into what the UI renders."""
        state = self.game.snapshot()
        selected = self.game.selected
        return GameSnapshotResponse(
            board=state.board.to_rows(),
            color_to_move=state.color_to_move,
            status=state.status,
            winner=state.winner,
            is_check=state.is_check,
            is_checkmate=state.is_checkmate,
            remaining_moves=dict(state.remaining_moves),
            has_spun=state.has_spun,
            spin_in_progress=state.spin_in_progress,
            slots=[piece_type.value for piece_type in state.slots],
            spin_display_seconds=SPIN_DISPLAY_SECONDS,
            selected_square=selected.to_algebraic() if selected else None,
            valid_moves=[square.to_algebraic() for square in self.game.valid_moves],
            can_move=self.game.has_any_legal_move_this_turn(),
        )
