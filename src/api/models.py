"""Requests and Response models exchanged with the UI"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status

SquareName = str
PieceLetter = str


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    first_character = value[0]
    second_character = value[1]
    if not (first_character.isalpha() and second_character.isnumeric()):
        return False
    return "a" <= first_character <= "h" and "1" <= second_character <= "8"


# --- REQUEST MODELS ---
class SelectSquareRequest(BaseModel):
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class NewGameRequest(BaseModel):
    starting_position: Optional[str] = None
    color_to_move: Color = Color.WHITE

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        ranks = value.strip().split("/")
        if len(ranks) != 8:
            raise InvalidRequestError(
                "Piece placement must contain 8 ranks separated by '/'."
            )
        return value.strip()


# --- RESPONSE MODELS ---
class GameSnapshotResponse(BaseModel):
    """Everything the UI needs to draw the board, the reels and the buttons. It performs no rules logic itself."""

    board: list[list[Optional[PieceLetter]]]
    color_to_move: Color
    status: Status
    winner: Optional[Color]
    is_check: bool
    is_checkmate: bool
    remaining_moves: dict[PieceLetter, int]
    has_spun: bool
    spin_in_progress: bool
    slots: list[PieceLetter]
    spin_display_seconds: float
    selected_square: Optional[SquareName]
    valid_moves: list[SquareName]
    can_move: bool
