"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

from typing import Callable, Sequence, TypeVar

import pytest

from src.core.shared_types import PieceType

T = TypeVar("T")


class ScriptedRandom:
    """
    Stand-in for random.Random: `choice()` hands out the scripted values in order.

    Fails loudly if a scripted value was not among the options (the reels may only show pieces that are alive),
    or if more draws are requested than were scripted.
    """

    def __init__(self, picks: Sequence[PieceType]) -> None:
        self._picks = list(picks)
        self.calls = 0
        self.options_seen: list[list[PieceType]] = []

    def choice(self, seq: Sequence[T]) -> T:
        if self.calls >= len(self._picks):
            raise AssertionError("More draws requested than scripted")
        pick = self._picks[self.calls]
        self.calls += 1
        self.options_seen.append(list(seq))  # type: ignore[arg-type]
        assert pick in seq, f"{pick} is not one of the options {seq}"
        return pick  # type: ignore[return-value]


@pytest.fixture
def scripted_random() -> Callable[[Sequence[PieceType]], ScriptedRandom]:
    """Call the inner function with the piece types the reels should show"""

    def _create(picks: Sequence[PieceType]) -> ScriptedRandom:
        return ScriptedRandom(picks)

    return _create
