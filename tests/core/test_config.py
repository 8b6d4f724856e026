"""Unit tests for /src/core/config.py"""

import pytest

from src.core.config import read_slot_count
from src.core.exceptions import ConfigurationError


def test_default_slot_count() -> None:
    assert read_slot_count({}) == 3


def test_slot_count_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SLOT_CHESS_SLOT_COUNT", "5")
    assert read_slot_count() == 5


@pytest.mark.parametrize("value", ["0", "-2", "three", ""])
def test_invalid_slot_count_is_rejected(value: str) -> None:
    with pytest.raises(ConfigurationError):
        read_slot_count({"SLOT_CHESS_SLOT_COUNT": value})
