"""Tests for the numeric input gate."""

import pytest

from macro_budget.services.validation import accept_input


@pytest.mark.parametrize("raw", ["", "0", "7", "270", "007", "12345678901234"])
def test_accepts_empty_and_whole_numbers(raw: str) -> None:
    assert accept_input(raw)


@pytest.mark.parametrize(
    "raw", ["12.5", "-1", "+1", "1e3", "abc", " 12", "12 ", "1,000", "١٢"]
)
def test_rejects_everything_else(raw: str) -> None:
    assert not accept_input(raw)
