# tests/test_helpers.py
import math

import pytest

from utils.helpers import (
    format_currency, format_currency_full, format_percentage, round_currency,
    safe_divide, clamp, budget_range
)


def test_format_currency():
    assert format_currency(2_550_312.5) == "$2.55M"
    assert format_currency(359_225) == "$359K"
    assert format_currency(950) == "$950"
    assert format_currency_full(339_791.67) == "$339,792"
    assert format_currency_full(1234.5, thousands_sep=False) == "$1235"
    assert format_percentage(0.153) == "15.3%"


def test_round_currency_half_up():
    assert round_currency(2.5) == 3
    assert round_currency(764.53) == 765
    assert round_currency(1_234_567, increment=1000) == 1_235_000
    assert round_currency(float("nan")) == 0
    assert round_currency(None) == 0


def test_safe_divide_and_clamp():
    assert safe_divide(10, 4) == 2.5
    assert safe_divide(10, 0) == 0.0
    assert safe_divide(10, 0, default=math.inf) == math.inf
    assert clamp(12, 0, 10) == 10
    assert clamp(-1, 0, 10) == 0


def test_budget_range():
    low, high = budget_range(100_000)
    assert low == pytest.approx(85_000)
    assert high == pytest.approx(115_000)
