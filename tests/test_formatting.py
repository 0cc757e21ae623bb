import numpy as np

from wealthmap.utils.formatting import format_currency, format_number, format_percentage
from wealthmap.utils.normalize import category_shares, clamp_score, herfindahl_index, round_half_up


def test_format_currency_tiers():
    assert format_currency(1_500_000_000) == "$1.5B"
    assert format_currency(2_500_000) == "$2.5M"
    assert format_currency(1_500_000) == "$1.5M"
    assert format_currency(950_000) == "$950K"
    assert format_currency(999) == "$999"
    assert format_currency(950) == "$950"
    assert format_currency(12.5) == "$12.5"


def test_format_percentage_and_number():
    assert format_percentage(0.055) == "5.5%"
    assert format_percentage(-0.1) == "-10.0%"
    assert format_number(1234567) == "1,234,567"
    assert format_number(3.0) == "3"


def test_round_half_up_matches_js_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.125, 2) == 0.13
    assert clamp_score(100.4) == 100
    assert clamp_score(-3) == 0


def test_herfindahl_index():
    shares = category_shares(["a", "b", "a", "a"])
    assert np.allclose(shares, [0.75, 0.25])
    assert herfindahl_index(shares) == 0.625
    assert herfindahl_index(category_shares([])) == 0
