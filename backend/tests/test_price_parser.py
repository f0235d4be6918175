"""Test price token parsing."""
import pytest

from receipt_ocr.processors.text.price_parser import parse_price_value
from receipt_ocr.utils.float_precision import round_money, sum_money


@pytest.mark.parametrize("token, expected", [
    ("", 0.0),
    ("-", 0.0),
    ("abc", 0.0),
    ("199", 1.99),
    ("-199", -1.99),
    ("4,50", 4.50),
    ("£3.99", 3.99),
    ("1.99", 1.99),
    ("-£4.50", -4.50),
    ("£-199", 1.99),
    ("$ 12.00", 12.00),
    ("€7,25", 7.25),
])
def test_documented_tokens(token, expected):
    assert parse_price_value(token) == pytest.approx(expected)


@pytest.mark.parametrize("amount", ["0.99", "5.00", "12.34", "999.99"])
def test_pound_prefixed_amounts_round_trip(amount):
    assert parse_price_value(f"£{amount}") == pytest.approx(float(amount))


def test_minor_unit_boundary_is_three_digits():
    assert parse_price_value("12") == pytest.approx(12.0)
    assert parse_price_value("100") == pytest.approx(1.00)
    assert parse_price_value("-450") == pytest.approx(-4.50)


def test_large_positive_amounts_are_scaled_down():
    # Unscaled minor units that still carry a separator
    assert parse_price_value("12999.00") == pytest.approx(129.99)
    # Known false positive: a genuine 1200.00 is read as 12.00
    assert parse_price_value("£1200.00") == pytest.approx(12.00)
    assert parse_price_value("1000.00") == pytest.approx(1000.00)


def test_large_negative_amounts_are_never_scaled():
    assert parse_price_value("-1500.00") == pytest.approx(-1500.00)


def test_sign_comes_from_the_raw_token():
    # A minus after the currency symbol does not make the token negative
    assert parse_price_value("£-12345.00") == pytest.approx(-123.45)
    assert parse_price_value(" -12345.00") == pytest.approx(-12345.00)


def test_garbage_around_digits_is_stripped():
    assert parse_price_value("3.99A") == pytest.approx(3.99)
    assert parse_price_value("1.2.3") == pytest.approx(1.2)


def test_round_money_is_half_up():
    assert round_money(0.125) == 0.13
    assert round_money(-0.125) == -0.13
    assert round_money(2.675) == 2.68
    assert round_money(float("nan")) == 0.0


def test_sum_money_avoids_float_drift():
    assert sum_money([0.1, 0.2]) == 0.3
    assert sum_money([1.20, 0.95, 1.20, 0.95]) == 4.30
    assert sum_money([]) == 0.0
