import pytest

from services.scanner.app.adjustments import adjust_quantity, exact_quantity, format_quantity, parse_amount
from services.scanner.app.schemas import Direction, RejectionReason

from .conftest import record


def test_increase_adds_amount():
    result = adjust_quantity(record("R-1", "Denim", 5, unit="meters"), Direction.INCREASE, 3)
    assert result.ok
    assert result.new_quantity == 8


def test_decrease_to_exactly_zero_is_allowed():
    result = adjust_quantity(record("R-1", "Denim", 10), Direction.DECREASE, 10)
    assert result.ok
    assert result.new_quantity == 0


def test_decrease_beyond_stock_is_rejected():
    result = adjust_quantity(record("R-1", "Denim", 10), Direction.DECREASE, 10.01)
    assert not result.ok
    assert result.reason is RejectionReason.INSUFFICIENT_STOCK
    assert result.new_quantity is None


def test_insufficient_stock_message_names_amount_unit_and_available():
    result = adjust_quantity(record("R-1", "Zip", 0, unit="pieces"), Direction.DECREASE, 1)
    assert result.reason is RejectionReason.INSUFFICIENT_STOCK
    assert result.message == "Cannot deduct 1 pieces. Only 0 pieces available."


def test_insufficient_stock_message_shows_unrounded_amounts():
    result = adjust_quantity(record("R-1", "Denim", 10), Direction.DECREASE, 10.004)
    assert result.reason is RejectionReason.INSUFFICIENT_STOCK
    assert result.message == "Cannot deduct 10.004 meters. Only 10 meters available."


def test_unit_defaults_to_meters():
    result = adjust_quantity(record("R-1", "Denim", 2, unit=None), Direction.DECREASE, 2.5)
    assert "meters" in result.message


@pytest.mark.parametrize("amount", [None, "", "abc", 0, -1, "-2", "nan", float("inf"), True])
def test_invalid_amounts_are_rejected(amount):
    result = adjust_quantity(record("R-1", "Denim", 10), Direction.INCREASE, amount)
    assert not result.ok
    assert result.reason is RejectionReason.INVALID_AMOUNT


def test_string_amount_from_form_input_is_parsed():
    result = adjust_quantity(record("R-1", "Denim", 10), "decrease", " 2.5 ")
    assert result.ok
    assert result.new_quantity == 7.5


def test_record_is_not_mutated():
    rec = record("R-1", "Denim", 10)
    adjust_quantity(rec, Direction.DECREASE, 4)
    assert rec.quantity == 10


def test_successful_results_never_go_negative():
    rec = record("R-1", "Denim", 0.3)
    for amount in (0.1, 0.2, 0.3, 0.30000000000000004):
        result = adjust_quantity(rec, Direction.DECREASE, amount)
        if result.ok:
            assert result.new_quantity >= 0


def test_no_rounding_is_applied():
    result = adjust_quantity(record("R-1", "Denim", 1.005), Direction.INCREASE, 0.001)
    assert result.new_quantity == 1.005 + 0.001


def test_helpers():
    assert parse_amount("3") == 3.0
    assert parse_amount(0.5) == 0.5
    assert format_quantity(25.5) == "25.5"
    assert format_quantity(10.0) == "10"
    assert format_quantity(0) == "0"
    assert exact_quantity(10.004) == "10.004"
    assert exact_quantity(3.0) == "3"
