"""
Unit tests for money parsing, rounding and formatting.
"""

import logging
import pytest
from decimal import Decimal

from shopledger.app.domain.money import exceeds_currency_scale, parse_amount, round_currency, format_currency


@pytest.mark.parametrize("raw, expected", [
    ("1,000", Decimal("1000")),
    (" 250.50 ", Decimal("250.50")),
    (1200, Decimal("1200")),
    (99.5, Decimal("99.5")),
    (Decimal("10"), Decimal("10")),
])
def test_parse_amount_reads_numbers_and_strings(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "NaN", float("inf"), True, [1]])
def test_parse_amount_coerces_garbage_to_zero(raw, caplog):
    coercions = []
    with caplog.at_level(logging.WARNING, logger="shopledger.money"):
        assert parse_amount(raw, "amount", coercions) == 0

    assert len(coercions) == 1
    assert coercions[0]["field"] == "amount"
    assert "Coerced unreadable amount" in caplog.text


def test_round_currency_matches_half_up_toward_positive_infinity():
    assert round_currency(Decimal("2.5")) == 3
    assert round_currency(Decimal("2.49")) == 2
    assert round_currency(Decimal("-2.5")) == -2


def test_format_currency_uses_indian_grouping():
    assert format_currency(Decimal("1234567")) == "₹12,34,567"
    assert format_currency(Decimal("1000")) == "₹1,000"
    assert format_currency(Decimal("999")) == "₹999"
    assert format_currency(Decimal("1000.5")) == "₹1,000.50"
    assert format_currency(Decimal("-1500")) == "-₹1,500"


@pytest.mark.parametrize("amount, expected", [
    (Decimal("10"), False),
    (Decimal("10.5"), False),
    (Decimal("10.500"), False),
    (Decimal("333.335"), True),
    (Decimal("0.001"), True),
])
def test_exceeds_currency_scale(amount, expected):
    assert exceeds_currency_scale(amount) is expected
