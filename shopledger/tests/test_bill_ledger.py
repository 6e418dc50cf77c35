"""
Unit tests for bill balance arithmetic.
"""

import pytest
from decimal import Decimal
from types import SimpleNamespace

from shopledger.app.core.exceptions import ArithmeticInconsistencyError
from shopledger.app.domain.ledger.bill_ledger import (
    BillBalance, apply_payment, reverse_payment, derive_status, assert_consistent
)
from shopledger.app.models.ledger_enums import BillStatus


def test_partial_payment_then_reversal():
    start = BillBalance(total=Decimal("1000"), paid=Decimal("0"))

    after_first = apply_payment(start, Decimal("400"))
    assert after_first.paid == Decimal("400")
    assert after_first.remaining == Decimal("600")
    assert after_first.status == BillStatus.PARTIAL

    after_second = apply_payment(after_first, Decimal("600"))
    assert after_second.remaining == 0
    assert after_second.status == BillStatus.PAID

    reversed_second = reverse_payment(after_second, Decimal("600"))
    assert reversed_second.paid == Decimal("400")
    assert reversed_second.remaining == Decimal("600")
    assert reversed_second.status == BillStatus.PARTIAL


@pytest.mark.parametrize("total, paid, status", [
    ("1000", "0", BillStatus.PENDING),
    ("1500", "200", BillStatus.PARTIAL),
    ("999.99", "0.01", BillStatus.PARTIAL),
])
@pytest.mark.parametrize("share", ["0.01", "0.5", "1"])
def test_apply_then_reverse_restores_balance(total, paid, status, share):
    start = BillBalance(total=Decimal(total), paid=Decimal(paid), status=status)
    # From one paisa up to exactly the remaining balance.
    amount = max((start.remaining * Decimal(share)).quantize(Decimal("0.01")), Decimal("0.01"))

    applied = apply_payment(start, amount)
    round_trip = reverse_payment(applied, amount)

    assert round_trip.paid == start.paid
    assert round_trip.remaining == start.remaining
    assert round_trip.status == start.status


def test_reversing_last_payment_returns_to_pending():
    paid = apply_payment(BillBalance(total=Decimal("500"), paid=Decimal("0")), Decimal("500"))
    assert reverse_payment(paid, Decimal("500")).status == BillStatus.PENDING


def test_overpayment_marks_paid():
    balance = apply_payment(BillBalance(total=Decimal("100"), paid=Decimal("0")), Decimal("150"))
    assert balance.remaining == Decimal("-50")
    assert balance.status == BillStatus.PAID


@pytest.mark.parametrize("total, paid, expected", [
    ("1000", "0", BillStatus.PENDING),
    ("1000", "400", BillStatus.PARTIAL),
    ("1000", "1000", BillStatus.PAID),
    ("800", "1000", BillStatus.PAID),
])
def test_derive_status(total, paid, expected):
    assert derive_status(Decimal(total), Decimal(paid)) == expected


def test_inconsistent_bill_is_rejected():
    bill = SimpleNamespace(id="b1", total=Decimal("1000"), paid=Decimal("400"), remaining=Decimal("700"))

    with pytest.raises(ArithmeticInconsistencyError) as exc_info:
        assert_consistent(bill)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details["bill_id"] == "b1"
