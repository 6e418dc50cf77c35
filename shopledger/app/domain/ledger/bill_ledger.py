"""
Bill balance arithmetic.

Pure functions carrying the running-balance rules for one bill:

    remaining == total - paid
    apply:   paid += amount; PAID if remaining <= 0 else PARTIAL
    reverse: paid -= amount; PENDING if paid <= 0 else PARTIAL

The ledger service wraps these in a locked transaction.
"""

from decimal import Decimal

from pydantic import BaseModel

from shopledger.app.core.exceptions import ArithmeticInconsistencyError
from shopledger.app.domain.money import parse_amount
from shopledger.app.models.ledger_enums import BillStatus


class BillBalance(BaseModel):
    total: Decimal
    paid: Decimal
    status: BillStatus = BillStatus.PENDING

    @property
    def remaining(self) -> Decimal:
        return self.total - self.paid

    @classmethod
    def of(cls, bill) -> "BillBalance":
        return cls(
            total=parse_amount(bill.total, "total"),
            paid=parse_amount(bill.paid, "paid"),
            status=bill.status,
        )


def derive_status(total: Decimal, paid: Decimal) -> BillStatus:
    """Status implied by totals alone (used when a bill's items change)."""
    if total - paid <= 0:
        return BillStatus.PAID
    if paid > 0:
        return BillStatus.PARTIAL
    return BillStatus.PENDING


def apply_payment(balance: BillBalance, amount: Decimal) -> BillBalance:
    paid = balance.paid + amount
    remaining = balance.total - paid
    status = BillStatus.PAID if remaining <= 0 else BillStatus.PARTIAL
    return BillBalance(total=balance.total, paid=paid, status=status)


def reverse_payment(balance: BillBalance, amount: Decimal) -> BillBalance:
    paid = balance.paid - amount
    status = BillStatus.PENDING if paid <= 0 else BillStatus.PARTIAL
    return BillBalance(total=balance.total, paid=paid, status=status)


def write_balance(bill, balance: BillBalance) -> None:
    """Copy a computed balance back onto a bill row."""
    bill.total = balance.total
    bill.paid = balance.paid
    bill.remaining = balance.remaining
    bill.status = balance.status


def assert_consistent(bill) -> None:
    """
    Raises:
        ArithmeticInconsistencyError: stored remaining != total - paid
    """
    total = parse_amount(bill.total, "total")
    paid = parse_amount(bill.paid, "paid")
    remaining = parse_amount(bill.remaining, "remaining")
    if remaining != total - paid:
        raise ArithmeticInconsistencyError(
            bill.id,
            details={"total": str(total), "paid": str(paid), "remaining": str(remaining)},
        )
