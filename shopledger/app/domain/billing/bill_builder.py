"""
Bill builder.

Bill numbers, default due dates and the auto-drafted line items for a new
monthly bill.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Iterable, List

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel

from shopledger.app.core.config import settings
from shopledger.app.domain import labels
from shopledger.app.domain.money import exceeds_currency_scale, parse_amount
from shopledger.app.domain.rent.escalation import (
    EscalationPolicy, compute_rent_increase, is_increase_month
)
from shopledger.app.core.exceptions import LedgerValidationError


class DraftItem(BaseModel):
    description: str
    amount: Decimal


def generate_bill_number(existing_count: int, today: Optional[date] = None) -> str:
    """BILL{yy}{mm}{nnn}; nnn is one past the count of existing bills."""
    today = today or date.today()
    return f"BILL{today:%y}{today:%m}{existing_count + 1:03d}"


def default_due_date(bill_date: date) -> date:
    """Bills fall due on a fixed day of the bill date's month."""
    return bill_date.replace(day=settings.default_due_day)


def latest_unpaid_remaining(unit_bills: Iterable) -> Decimal:
    """Remaining balance of the most recently created bill that is still open."""
    unpaid = [bill for bill in unit_bills if parse_amount(bill.remaining, "remaining") > 0]
    if not unpaid:
        return Decimal(0)
    latest = max(unpaid, key=lambda bill: bill.created_at)
    return parse_amount(latest.remaining, "remaining")


def draft_bill_items(
    unit,
    unit_bills: Iterable,
    bill_date: date,
    today: Optional[date] = None,
    policy: Optional[EscalationPolicy] = None
) -> List[DraftItem]:
    """
    Draft the default line items for a unit's next bill.

    Order: previous dues (if any), last month's rent, rent increase (increase
    months only), electricity.
    """
    today = today or date.today()
    policy = policy or EscalationPolicy()
    items: List[DraftItem] = []

    previous_dues = latest_unpaid_remaining(unit_bills)
    if previous_dues > 0:
        items.append(DraftItem(description=labels.PREVIOUS_DUES, amount=previous_dues))

    previous_month = bill_date.replace(day=1) - relativedelta(months=1)
    items.append(DraftItem(
        description=labels.MONTH_RENT.format(month=labels.month_label(previous_month.year, previous_month.month)),
        amount=parse_amount(unit.monthly_rent, "monthly_rent"),
    ))

    info = compute_rent_increase(unit, today, policy)
    if is_increase_month(unit, info, bill_date, policy) and info.increase_amount > 0:
        items.append(DraftItem(
            description=labels.RENT_INCREASE.format(
                percentage=labels.percentage_label(unit.yearly_increase_percentage),
                period=policy.increase_period_months,
            ),
            amount=info.increase_amount,
        ))

    items.append(DraftItem(
        description=labels.ELECTRICITY_BILL,
        amount=parse_amount(unit.electricity_rate, "electricity_rate"),
    ))
    return items


def validate_bill_items(items: List) -> Decimal:
    """
    Check line items and return their total.

    Raises:
        LedgerValidationError: No items, a blank description, or an amount that is
            not positive or has more than two decimal places
    """
    if not items:
        raise LedgerValidationError("At least one item is required", field="items")

    for index, item in enumerate(items):
        description = (item.description or "").strip()
        amount = parse_amount(item.amount, "amount")
        if not description or amount <= 0 or exceeds_currency_scale(amount):
            raise LedgerValidationError(
                "All items must have valid description and amount",
                field="items",
                details={"index": index},
            )

    return sum((parse_amount(item.amount, "amount") for item in items), Decimal(0))
