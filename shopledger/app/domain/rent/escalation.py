"""
Rent Escalation Calculator.

Rent grows by the unit's yearly percentage once every increase period
(11 months by default), compounding when several periods have elapsed.
Months are counted as fixed 30-day blocks.

The calculator is pure and never raises: missing or malformed unit data
yields a "no increase" result and a warning on the ``shopledger.rent`` logger.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from shopledger.app.core.config import settings
from shopledger.app.domain.money import ZERO, round_currency, parse_amount

logger = logging.getLogger("shopledger.rent")

DAYS_PER_YEAR = 365


class EscalationPolicy(BaseModel):
    """Escalation constants; defaults come from settings."""
    increase_period_months: int = Field(default_factory=lambda: settings.rent_increase_period_months, gt=0)
    days_per_month: int = Field(default_factory=lambda: settings.days_per_month, gt=0)


class RentIncreaseInfo(BaseModel):
    """Result of an escalation check for one rental unit."""
    should_increase: bool
    new_rent: Decimal
    increase_amount: Decimal
    periods_elapsed: int
    next_increase_date: date
    months_since_update: int = 0
    years_completed: int = 0


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def months_between(start: date, end: date, policy: Optional[EscalationPolicy] = None) -> int:
    """Whole 30-day months from start to end (floor, negative when end precedes start)."""
    policy = policy or EscalationPolicy()
    return (_as_date(end) - _as_date(start)).days // policy.days_per_month


def _no_increase(unit, today: date) -> RentIncreaseInfo:
    rent = getattr(unit, "monthly_rent", None) if unit is not None else None
    return RentIncreaseInfo(
        should_increase=False,
        new_rent=parse_amount(rent, "monthly_rent") if rent is not None else ZERO,
        increase_amount=ZERO,
        periods_elapsed=0,
        next_increase_date=today,
    )


def compute_rent_increase(
    unit,
    today: Optional[date] = None,
    policy: Optional[EscalationPolicy] = None
) -> RentIncreaseInfo:
    """
    Decide whether a unit's rent is due for escalation.

    Args:
        unit: Anything exposing monthly_rent, rent_start_date, last_rent_update
            and yearly_increase_percentage
        today: Evaluation date (defaults to the local current date)
        policy: Escalation constants

    Returns:
        RentIncreaseInfo with the rounded new rent and accumulated increase
    """
    today = _as_date(today) if today is not None else date.today()
    policy = policy or EscalationPolicy()

    missing = [
        field for field in ("rent_start_date", "last_rent_update", "yearly_increase_percentage")
        if unit is None or getattr(unit, field, None) is None
    ]
    if missing:
        logger.warning(
            "Missing rental unit data for rent calculation",
            extra={"unit_id": getattr(unit, "id", None), "missing_fields": missing},
        )
        return _no_increase(unit, today)

    try:
        rent_start = _as_date(unit.rent_start_date)
        last_update = _as_date(unit.last_rent_update)
        rent = parse_amount(unit.monthly_rent, "monthly_rent")
        percentage = parse_amount(unit.yearly_increase_percentage, "yearly_increase_percentage")

        months_since_update = months_between(last_update, today, policy)
        years_completed = (today - rent_start).days // DAYS_PER_YEAR
        should_increase = months_since_update >= policy.increase_period_months

        periods = 0
        new_rent = rent
        increase_amount = ZERO
        if should_increase:
            periods = months_since_update // policy.increase_period_months
            for _ in range(periods):
                increase = new_rent * percentage / Decimal(100)
                increase_amount += increase
                new_rent += increase
            new_rent = round_currency(new_rent)
            increase_amount = round_currency(increase_amount)

        completed_periods = months_since_update // policy.increase_period_months
        next_increase_date = rent_start + relativedelta(
            months=(completed_periods + 1) * policy.increase_period_months
        )

        return RentIncreaseInfo(
            should_increase=should_increase,
            new_rent=new_rent,
            increase_amount=increase_amount,
            periods_elapsed=periods,
            next_increase_date=next_increase_date,
            months_since_update=months_since_update,
            years_completed=years_completed,
        )
    except Exception:
        logger.warning(
            "Rent calculation failed; reporting no increase",
            extra={"unit_id": getattr(unit, "id", None)},
            exc_info=True,
        )
        return _no_increase(unit, today)


def original_rent(unit, today: Optional[date] = None) -> Decimal:
    """
    Estimate the rent the unit started at.

    Discounts the current rent back by one yearly increase per completed
    365-day year since the rent start date.
    """
    today = _as_date(today) if today is not None else date.today()
    rent = parse_amount(getattr(unit, "monthly_rent", None), "monthly_rent")
    start = getattr(unit, "rent_start_date", None)
    percentage = getattr(unit, "yearly_increase_percentage", None)
    if start is None or percentage is None:
        return round_currency(rent)

    years_completed = (today - _as_date(start)).days // DAYS_PER_YEAR
    factor = Decimal(1) + parse_amount(percentage, "yearly_increase_percentage") / Decimal(100)
    if factor <= 0:
        return round_currency(rent)

    for _ in range(max(years_completed, 0)):
        rent = rent / factor
    return round_currency(rent)


def is_increase_month(
    unit,
    info: RentIncreaseInfo,
    bill_date: date,
    policy: Optional[EscalationPolicy] = None
) -> bool:
    """True when a bill dated bill_date falls in an increase-eligible month."""
    policy = policy or EscalationPolicy()
    if not info.should_increase:
        return False
    last_update = getattr(unit, "last_rent_update", None) or getattr(unit, "rent_start_date", None)
    if last_update is None:
        return False
    return months_between(last_update, bill_date, policy) >= policy.increase_period_months


def apply_rent_escalation(
    unit,
    bill_date: date,
    today: Optional[date] = None,
    policy: Optional[EscalationPolicy] = None
) -> Optional[RentIncreaseInfo]:
    """
    Raise the unit's rent when a bill lands in an increase month.

    Mutates unit.monthly_rent and unit.last_rent_update in place; the caller
    owns the transaction.

    Returns:
        The applied RentIncreaseInfo, or None when nothing changed
    """
    today = _as_date(today) if today is not None else date.today()
    policy = policy or EscalationPolicy()

    info = compute_rent_increase(unit, today, policy)
    if not is_increase_month(unit, info, bill_date, policy):
        return None

    previous_rent = unit.monthly_rent
    unit.monthly_rent = info.new_rent
    unit.last_rent_update = today
    logger.info(
        "Rent escalated",
        extra={
            "unit_id": getattr(unit, "id", None),
            "previous_rent": str(previous_rent),
            "new_rent": str(info.new_rent),
            "periods": info.periods_elapsed,
        },
    )
    return info
