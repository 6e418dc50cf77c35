"""
Bill Penalty Calculator.

Classifies an unpaid bill relative to its due date:

    d = whole days past due (floor)
    remaining <= 0        -> none
    d < -window           -> none
    -window <= d <= -1    -> upcoming
    0 <= d <= grace       -> overdue, no money charged
    d > grace             -> penalty of rate * remaining per started block

Pure and idempotent; "now" is always injectable.
"""

import logging
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from shopledger.app.core.config import settings
from shopledger.app.domain import labels
from shopledger.app.domain.money import ZERO, round_currency, parse_amount, format_currency
from shopledger.app.models.ledger_enums import WarningType

logger = logging.getLogger("shopledger.billing")

SECONDS_PER_DAY = 86400


class PenaltyPolicy(BaseModel):
    """Penalty constants; defaults come from settings."""
    penalty_rate: Decimal = Field(default_factory=lambda: Decimal(settings.penalty_rate), ge=0)
    grace_period_days: int = Field(default_factory=lambda: settings.grace_period_days, ge=0)
    penalty_block_days: int = Field(default_factory=lambda: settings.penalty_block_days, gt=0)
    upcoming_window_days: int = Field(default_factory=lambda: settings.upcoming_window_days, ge=0)


class PenaltyInfo(BaseModel):
    """Penalty state of a bill at a point in time."""
    has_penalty: bool
    penalty_amount: Decimal
    overdue_days: int
    warning_type: WarningType
    message: str
    total_due: Decimal


def days_past_due(due_date: date, now) -> int:
    """Whole days from the due date's midnight to now, floored."""
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    if not isinstance(now, datetime):
        now = datetime.combine(now, time.min)
    elapsed = now - datetime.combine(due_date, time.min)
    return math.floor(elapsed.total_seconds() / SECONDS_PER_DAY)


def compute_penalty(
    bill,
    now=None,
    policy: Optional[PenaltyPolicy] = None
) -> PenaltyInfo:
    """
    Compute the late-payment penalty for a bill.

    Args:
        bill: Anything exposing due_date and remaining
        now: date (taken as midnight) or naive local datetime; defaults to now
        policy: Penalty constants

    Returns:
        PenaltyInfo; total_due is remaining plus any penalty
    """
    now = now if now is not None else datetime.now()
    policy = policy or PenaltyPolicy()
    remaining = parse_amount(getattr(bill, "remaining", None), "remaining")

    if remaining <= 0:
        return _none(remaining)

    due_date = getattr(bill, "due_date", None)
    if due_date is None:
        logger.warning("Bill has no due date; reporting no penalty", extra={"bill_id": getattr(bill, "id", None)})
        return _none(remaining)

    d = days_past_due(due_date, now)

    if d < -policy.upcoming_window_days:
        return _none(remaining)

    if d < 0:
        return PenaltyInfo(
            has_penalty=False,
            penalty_amount=ZERO,
            overdue_days=0,
            warning_type=WarningType.UPCOMING,
            message=labels.UPCOMING_MESSAGE.format(days_left=abs(d)),
            total_due=remaining,
        )

    if d <= policy.grace_period_days:
        return PenaltyInfo(
            has_penalty=False,
            penalty_amount=ZERO,
            overdue_days=d,
            warning_type=WarningType.OVERDUE,
            message=labels.OVERDUE_MESSAGE,
            total_due=remaining,
        )

    blocks = (d - policy.grace_period_days) // policy.penalty_block_days + 1
    penalty = round_currency(remaining * policy.penalty_rate * blocks)
    total_due = remaining + penalty
    return PenaltyInfo(
        has_penalty=True,
        penalty_amount=penalty,
        overdue_days=d,
        warning_type=WarningType.PENALTY,
        message=labels.PENALTY_MESSAGE.format(
            overdue_days=d,
            penalty=format_currency(penalty),
            total_due=format_currency(total_due),
        ),
        total_due=total_due,
    )


def _none(remaining: Decimal) -> PenaltyInfo:
    return PenaltyInfo(
        has_penalty=False,
        penalty_amount=ZERO,
        overdue_days=0,
        warning_type=WarningType.NONE,
        message="",
        total_due=max(remaining, ZERO),
    )
