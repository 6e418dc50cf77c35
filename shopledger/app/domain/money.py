"""
Money helpers.

All ledger arithmetic runs on Decimal. Amounts entering from the outside
world go through the lenient parser, which never raises: anything it cannot
read becomes zero and a warning is logged on the ``shopledger.money`` logger.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Any, List, Optional, Tuple

logger = logging.getLogger("shopledger.money")

ZERO = Decimal("0")
CURRENCY_SYMBOL = "₹"
_HALF = Decimal("0.5")
_CENTS = Decimal("0.01")


def coerce_amount(value: Any) -> Tuple[Decimal, bool]:
    """
    Read a money amount without raising.

    Returns:
        (amount, coerced) where coerced is True when the input was replaced by zero
    """
    if value is None or isinstance(value, bool):
        return ZERO, True

    if isinstance(value, Decimal):
        return (value, False) if value.is_finite() else (ZERO, True)

    if isinstance(value, (int, float)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            return ZERO, True
        return (amount, False) if amount.is_finite() else (ZERO, True)

    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return ZERO, True
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return ZERO, True
        return (amount, False) if amount.is_finite() else (ZERO, True)

    return ZERO, True


def parse_amount(value: Any, field: str = "amount", coercions: Optional[List[dict]] = None) -> Decimal:
    """
    Lenient amount parser; logs a warning whenever input is coerced to zero.

    When a coercions list is passed, each coercion is also appended to it so
    the caller can audit it.
    """
    amount, coerced = coerce_amount(value)
    if coerced:
        record = {"field": field, "raw_value": repr(value)}
        logger.warning("Coerced unreadable %s to 0", field, extra=record)
        if coercions is not None:
            coercions.append(record)
    return amount


def exceeds_currency_scale(amount: Decimal) -> bool:
    """True when amount has non-zero digits past the paise; ``10.500`` is fine, ``10.005`` is not."""
    return Decimal(amount) != Decimal(amount).quantize(_CENTS)


def round_currency(value: Decimal) -> Decimal:
    """
    Round to whole currency units, halves toward positive infinity.

    2.5 -> 3, -2.5 -> -2
    """
    return (Decimal(value) + _HALF).to_integral_value(rounding=ROUND_FLOOR)


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(value: Decimal) -> str:
    """
    Format an amount with the rupee symbol and en-IN digit grouping.

    Whole amounts print without paise: ``₹12,34,567``; others keep two
    decimals: ``₹1,000.50``.
    """
    amount = Decimal(value)
    sign = "-" if amount < 0 else ""
    amount = abs(amount).quantize(_CENTS)
    whole, _, fraction = f"{amount:f}".partition(".")
    text = _group_indian(whole)
    if fraction and fraction.strip("0"):
        text = f"{text}.{fraction}"
    return f"{sign}{CURRENCY_SYMBOL}{text}"
