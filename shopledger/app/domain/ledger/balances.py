"""
Account balance aggregation.

Balances are never stored. Each read recomputes from every record:

    balance(acct) = payments(acct) + income(acct) - expenses(acct) - deposits(acct)

Every amount goes through the lenient parser, so a malformed row counts as
zero (and logs a warning) instead of breaking the whole summary.
"""

from decimal import Decimal
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field

from shopledger.app.domain.money import ZERO, parse_amount
from shopledger.app.models.ledger_enums import AccountBucket, METHOD_BUCKETS

COMBINED_BUCKETS = (AccountBucket.CASH, AccountBucket.ONLINE, AccountBucket.FAMILY)


class LedgerRecords(BaseModel):
    """Everything the aggregation reads; ORM rows or any objects with the same attributes."""
    payments: List[Any] = Field(default_factory=list)
    incomes: List[Any] = Field(default_factory=list)
    expenses: List[Any] = Field(default_factory=list)
    deposits: List[Any] = Field(default_factory=list)


class AccountBalance(BaseModel):
    account: AccountBucket
    business_payments: Decimal = ZERO
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    deposits: Decimal = ZERO
    balance: Decimal = ZERO


class AccountSummary(BaseModel):
    cash: AccountBalance
    online: AccountBalance
    family: AccountBalance
    personal: AccountBalance
    combined_total: Decimal


def bucket_for(method) -> Optional[AccountBucket]:
    value = getattr(method, "value", method)
    return METHOD_BUCKETS.get(value)


def _sum(records: Iterable, method_attr: str, account: AccountBucket, exclude_id: Optional[str] = None) -> Decimal:
    total = ZERO
    for record in records:
        if exclude_id is not None and getattr(record, "id", None) == exclude_id:
            continue
        if bucket_for(getattr(record, method_attr, None)) != account:
            continue
        total += parse_amount(record.amount, "amount")
    return total


def compute_account_balance(
    account: AccountBucket,
    records: LedgerRecords,
    exclude_expense_id: Optional[str] = None,
    exclude_income_id: Optional[str] = None,
    exclude_deposit_id: Optional[str] = None
) -> AccountBalance:
    """
    Aggregate one account bucket.

    Advance payments count like any other payment. The exclude_* ids drop a
    single record, for re-validating an entry that is being edited.
    """
    account = AccountBucket(account)
    business_payments = _sum(records.payments, "method", account)
    income = _sum(records.incomes, "payment_method", account, exclude_income_id)
    expenses = _sum(records.expenses, "payment_method", account, exclude_expense_id)
    deposits = _sum(records.deposits, "from_account", account, exclude_deposit_id)

    return AccountBalance(
        account=account,
        business_payments=business_payments,
        income=income,
        expenses=expenses,
        deposits=deposits,
        balance=business_payments + income - expenses - deposits,
    )


def compute_account_summary(records: LedgerRecords) -> AccountSummary:
    """All four buckets; personal never joins the combined total."""
    balances = {bucket: compute_account_balance(bucket, records) for bucket in AccountBucket}
    combined = sum((balances[bucket].balance for bucket in COMBINED_BUCKETS), ZERO)
    return AccountSummary(
        cash=balances[AccountBucket.CASH],
        online=balances[AccountBucket.ONLINE],
        family=balances[AccountBucket.FAMILY],
        personal=balances[AccountBucket.PERSONAL],
        combined_total=combined,
    )


def available_balance(
    account: AccountBucket,
    records: LedgerRecords,
    exclude_expense_id: Optional[str] = None,
    exclude_income_id: Optional[str] = None,
    exclude_deposit_id: Optional[str] = None
) -> Decimal:
    """Money left in an account, ignoring the record currently being edited."""
    return compute_account_balance(
        account,
        records,
        exclude_expense_id=exclude_expense_id,
        exclude_income_id=exclude_income_id,
        exclude_deposit_id=exclude_deposit_id,
    ).balance
