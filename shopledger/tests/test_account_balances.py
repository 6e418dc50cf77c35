"""
Unit tests for account balance aggregation.
"""

from decimal import Decimal
from types import SimpleNamespace

from shopledger.app.domain.ledger.balances import (
    LedgerRecords, compute_account_balance, compute_account_summary, available_balance
)
from shopledger.app.models.ledger_enums import AccountBucket, PaymentMethod, FamilyPaymentMethod, DepositSource


def payment(amount, method, is_advance=False):
    return SimpleNamespace(amount=amount, method=method, is_advance=is_advance)


def entry(id, amount, payment_method):
    return SimpleNamespace(id=id, amount=amount, payment_method=payment_method)


def deposit(id, amount, from_account):
    return SimpleNamespace(id=id, amount=amount, from_account=from_account)


def test_cash_balance_aggregates_all_sources():
    records = LedgerRecords(
        payments=[payment(Decimal("5000"), PaymentMethod.CASH)],
        incomes=[entry("i1", Decimal("1000"), FamilyPaymentMethod.CASH)],
        expenses=[entry("e1", Decimal("2000"), FamilyPaymentMethod.CASH)],
        deposits=[deposit("d1", Decimal("1000"), DepositSource.CASH)],
    )

    cash = compute_account_balance(AccountBucket.CASH, records)

    assert cash.business_payments == Decimal("5000")
    assert cash.income == Decimal("1000")
    assert cash.expenses == Decimal("2000")
    assert cash.deposits == Decimal("1000")
    assert cash.balance == Decimal("3000")


def test_advance_payments_count():
    records = LedgerRecords(payments=[
        payment(Decimal("700"), PaymentMethod.ONLINE),
        payment(Decimal("300"), PaymentMethod.ONLINE, is_advance=True),
    ])
    assert compute_account_balance(AccountBucket.ONLINE, records).balance == Decimal("1000")


def test_personal_is_excluded_from_combined_total():
    records = LedgerRecords(
        payments=[
            payment(Decimal("1000"), PaymentMethod.CASH),
            payment(Decimal("500"), PaymentMethod.FAMILY_ACCOUNT),
        ],
        incomes=[entry("i1", Decimal("9000"), FamilyPaymentMethod.PERSONAL_ACCOUNT)],
        deposits=[deposit("d1", Decimal("2000"), DepositSource.PERSONAL_ACCOUNT)],
    )

    summary = compute_account_summary(records)

    assert summary.personal.balance == Decimal("7000")
    assert summary.family.balance == Decimal("500")
    assert summary.combined_total == Decimal("1500")


def test_malformed_amounts_count_as_zero():
    records = LedgerRecords(payments=[
        payment("not a number", PaymentMethod.CASH),
        payment("1,200", PaymentMethod.CASH),
    ])
    assert compute_account_balance(AccountBucket.CASH, records).balance == Decimal("1200")


def test_available_balance_skips_record_being_edited():
    records = LedgerRecords(
        payments=[payment(Decimal("5000"), PaymentMethod.CASH)],
        expenses=[entry("e1", Decimal("2000"), FamilyPaymentMethod.CASH)],
        deposits=[deposit("d1", Decimal("1000"), DepositSource.CASH)],
    )

    assert available_balance(AccountBucket.CASH, records) == Decimal("2000")
    assert available_balance(AccountBucket.CASH, records, exclude_deposit_id="d1") == Decimal("3000")
    assert available_balance(AccountBucket.CASH, records, exclude_expense_id="e1") == Decimal("4000")
