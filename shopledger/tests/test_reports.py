"""
Unit tests for report builders.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from shopledger.app.domain.ledger.balances import LedgerRecords
from shopledger.app.models.ledger_enums import FamilyPaymentMethod, PaymentMethod
from shopledger.app.services.reports import (
    latest_unpaid_bill, build_unit_performance, member_summary, monthly_summary
)


def bill(id, unit_id, bill_date, total, remaining):
    return SimpleNamespace(
        id=id, rental_unit_id=unit_id, bill_date=bill_date,
        total=Decimal(total), remaining=Decimal(remaining),
    )


def test_latest_unpaid_bill_ignores_settled_bills():
    bills = [
        bill("b1", "u1", date(2024, 1, 1), "1000", "200"),
        bill("b2", "u1", date(2024, 2, 1), "1000", "700"),
        bill("b3", "u1", date(2024, 3, 1), "1000", "0"),
    ]
    assert latest_unpaid_bill(bills).id == "b2"
    assert latest_unpaid_bill([bills[2]]) is None


def test_unit_performance_counts_only_latest_unpaid_bill():
    units = [SimpleNamespace(id="u1", name="Shop 1"), SimpleNamespace(id="u2", name="Shop 2")]
    bills = [
        bill("b1", "u1", date(2024, 1, 1), "1000", "1000"),
        bill("b2", "u1", date(2024, 2, 1), "2000", "1500"),
        bill("b3", "u2", date(2024, 2, 1), "500", "0"),
    ]
    payments = [
        SimpleNamespace(rental_unit_id="u1", amount=Decimal("500")),
        SimpleNamespace(rental_unit_id="u2", amount=Decimal("500")),
    ]

    rows = build_unit_performance(units, bills, payments)

    assert [row.name for row in rows] == ["Shop 1", "Shop 2"]
    assert rows[0].outstanding == Decimal("1500")
    assert rows[0].collection_rate == Decimal("16.67")
    assert rows[1].outstanding == 0
    assert rows[1].collection_rate == Decimal("100.00")


def test_member_summary_skips_personal_income_and_idle_members():
    members = [SimpleNamespace(id="m1", name="Asha"), SimpleNamespace(id="m2", name="Ravi")]
    records = LedgerRecords(
        incomes=[
            SimpleNamespace(received_by="Asha", amount=Decimal("3000"), payment_method=FamilyPaymentMethod.CASH),
            SimpleNamespace(received_by="Asha", amount=Decimal("9000"), payment_method=FamilyPaymentMethod.PERSONAL_ACCOUNT),
        ],
        expenses=[
            SimpleNamespace(paid_by="Asha", amount=Decimal("1200"), payment_method=FamilyPaymentMethod.ONLINE),
        ],
    )

    rows = member_summary(members, records)

    assert len(rows) == 1
    assert rows[0].total_income == Decimal("3000")
    assert rows[0].income_count == 1
    assert rows[0].total_expenses == Decimal("1200")


def test_monthly_summary_newest_first():
    records = LedgerRecords(
        payments=[
            SimpleNamespace(date=date(2024, 1, 5), amount=Decimal("10000"), method=PaymentMethod.CASH),
            SimpleNamespace(date=date(2024, 2, 5), amount=Decimal("8000"), method=PaymentMethod.ONLINE),
        ],
        expenses=[
            SimpleNamespace(date=date(2024, 2, 10), amount=Decimal("3000"), payment_method=FamilyPaymentMethod.CASH),
        ],
    )

    rows = monthly_summary(records)

    assert [row.month for row in rows] == ["February 2024", "January 2024"]
    assert rows[0].net == Decimal("5000")
    assert monthly_summary(records, limit=1)[0].month_number == 2
