"""
Reporting service.

Dashboard totals, per-unit performance and the member-wise and month-wise
family summaries. The builders are pure over lists of rows; ReportsService
loads the rows and calls them.
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.domain import labels
from shopledger.app.domain.billing.penalty import compute_penalty
from shopledger.app.domain.ledger.balances import AccountSummary, LedgerRecords, compute_account_summary
from shopledger.app.domain.ledger.ledger_service import LedgerService
from shopledger.app.domain.money import ZERO, parse_amount
from shopledger.app.models.bill import Bill
from shopledger.app.models.family import FamilyMember
from shopledger.app.models.ledger_enums import FamilyPaymentMethod, WarningType
from shopledger.app.models.rental_unit import RentalUnit

MONTHS_IN_SUMMARY = 12
_PERCENT = Decimal("0.01")


class UnitPerformance(BaseModel):
    rental_unit_id: str
    name: str
    outstanding: Decimal
    collected: Decimal
    total_billed: Decimal
    collection_rate: Decimal
    bill_count: int


class PenaltyBill(BaseModel):
    bill_id: str
    bill_number: str
    rental_unit_id: str
    overdue_days: int
    penalty_amount: Decimal
    total_due: Decimal


class DashboardSummary(BaseModel):
    total_monthly_rent: Decimal
    total_outstanding: Decimal
    penalty_bills: List[PenaltyBill]
    total_penalty_amount: Decimal
    overdue_bill_count: int
    accounts: AccountSummary
    unit_performance: List[UnitPerformance]


class MemberSummary(BaseModel):
    member_id: str
    name: str
    total_expenses: Decimal
    total_income: Decimal
    expense_count: int
    income_count: int


class MonthSummary(BaseModel):
    month: str
    year: int
    month_number: int
    income: Decimal
    expenses: Decimal
    net: Decimal


def _is_personal(method) -> bool:
    return getattr(method, "value", method) == FamilyPaymentMethod.PERSONAL_ACCOUNT.value


def latest_unpaid_bill(unit_bills: List) -> Optional[Any]:
    """Most recent bill (by bill date) that still has money owing."""
    unpaid = [bill for bill in unit_bills if parse_amount(bill.remaining, "remaining") > 0]
    if not unpaid:
        return None
    return max(unpaid, key=lambda bill: bill.bill_date)


def build_unit_performance(units: List, bills: List, payments: List) -> List[UnitPerformance]:
    bills_by_unit = defaultdict(list)
    for bill in bills:
        bills_by_unit[bill.rental_unit_id].append(bill)
    collected_by_unit = defaultdict(lambda: ZERO)
    for payment in payments:
        collected_by_unit[payment.rental_unit_id] += parse_amount(payment.amount, "amount")

    rows = []
    for unit in units:
        unit_bills = bills_by_unit[unit.id]
        latest = latest_unpaid_bill(unit_bills)
        outstanding = parse_amount(latest.remaining, "remaining") if latest is not None else ZERO
        collected = collected_by_unit[unit.id]
        total_billed = sum((parse_amount(bill.total, "total") for bill in unit_bills), ZERO)
        rate = (collected / total_billed * 100).quantize(_PERCENT) if total_billed > 0 else ZERO
        rows.append(UnitPerformance(
            rental_unit_id=unit.id,
            name=unit.name,
            outstanding=outstanding,
            collected=collected,
            total_billed=total_billed,
            collection_rate=rate,
            bill_count=len(unit_bills),
        ))

    rows.sort(key=lambda row: row.outstanding, reverse=True)
    return rows


def build_dashboard_summary(
    units: List,
    bills: List,
    records: LedgerRecords,
    now=None
) -> DashboardSummary:
    """
    Dashboard totals as of now.

    Outstanding counts only each unit's latest unpaid bill, since a new bill
    carries earlier dues forward as a line item.
    """
    now = now if now is not None else datetime.now()

    penalty_bills = []
    overdue_count = 0
    for bill in bills:
        info = compute_penalty(bill, now)
        if info.warning_type in (WarningType.OVERDUE, WarningType.PENALTY):
            overdue_count += 1
        if info.has_penalty:
            penalty_bills.append(PenaltyBill(
                bill_id=bill.id,
                bill_number=bill.bill_number,
                rental_unit_id=bill.rental_unit_id,
                overdue_days=info.overdue_days,
                penalty_amount=info.penalty_amount,
                total_due=info.total_due,
            ))

    performance = build_unit_performance(units, bills, records.payments)

    return DashboardSummary(
        total_monthly_rent=sum((parse_amount(unit.monthly_rent, "monthly_rent") for unit in units), ZERO),
        total_outstanding=sum((row.outstanding for row in performance), ZERO),
        penalty_bills=penalty_bills,
        total_penalty_amount=sum((row.penalty_amount for row in penalty_bills), ZERO),
        overdue_bill_count=overdue_count,
        accounts=compute_account_summary(records),
        unit_performance=performance,
    )


def member_summary(members: List, records: LedgerRecords) -> List[MemberSummary]:
    """Per-member totals for members with any activity; personal income is left out."""
    rows = []
    for member in members:
        member_expenses = [e for e in records.expenses if e.paid_by == member.name]
        member_income = [
            i for i in records.incomes
            if i.received_by == member.name and not _is_personal(i.payment_method)
        ]
        total_expenses = sum((parse_amount(e.amount, "amount") for e in member_expenses), ZERO)
        total_income = sum((parse_amount(i.amount, "amount") for i in member_income), ZERO)
        if total_expenses <= 0 and total_income <= 0:
            continue
        rows.append(MemberSummary(
            member_id=member.id,
            name=member.name,
            total_expenses=total_expenses,
            total_income=total_income,
            expense_count=len(member_expenses),
            income_count=len(member_income),
        ))

    rows.sort(key=lambda row: row.total_expenses + row.total_income, reverse=True)
    return rows


def monthly_summary(records: LedgerRecords, limit: int = MONTHS_IN_SUMMARY) -> List[MonthSummary]:
    """Income (payments plus non-personal family income) against family expenses, newest month first."""
    months: Dict[tuple, Dict[str, Decimal]] = defaultdict(lambda: {"income": ZERO, "expenses": ZERO})

    def key(day: date) -> tuple:
        return (day.year, day.month)

    for payment in records.payments:
        months[key(payment.date)]["income"] += parse_amount(payment.amount, "amount")
    for income in records.incomes:
        if not _is_personal(income.payment_method):
            months[key(income.date)]["income"] += parse_amount(income.amount, "amount")
    for expense in records.expenses:
        months[key(expense.date)]["expenses"] += parse_amount(expense.amount, "amount")

    rows = []
    for (year, month) in sorted(months, reverse=True)[:limit]:
        totals = months[(year, month)]
        rows.append(MonthSummary(
            month=labels.month_label(year, month),
            year=year,
            month_number=month,
            income=totals["income"],
            expenses=totals["expenses"],
            net=totals["income"] - totals["expenses"],
        ))
    return rows


class ReportsService:

    @staticmethod
    async def dashboard(db: AsyncSession, now=None) -> DashboardSummary:
        units = (await db.execute(select(RentalUnit))).scalars().all()
        bills = (await db.execute(select(Bill))).scalars().all()
        records = await LedgerService.load_records(db)
        return build_dashboard_summary(list(units), list(bills), records, now)

    @staticmethod
    async def members(db: AsyncSession) -> List[MemberSummary]:
        members = (await db.execute(select(FamilyMember).order_by(FamilyMember.name))).scalars().all()
        records = await LedgerService.load_records(db)
        return member_summary(list(members), records)

    @staticmethod
    async def monthly(db: AsyncSession) -> List[MonthSummary]:
        records = await LedgerService.load_records(db)
        return monthly_summary(records)
