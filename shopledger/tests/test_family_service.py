"""
Integration tests for the family budget: members, entries and deposits.
"""

import pytest
from datetime import date
from decimal import Decimal

from shopledger.app.core.exceptions import ConflictError, LedgerValidationError
from shopledger.app.domain.family.family_service import FamilyService
from shopledger.app.domain.ledger.ledger_service import LedgerService
from shopledger.app.models.ledger_enums import (
    FamilyRelation, ExpenseCategory, IncomeSource, FamilyPaymentMethod, DepositSource, PaymentMethod
)


def expense(paid_by="Asha", amount="300", method=FamilyPaymentMethod.CASH):
    return {
        "category": ExpenseCategory.GROCERIES,
        "description": "Weekly vegetables",
        "amount": Decimal(amount),
        "date": date(2024, 3, 4),
        "paid_by": paid_by,
        "payment_method": method,
    }


@pytest.mark.asyncio
async def test_member_names_are_unique_ignoring_case(db_session):
    await FamilyService.create_member(db_session, {"name": "Asha", "relation": FamilyRelation.MOTHER})

    with pytest.raises(ConflictError):
        await FamilyService.create_member(db_session, {"name": "  asha ", "relation": FamilyRelation.SELF})


@pytest.mark.asyncio
async def test_rename_to_own_name_is_allowed(db_session):
    member = await FamilyService.create_member(db_session, {"name": "Asha", "relation": FamilyRelation.MOTHER})

    renamed = await FamilyService.update_member(db_session, member.id, {"name": "ASHA"})

    assert renamed.name == "ASHA"


@pytest.mark.asyncio
async def test_any_name_accepted_before_members_exist(db_session):
    created = await FamilyService.create_expense(db_session, expense(paid_by="Anyone"))
    assert created.paid_by == "Anyone"


@pytest.mark.asyncio
async def test_expense_requires_active_member(db_session):
    member = await FamilyService.create_member(db_session, {"name": "Asha", "relation": FamilyRelation.MOTHER})
    await FamilyService.update_member(db_session, member.id, {"is_active": False})

    with pytest.raises(LedgerValidationError) as exc_info:
        await FamilyService.create_expense(db_session, expense(paid_by="Asha"))

    assert exc_info.value.details["field"] == "paid_by"


@pytest.mark.asyncio
async def test_income_with_active_member(db_session):
    await FamilyService.create_member(db_session, {"name": "Vikram", "relation": FamilyRelation.SELF})

    income = await FamilyService.create_income(db_session, {
        "source": IncomeSource.JOB,
        "amount": Decimal("50000"),
        "date": date(2024, 3, 1),
        "received_by": "vikram",
        "payment_method": FamilyPaymentMethod.ONLINE,
    })

    assert income.amount == Decimal("50000")


@pytest.mark.asyncio
async def test_deposit_limited_to_available_balance(db_session, mock_redis, rental_unit):
    await LedgerService.record_payment(db_session, mock_redis, {
        "rental_unit_id": rental_unit.id,
        "amount": Decimal("5000"),
        "method": PaymentMethod.CASH,
        "date": date(2024, 3, 1),
        "is_advance": True,
    })
    await FamilyService.create_expense(db_session, expense(amount="2000"))

    with pytest.raises(LedgerValidationError) as exc_info:
        await FamilyService.create_deposit(db_session, {
            "amount": Decimal("3500"),
            "from_account": DepositSource.CASH,
            "bank_name": "SBI",
            "date": date(2024, 3, 5),
        })
    assert exc_info.value.message == "Insufficient balance. Available: ₹3,000"

    deposit = await FamilyService.create_deposit(db_session, {
        "amount": Decimal("3000"),
        "from_account": DepositSource.CASH,
        "bank_name": "SBI",
        "date": date(2024, 3, 5),
    })
    assert deposit.amount == Decimal("3000")


@pytest.mark.asyncio
async def test_editing_deposit_excludes_its_own_amount(db_session):
    await FamilyService.create_income(db_session, {
        "source": IncomeSource.JOB,
        "amount": Decimal("1000"),
        "date": date(2024, 3, 1),
        "received_by": "Vikram",
        "payment_method": FamilyPaymentMethod.ONLINE,
    })
    deposit = await FamilyService.create_deposit(db_session, {
        "amount": Decimal("800"),
        "from_account": DepositSource.ONLINE,
        "bank_name": "HDFC",
        "date": date(2024, 3, 2),
    })

    updated = await FamilyService.update_deposit(db_session, deposit.id, {"amount": Decimal("1000")})
    assert updated.amount == Decimal("1000")

    with pytest.raises(LedgerValidationError):
        await FamilyService.update_deposit(db_session, deposit.id, {"amount": Decimal("1001")})
