"""
Family Budget Service (Domain Logic).

Members, expenses, income and bank deposits. Expenses and income must name
an active member once any members are on record; deposits may not exceed
what the source account currently holds.
"""

from typing import Any, Dict, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.exceptions import ConflictError, LedgerValidationError
from shopledger.app.db.repository import Repository
from shopledger.app.domain.ledger.balances import available_balance, bucket_for
from shopledger.app.domain.ledger.ledger_service import LedgerService
from shopledger.app.domain.money import format_currency, parse_amount
from shopledger.app.models.family import FamilyMember, FamilyExpense, FamilyIncome, BankDeposit
from shopledger.app.services.audit import log_event, AuditAction

members = Repository(FamilyMember, "Family member")
expenses = Repository(FamilyExpense, "Family expense")
incomes = Repository(FamilyIncome, "Family income")
deposits = Repository(BankDeposit, "Bank deposit")


async def _commit(db: AsyncSession, entity):
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(entity)
    return entity


class FamilyService:

    # Members

    @staticmethod
    async def _check_member_name(db: AsyncSession, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise LedgerValidationError("Member name is required", field="name")
        query = select(FamilyMember.id).where(func.lower(FamilyMember.name) == name.lower())
        if exclude_id is not None:
            query = query.where(FamilyMember.id != exclude_id)
        result = await db.execute(query)
        if result.first() is not None:
            raise ConflictError(f"Family member {name} already exists", details={"name": name})
        return name

    @staticmethod
    async def create_member(db: AsyncSession, data: Dict[str, Any]) -> FamilyMember:
        data = dict(data)
        data["name"] = await FamilyService._check_member_name(db, data.get("name"))
        member = await members.create(db, data)
        return await _commit(db, member)

    @staticmethod
    async def update_member(db: AsyncSession, member_id: str, data: Dict[str, Any]) -> FamilyMember:
        member = await members.get_or_404(db, member_id)
        data = dict(data)
        if "name" in data:
            data["name"] = await FamilyService._check_member_name(db, data["name"], exclude_id=member_id)
        member = await members.update(db, member, data)
        return await _commit(db, member)

    @staticmethod
    async def delete_member(db: AsyncSession, member_id: str) -> None:
        member = await members.get_or_404(db, member_id)
        await members.delete(db, member)
        await db.commit()

    @staticmethod
    async def check_active_member(db: AsyncSession, name: str, field: str) -> None:
        """
        Raises:
            LedgerValidationError: Members exist and none active matches name
        """
        total = (await db.execute(select(func.count(FamilyMember.id)))).scalar() or 0
        if total == 0:
            return
        result = await db.execute(
            select(FamilyMember.id).where(
                func.lower(FamilyMember.name) == (name or "").strip().lower(),
                FamilyMember.is_active == True
            )
        )
        if result.first() is None:
            raise LedgerValidationError(f"{name} is not an active family member", field=field)

    # Expenses and income

    @staticmethod
    async def create_expense(db: AsyncSession, data: Dict[str, Any]) -> FamilyExpense:
        await FamilyService.check_active_member(db, data.get("paid_by"), "paid_by")
        expense = await expenses.create(db, data)
        return await _commit(db, expense)

    @staticmethod
    async def update_expense(db: AsyncSession, expense_id: str, data: Dict[str, Any]) -> FamilyExpense:
        expense = await expenses.get_or_404(db, expense_id)
        if data.get("paid_by") is not None:
            await FamilyService.check_active_member(db, data["paid_by"], "paid_by")
        expense = await expenses.update(db, expense, data)
        return await _commit(db, expense)

    @staticmethod
    async def create_income(db: AsyncSession, data: Dict[str, Any]) -> FamilyIncome:
        await FamilyService.check_active_member(db, data.get("received_by"), "received_by")
        income = await incomes.create(db, data)
        return await _commit(db, income)

    @staticmethod
    async def update_income(db: AsyncSession, income_id: str, data: Dict[str, Any]) -> FamilyIncome:
        income = await incomes.get_or_404(db, income_id)
        if data.get("received_by") is not None:
            await FamilyService.check_active_member(db, data["received_by"], "received_by")
        income = await incomes.update(db, income, data)
        return await _commit(db, income)

    @staticmethod
    async def delete_entry(db: AsyncSession, repository: Repository, entry_id: str) -> None:
        entry = await repository.get_or_404(db, entry_id)
        await repository.delete(db, entry)
        await db.commit()

    # Bank deposits

    @staticmethod
    async def _check_deposit_funds(db: AsyncSession, from_account, amount, exclude_id: Optional[str] = None) -> None:
        records = await LedgerService.load_records(db)
        available = available_balance(bucket_for(from_account), records, exclude_deposit_id=exclude_id)
        amount = parse_amount(amount, "amount")
        if amount > available:
            raise LedgerValidationError(
                f"Insufficient balance. Available: {format_currency(available)}",
                field="amount",
                details={"available": str(available), "amount": str(amount)},
            )

    @staticmethod
    async def create_deposit(db: AsyncSession, data: Dict[str, Any]) -> BankDeposit:
        await FamilyService._check_deposit_funds(db, data["from_account"], data["amount"])
        deposit = await deposits.create(db, data)
        await log_event(
            db=db,
            action=AuditAction.DEPOSIT_CREATED,
            entity_type="bank_deposits",
            entity_id=deposit.id,
            metadata={
                "amount": str(deposit.amount),
                "from_account": deposit.from_account.value,
                "bank_name": deposit.bank_name,
            },
            commit=False
        )
        return await _commit(db, deposit)

    @staticmethod
    async def update_deposit(db: AsyncSession, deposit_id: str, data: Dict[str, Any]) -> BankDeposit:
        deposit = await deposits.get_or_404(db, deposit_id)
        from_account = data.get("from_account") or deposit.from_account
        amount = data.get("amount") if data.get("amount") is not None else deposit.amount
        await FamilyService._check_deposit_funds(db, from_account, amount, exclude_id=deposit_id)
        deposit = await deposits.update(db, deposit, data)
        return await _commit(db, deposit)
