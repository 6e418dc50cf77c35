"""
Family Budget API Endpoints.

Members, expenses, income and bank deposits.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.db.session import get_db
from shopledger.app.domain.family.family_service import (
    FamilyService, members, expenses, incomes, deposits
)
from shopledger.app.schemas.family import (
    FamilyMemberCreate, FamilyMemberUpdate, FamilyMemberResponse,
    FamilyExpenseCreate, FamilyExpenseUpdate, FamilyExpenseResponse,
    FamilyIncomeCreate, FamilyIncomeUpdate, FamilyIncomeResponse,
    BankDepositCreate, BankDepositUpdate, BankDepositResponse
)

members_router = APIRouter(prefix="/family-members", tags=["Family Members"])
expenses_router = APIRouter(prefix="/family-expenses", tags=["Family Expenses"])
income_router = APIRouter(prefix="/family-income", tags=["Family Income"])
deposits_router = APIRouter(prefix="/bank-deposits", tags=["Bank Deposits"])


# Members

@members_router.get("", response_model=List[FamilyMemberResponse])
async def list_members(db: AsyncSession = Depends(get_db)):
    return [FamilyMemberResponse.model_validate(m) for m in await members.list(db)]


@members_router.post("", response_model=FamilyMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(member_data: FamilyMemberCreate, db: AsyncSession = Depends(get_db)):
    """Add a family member. Names are unique regardless of case."""
    member = await FamilyService.create_member(db, member_data.model_dump())
    return FamilyMemberResponse.model_validate(member)


@members_router.put("/{member_id}", response_model=FamilyMemberResponse)
async def update_member(member_id: str, member_data: FamilyMemberUpdate, db: AsyncSession = Depends(get_db)):
    member = await FamilyService.update_member(db, member_id, member_data.model_dump(exclude_unset=True))
    return FamilyMemberResponse.model_validate(member)


@members_router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(member_id: str, db: AsyncSession = Depends(get_db)):
    await FamilyService.delete_member(db, member_id)


# Expenses

@expenses_router.get("", response_model=List[FamilyExpenseResponse])
async def list_expenses(db: AsyncSession = Depends(get_db)):
    return [FamilyExpenseResponse.model_validate(e) for e in await expenses.list(db)]


@expenses_router.post("", response_model=FamilyExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(expense_data: FamilyExpenseCreate, db: AsyncSession = Depends(get_db)):
    expense = await FamilyService.create_expense(db, expense_data.model_dump())
    return FamilyExpenseResponse.model_validate(expense)


@expenses_router.put("/{expense_id}", response_model=FamilyExpenseResponse)
async def update_expense(expense_id: str, expense_data: FamilyExpenseUpdate, db: AsyncSession = Depends(get_db)):
    expense = await FamilyService.update_expense(db, expense_id, expense_data.model_dump(exclude_unset=True))
    return FamilyExpenseResponse.model_validate(expense)


@expenses_router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(expense_id: str, db: AsyncSession = Depends(get_db)):
    await FamilyService.delete_entry(db, expenses, expense_id)


# Income

@income_router.get("", response_model=List[FamilyIncomeResponse])
async def list_income(db: AsyncSession = Depends(get_db)):
    return [FamilyIncomeResponse.model_validate(i) for i in await incomes.list(db)]


@income_router.post("", response_model=FamilyIncomeResponse, status_code=status.HTTP_201_CREATED)
async def create_income(income_data: FamilyIncomeCreate, db: AsyncSession = Depends(get_db)):
    income = await FamilyService.create_income(db, income_data.model_dump())
    return FamilyIncomeResponse.model_validate(income)


@income_router.put("/{income_id}", response_model=FamilyIncomeResponse)
async def update_income(income_id: str, income_data: FamilyIncomeUpdate, db: AsyncSession = Depends(get_db)):
    income = await FamilyService.update_income(db, income_id, income_data.model_dump(exclude_unset=True))
    return FamilyIncomeResponse.model_validate(income)


@income_router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_income(income_id: str, db: AsyncSession = Depends(get_db)):
    await FamilyService.delete_entry(db, incomes, income_id)


# Bank deposits

@deposits_router.get("", response_model=List[BankDepositResponse])
async def list_deposits(db: AsyncSession = Depends(get_db)):
    return [BankDepositResponse.model_validate(d) for d in await deposits.list(db)]


@deposits_router.post("", response_model=BankDepositResponse, status_code=status.HTTP_201_CREATED)
async def create_deposit(deposit_data: BankDepositCreate, db: AsyncSession = Depends(get_db)):
    """Deposit money from a tracked account; rejected if the account cannot cover it."""
    deposit = await FamilyService.create_deposit(db, deposit_data.model_dump())
    return BankDepositResponse.model_validate(deposit)


@deposits_router.put("/{deposit_id}", response_model=BankDepositResponse)
async def update_deposit(deposit_id: str, deposit_data: BankDepositUpdate, db: AsyncSession = Depends(get_db)):
    deposit = await FamilyService.update_deposit(db, deposit_id, deposit_data.model_dump(exclude_unset=True))
    return BankDepositResponse.model_validate(deposit)


@deposits_router.delete("/{deposit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deposit(deposit_id: str, db: AsyncSession = Depends(get_db)):
    await FamilyService.delete_entry(db, deposits, deposit_id)
