"""
Account balance API Endpoints.

Balances are recomputed from every payment, income, expense and deposit on
each request.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.db.session import get_db
from shopledger.app.domain.ledger.balances import AccountSummary, available_balance, compute_account_summary
from shopledger.app.domain.ledger.ledger_service import LedgerService
from shopledger.app.models.ledger_enums import AccountBucket
from shopledger.app.schemas.account import AvailableBalanceResponse

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("/balances", response_model=AccountSummary)
async def get_balances(db: AsyncSession = Depends(get_db)):
    """Cash, online, family and personal balances; the combined total leaves personal out."""
    records = await LedgerService.load_records(db)
    return compute_account_summary(records)


@router.get("/{bucket}/available", response_model=AvailableBalanceResponse)
async def get_available_balance(
    bucket: AccountBucket,
    exclude_expense_id: Optional[str] = Query(None),
    exclude_income_id: Optional[str] = Query(None),
    exclude_deposit_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Balance left in one account, ignoring the record being edited."""
    records = await LedgerService.load_records(db)
    available = available_balance(
        bucket,
        records,
        exclude_expense_id=exclude_expense_id,
        exclude_income_id=exclude_income_id,
        exclude_deposit_id=exclude_deposit_id,
    )
    return AvailableBalanceResponse(
        account=bucket,
        available=available,
        exclude_expense_id=exclude_expense_id,
        exclude_income_id=exclude_income_id,
        exclude_deposit_id=exclude_deposit_id,
    )
