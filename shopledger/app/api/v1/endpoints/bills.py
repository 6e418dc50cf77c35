"""
Bill API Endpoints.

Bill CRUD, the draft preview for a new bill and the penalty check.
"""

from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.redis_client import get_redis
from shopledger.app.db.session import get_db
from shopledger.app.db.repository import Repository
from shopledger.app.domain.billing.billing_service import BillingService
from shopledger.app.domain.billing.penalty import PenaltyInfo, compute_penalty
from shopledger.app.models.bill import Bill
from shopledger.app.schemas.bill import (
    BillCreate, BillUpdate, BillResponse, BillDraftRequest, BillDraftResponse
)

router = APIRouter(prefix="/bills", tags=["Bills"])
bills = Repository(Bill, "Bill")


@router.get("", response_model=List[BillResponse])
async def list_bills(
    rental_unit_id: Optional[str] = Query(None, description="Only bills for this unit"),
    db: AsyncSession = Depends(get_db)
):
    filters = {"rental_unit_id": rental_unit_id} if rental_unit_id else {}
    return [BillResponse.model_validate(bill) for bill in await bills.list(db, **filters)]


@router.post("/draft", response_model=BillDraftResponse)
async def draft_bill(request: BillDraftRequest, db: AsyncSession = Depends(get_db)):
    """Preview the number, due date and auto items a new bill would get. Nothing is saved."""
    draft = await BillingService.draft_bill(db, request.rental_unit_id, request.bill_date)
    return BillDraftResponse.model_validate(
        {**draft, "items": [item.model_dump() for item in draft["items"]]}
    )


@router.post("", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
async def create_bill(bill_data: BillCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a bill.

    Missing items are drafted from the unit. In an increase month the unit's
    rent is escalated in the same transaction.
    """
    bill = await BillingService.create_bill(db, bill_data.model_dump(exclude={"items"}) | {"items": bill_data.items})
    return BillResponse.model_validate(bill)


@router.get("/{bill_id}", response_model=BillResponse)
async def get_bill(bill_id: str, db: AsyncSession = Depends(get_db)):
    return BillResponse.model_validate(await bills.get_or_404(db, bill_id))


@router.put("/{bill_id}", response_model=BillResponse)
async def update_bill(
    bill_id: str,
    bill_data: BillUpdate,
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
):
    data = bill_data.model_dump(exclude_unset=True, exclude={"items"})
    if bill_data.items is not None:
        data["items"] = bill_data.items
    bill = await BillingService.update_bill(db, redis_client, bill_id, data)
    return BillResponse.model_validate(bill)


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bill(
    bill_id: str,
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
):
    """Delete a bill and every payment recorded against it."""
    await BillingService.delete_bill(db, redis_client, bill_id)


@router.get("/{bill_id}/penalty", response_model=PenaltyInfo)
async def get_bill_penalty(
    bill_id: str,
    as_of: Optional[date] = Query(None, description="Evaluation date (defaults to now)"),
    db: AsyncSession = Depends(get_db)
):
    bill = await bills.get_or_404(db, bill_id)
    now = datetime.combine(as_of, time.min) if as_of else datetime.now()
    return compute_penalty(bill, now)
