"""
Payment API Endpoints.

Payments are created (applied to their bill) or deleted (reversed); they are
never edited.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.redis_client import get_redis
from shopledger.app.db.session import get_db
from shopledger.app.db.repository import Repository
from shopledger.app.domain.ledger.ledger_service import LedgerService
from shopledger.app.models.payment import Payment
from shopledger.app.schemas.bill import BillResponse
from shopledger.app.schemas.payment import (
    PaymentCreate, PaymentResponse, PaymentRecordedResponse,
    SplitPaymentCreate, SplitPaymentRecordedResponse, PaymentDeletedResponse
)

router = APIRouter(prefix="/payments", tags=["Payments"])
payments = Repository(Payment, "Payment")


def _bill_response(bill) -> Optional[BillResponse]:
    return BillResponse.model_validate(bill) if bill is not None else None


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    rental_unit_id: Optional[str] = Query(None),
    bill_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    filters = {}
    if rental_unit_id:
        filters["rental_unit_id"] = rental_unit_id
    if bill_id:
        filters["bill_id"] = bill_id
    return [PaymentResponse.model_validate(p) for p in await payments.list(db, **filters)]


@router.post("", response_model=PaymentRecordedResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
):
    """
    Record a payment.

    A bill-linked payment updates the bill's paid, remaining and status under
    the bill lock and may not exceed what is still owed.
    """
    payment, bill = await LedgerService.record_payment(db, redis_client, payment_data.model_dump())
    return PaymentRecordedResponse(
        payment=PaymentResponse.model_validate(payment),
        updated_bill=_bill_response(bill),
    )


@router.post("/split", response_model=SplitPaymentRecordedResponse, status_code=status.HTTP_201_CREATED)
async def create_split_payment(
    split_data: SplitPaymentCreate,
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
):
    """Record one payment per method for a single settlement."""
    data = split_data.model_dump(exclude={"parts"})
    parts = [part.model_dump() for part in split_data.parts]
    coercions = [coercion for part in split_data.parts for coercion in part.coercions]
    created, bill = await LedgerService.record_split_payment(db, redis_client, data, parts, coercions=coercions)
    return SplitPaymentRecordedResponse(
        payments=[PaymentResponse.model_validate(p) for p in created],
        updated_bill=_bill_response(bill),
    )


@router.delete("/{payment_id}", response_model=PaymentDeletedResponse)
async def delete_payment(
    payment_id: str,
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
):
    """Delete a payment and reverse its effect on the bill."""
    bill = await LedgerService.delete_payment(db, redis_client, payment_id)
    return PaymentDeletedResponse(payment_id=payment_id, updated_bill=_bill_response(bill))
