"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, Field
import datetime as dt
from decimal import Decimal
from typing import Optional, List

from shopledger.app.models.ledger_enums import PaymentMethod
from shopledger.app.schemas.amounts import LenientAmountModel
from shopledger.app.schemas.bill import BillResponse


class PaymentCreate(LenientAmountModel):
    """Schema for recording a payment. Advance payments carry no bill."""
    amount_fields = ("amount",)

    rental_unit_id: str
    bill_id: Optional[str] = None
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    method: PaymentMethod
    reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    date: Optional[dt.date] = None
    is_advance: bool = False


class SplitPart(LenientAmountModel):
    amount_fields = ("amount",)

    method: PaymentMethod
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    reference: Optional[str] = Field(None, max_length=100)


class SplitPaymentCreate(BaseModel):
    """One settlement paid through several methods."""
    rental_unit_id: str
    bill_id: Optional[str] = None
    parts: List[SplitPart] = Field(..., min_length=1)
    notes: Optional[str] = None
    date: Optional[dt.date] = None
    is_advance: bool = False


class PaymentResponse(BaseModel):
    """Schema for payment response."""
    id: str
    rental_unit_id: str
    bill_id: Optional[str]
    amount: Decimal
    method: PaymentMethod
    reference: Optional[str]
    notes: Optional[str]
    date: dt.date
    is_advance: bool
    created_at: dt.datetime

    class Config:
        from_attributes = True


class PaymentRecordedResponse(BaseModel):
    payment: PaymentResponse
    updated_bill: Optional[BillResponse]


class SplitPaymentRecordedResponse(BaseModel):
    payments: List[PaymentResponse]
    updated_bill: Optional[BillResponse]


class PaymentDeletedResponse(BaseModel):
    payment_id: str
    updated_bill: Optional[BillResponse]
