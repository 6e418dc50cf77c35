"""
Bill Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List

from shopledger.app.models.ledger_enums import BillStatus
from shopledger.app.schemas.amounts import LenientAmountModel


class BillItemIn(LenientAmountModel):
    """One line item on a bill request."""
    amount_fields = ("amount",)

    description: str = Field(..., max_length=255)
    amount: Decimal = Field(..., decimal_places=2)


class BillCreate(BaseModel):
    """
    Schema for creating a bill.

    Items, bill number and dates are optional; missing ones are drafted from
    the rental unit.
    """
    rental_unit_id: str
    bill_number: Optional[str] = Field(None, max_length=50)
    bill_date: Optional[date] = None
    due_date: Optional[date] = None
    items: Optional[List[BillItemIn]] = None


class BillUpdate(BaseModel):
    bill_number: Optional[str] = Field(None, max_length=50)
    bill_date: Optional[date] = None
    due_date: Optional[date] = None
    items: Optional[List[BillItemIn]] = None


class BillDraftRequest(BaseModel):
    rental_unit_id: str
    bill_date: Optional[date] = None


class BillItemResponse(BaseModel):
    description: str
    amount: Decimal

    class Config:
        from_attributes = True


class BillDraftResponse(BaseModel):
    """Preview of the number, dates and auto items a new bill would get."""
    rental_unit_id: str
    bill_number: str
    bill_date: date
    due_date: date
    items: List[BillItemResponse]
    total: Decimal


class BillResponse(BaseModel):
    """Schema for bill response."""
    id: str
    rental_unit_id: str
    bill_number: str
    bill_date: date
    due_date: date
    items: List[BillItemResponse]
    total: Decimal
    paid: Decimal
    remaining: Decimal
    status: BillStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
