"""
Family budget Pydantic schemas.

Defines request and response models for members, expenses, income and
bank deposits.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from shopledger.app.models.ledger_enums import (
    ExpenseCategory, IncomeSource, FamilyPaymentMethod, DepositSource, FamilyRelation
)
from shopledger.app.schemas.amounts import LenientAmountModel


class FamilyMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    relation: FamilyRelation
    is_active: bool = True


class FamilyMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    relation: Optional[FamilyRelation] = None
    is_active: Optional[bool] = None


class FamilyMemberResponse(BaseModel):
    id: str
    name: str
    relation: FamilyRelation
    is_active: bool
    created_at: dt.datetime

    class Config:
        from_attributes = True


class FamilyExpenseCreate(LenientAmountModel):
    """Schema for recording a family expense."""
    amount_fields = ("amount",)

    category: ExpenseCategory
    description: Optional[str] = None
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    date: dt.date
    paid_by: str = Field(..., min_length=1, max_length=100)
    payment_method: FamilyPaymentMethod


class FamilyExpenseUpdate(LenientAmountModel):
    amount_fields = ("amount",)
    partial = True

    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    date: Optional[dt.date] = None
    paid_by: Optional[str] = Field(None, min_length=1, max_length=100)
    payment_method: Optional[FamilyPaymentMethod] = None


class FamilyExpenseResponse(BaseModel):
    id: str
    category: ExpenseCategory
    description: Optional[str]
    amount: Decimal
    date: dt.date
    paid_by: str
    payment_method: FamilyPaymentMethod
    created_at: dt.datetime

    class Config:
        from_attributes = True


class FamilyIncomeCreate(LenientAmountModel):
    """Schema for recording family income."""
    amount_fields = ("amount",)

    source: IncomeSource
    description: Optional[str] = None
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    date: dt.date
    received_by: str = Field(..., min_length=1, max_length=100)
    payment_method: FamilyPaymentMethod


class FamilyIncomeUpdate(LenientAmountModel):
    amount_fields = ("amount",)
    partial = True

    source: Optional[IncomeSource] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    date: Optional[dt.date] = None
    received_by: Optional[str] = Field(None, min_length=1, max_length=100)
    payment_method: Optional[FamilyPaymentMethod] = None


class FamilyIncomeResponse(BaseModel):
    id: str
    source: IncomeSource
    description: Optional[str]
    amount: Decimal
    date: dt.date
    received_by: str
    payment_method: FamilyPaymentMethod
    created_at: dt.datetime

    class Config:
        from_attributes = True


class BankDepositCreate(LenientAmountModel):
    """Schema for moving money from a tracked account into a bank."""
    amount_fields = ("amount",)

    amount: Decimal = Field(..., gt=0, decimal_places=2)
    from_account: DepositSource
    bank_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    date: dt.date


class BankDepositUpdate(LenientAmountModel):
    amount_fields = ("amount",)
    partial = True

    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    from_account: Optional[DepositSource] = None
    bank_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    date: Optional[dt.date] = None


class BankDepositResponse(BaseModel):
    id: str
    amount: Decimal
    from_account: DepositSource
    bank_name: str
    description: Optional[str]
    date: dt.date
    created_at: dt.datetime

    class Config:
        from_attributes = True
