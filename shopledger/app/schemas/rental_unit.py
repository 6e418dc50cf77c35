"""
Rental unit Pydantic schemas.

Defines request and response models for rental units and rent escalation.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from shopledger.app.schemas.amounts import LenientAmountModel


class RentalUnitCreate(LenientAmountModel):
    """Schema for creating a rental unit."""
    amount_fields = ("monthly_rent", "electricity_rate", "yearly_increase_percentage")

    name: str = Field(..., min_length=1, max_length=200, description="Shop name")
    owner: str = Field(..., min_length=1, max_length=200, description="Tenant name")
    phone: str = Field(..., min_length=1, max_length=30)
    address: str = Field(..., min_length=1, max_length=500)
    monthly_rent: Decimal = Field(..., ge=0, decimal_places=2)
    electricity_rate: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    yearly_increase_percentage: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    rent_start_date: Optional[date] = None
    last_rent_update: Optional[date] = None


class RentalUnitUpdate(LenientAmountModel):
    """Schema for updating an existing rental unit."""
    amount_fields = ("monthly_rent", "electricity_rate", "yearly_increase_percentage")
    partial = True

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    owner: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    monthly_rent: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    electricity_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    yearly_increase_percentage: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    rent_start_date: Optional[date] = None
    last_rent_update: Optional[date] = None


class RentalUnitResponse(BaseModel):
    """Schema for rental unit response."""
    id: str
    name: str
    owner: str
    phone: str
    address: str
    monthly_rent: Decimal
    electricity_rate: Decimal
    yearly_increase_percentage: Optional[Decimal]
    rent_start_date: Optional[date]
    last_rent_update: Optional[date]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OriginalRentResponse(BaseModel):
    rental_unit_id: str
    current_rent: Decimal
    original_rent: Decimal
    as_of: date
