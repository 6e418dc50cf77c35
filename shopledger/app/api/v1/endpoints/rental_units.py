"""
Rental Unit API Endpoints.

CRUD for rented shops plus the rent escalation preview.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.db.session import get_db
from shopledger.app.db.repository import Repository
from shopledger.app.domain.rent.escalation import RentIncreaseInfo, compute_rent_increase, original_rent
from shopledger.app.domain.rent.rental_unit_service import RentalUnitService
from shopledger.app.models.rental_unit import RentalUnit
from shopledger.app.schemas.rental_unit import (
    RentalUnitCreate, RentalUnitUpdate, RentalUnitResponse, OriginalRentResponse
)

router = APIRouter(prefix="/rental-units", tags=["Rental Units"])
units = Repository(RentalUnit, "Rental unit")


@router.get("", response_model=List[RentalUnitResponse])
async def list_rental_units(db: AsyncSession = Depends(get_db)):
    return [RentalUnitResponse.model_validate(unit) for unit in await units.list(db)]


@router.post("", response_model=RentalUnitResponse, status_code=status.HTTP_201_CREATED)
async def create_rental_unit(unit_data: RentalUnitCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a rental unit.

    Start date defaults to today and last rent update to the start date.
    """
    unit = await RentalUnitService.create(db, unit_data.model_dump(), coercions=unit_data.coercions)
    return RentalUnitResponse.model_validate(unit)


@router.get("/{unit_id}", response_model=RentalUnitResponse)
async def get_rental_unit(unit_id: str, db: AsyncSession = Depends(get_db)):
    return RentalUnitResponse.model_validate(await units.get_or_404(db, unit_id))


@router.put("/{unit_id}", response_model=RentalUnitResponse)
async def update_rental_unit(unit_id: str, unit_data: RentalUnitUpdate, db: AsyncSession = Depends(get_db)):
    unit = await RentalUnitService.update(
        db, unit_id, unit_data.model_dump(exclude_unset=True), coercions=unit_data.coercions
    )
    return RentalUnitResponse.model_validate(unit)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rental_unit(unit_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a unit with all of its bills and payments."""
    await RentalUnitService.delete(db, unit_id)


@router.get("/{unit_id}/rent-increase", response_model=RentIncreaseInfo)
async def get_rent_increase(
    unit_id: str,
    as_of: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    db: AsyncSession = Depends(get_db)
):
    unit = await units.get_or_404(db, unit_id)
    return compute_rent_increase(unit, as_of)


@router.get("/{unit_id}/original-rent", response_model=OriginalRentResponse)
async def get_original_rent(
    unit_id: str,
    as_of: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    db: AsyncSession = Depends(get_db)
):
    unit = await units.get_or_404(db, unit_id)
    as_of = as_of or date.today()
    return OriginalRentResponse(
        rental_unit_id=unit.id,
        current_rent=unit.monthly_rent,
        original_rent=original_rent(unit, as_of),
        as_of=as_of,
    )
