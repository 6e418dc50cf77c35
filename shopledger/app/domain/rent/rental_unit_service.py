"""
Rental Unit Service (Domain Logic).

Unit create/update with date and percentage defaults, and the cascading
delete that removes a unit's bills, bill items and payments in one
transaction.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.config import settings
from shopledger.app.core.exceptions import LedgerValidationError
from shopledger.app.db.repository import Repository
from shopledger.app.models.bill import Bill, BillItem
from shopledger.app.models.payment import Payment
from shopledger.app.models.rental_unit import RentalUnit
from shopledger.app.services.audit import log_event, log_coercions, AuditAction

logger = logging.getLogger("shopledger.rent")

units = Repository(RentalUnit, "Rental unit")


def _check_dates(rent_start_date: Optional[date], last_rent_update: Optional[date]) -> None:
    if rent_start_date and last_rent_update and last_rent_update < rent_start_date:
        raise LedgerValidationError(
            "Last rent update cannot be before rent start date",
            field="last_rent_update",
            details={"rent_start_date": rent_start_date, "last_rent_update": last_rent_update},
        )


class RentalUnitService:

    @staticmethod
    async def create(
        db: AsyncSession,
        data: Dict[str, Any],
        coercions: Optional[List[Dict[str, Any]]] = None,
        today: Optional[date] = None
    ) -> RentalUnit:
        """
        Create a rental unit.

        rent_start_date defaults to today, last_rent_update to the start date
        and yearly_increase_percentage to the configured default.
        """
        data = dict(data)
        data["rent_start_date"] = data.get("rent_start_date") or today or date.today()
        data["last_rent_update"] = data.get("last_rent_update") or data["rent_start_date"]
        if data.get("yearly_increase_percentage") is None:
            data["yearly_increase_percentage"] = Decimal(settings.default_yearly_increase_percentage)
        _check_dates(data["rent_start_date"], data["last_rent_update"])

        try:
            unit = await units.create(db, data)
            await log_event(
                db=db,
                action=AuditAction.RENTAL_UNIT_CREATED,
                entity_type="rental_units",
                entity_id=unit.id,
                metadata={"name": unit.name, "monthly_rent": str(unit.monthly_rent)},
                commit=False
            )
            await log_coercions(db, "rental_units", coercions or [], entity_id=unit.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(unit)
        return unit

    @staticmethod
    async def update(
        db: AsyncSession,
        unit_id: str,
        data: Dict[str, Any],
        coercions: Optional[List[Dict[str, Any]]] = None
    ) -> RentalUnit:
        unit = await units.get_or_404(db, unit_id)
        _check_dates(
            data.get("rent_start_date") or unit.rent_start_date,
            data.get("last_rent_update") or unit.last_rent_update,
        )
        try:
            unit = await units.update(db, unit, data)
            await log_coercions(db, "rental_units", coercions or [], entity_id=unit.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(unit)
        return unit

    @staticmethod
    async def delete(db: AsyncSession, unit_id: str) -> None:
        """Remove a unit together with its bills, bill items and payments (advance ones too)."""
        unit = await units.get_or_404(db, unit_id)
        unit_bill_ids = select(Bill.id).where(Bill.rental_unit_id == unit_id)

        try:
            await db.execute(
                delete(BillItem).where(BillItem.bill_id.in_(unit_bill_ids)),
                execution_options={"synchronize_session": False},
            )
            payments = await db.execute(delete(Payment).where(Payment.rental_unit_id == unit_id))
            removed_bills = await db.execute(
                delete(Bill).where(Bill.rental_unit_id == unit_id),
                execution_options={"synchronize_session": False},
            )
            await units.delete(db, unit)

            await log_event(
                db=db,
                action=AuditAction.RENTAL_UNIT_DELETED,
                entity_type="rental_units",
                entity_id=unit_id,
                metadata={
                    "name": unit.name,
                    "bills_removed": removed_bills.rowcount,
                    "payments_removed": payments.rowcount,
                },
                commit=False
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Rental unit deleted", extra={"unit_id": unit_id})
