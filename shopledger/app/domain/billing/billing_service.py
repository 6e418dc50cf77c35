"""
Billing Service (Domain Logic).

Creates, edits and deletes bills, and runs the bill-triggered rent
escalation. Each call is a single transaction committed here.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.exceptions import ConflictError, LedgerValidationError
from shopledger.app.db.repository import Repository
from shopledger.app.domain.billing.bill_builder import (
    DraftItem, generate_bill_number, default_due_date, draft_bill_items, validate_bill_items
)
from shopledger.app.domain.ledger.bill_ledger import BillBalance, derive_status, write_balance
from shopledger.app.domain.money import ZERO, parse_amount
from shopledger.app.domain.rent.escalation import apply_rent_escalation
from shopledger.app.models.bill import Bill, BillItem
from shopledger.app.models.ledger_enums import BillStatus
from shopledger.app.models.payment import Payment
from shopledger.app.models.rental_unit import RentalUnit
from shopledger.app.services.audit import log_event, AuditAction
from shopledger.app.services.bill_locking import bill_lock

logger = logging.getLogger("shopledger.billing")

units = Repository(RentalUnit, "Rental unit")
bills = Repository(Bill, "Bill")


def _build_items(items: List) -> List[BillItem]:
    return [
        BillItem(
            position=position,
            description=item.description.strip(),
            amount=parse_amount(item.amount, "amount"),
        )
        for position, item in enumerate(items)
    ]


class BillingService:

    @staticmethod
    async def bill_number_taken(db: AsyncSession, bill_number: str, exclude_id: Optional[str] = None) -> bool:
        query = select(Bill.id).where(Bill.bill_number == bill_number)
        if exclude_id is not None:
            query = query.where(Bill.id != exclude_id)
        result = await db.execute(query)
        return result.first() is not None

    @staticmethod
    async def next_bill_number(db: AsyncSession, today: Optional[date] = None) -> str:
        """First free BILL{yy}{mm}{nnn} number, counting up from the number of bills."""
        today = today or date.today()
        result = await db.execute(select(func.count(Bill.id)))
        count = result.scalar() or 0
        number = generate_bill_number(count, today)
        while await BillingService.bill_number_taken(db, number):
            count += 1
            number = generate_bill_number(count, today)
        return number

    @staticmethod
    async def draft_bill(
        db: AsyncSession,
        rental_unit_id: str,
        bill_date: Optional[date] = None,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """Preview of a new bill: number, dates and auto-drafted items. Nothing is written."""
        today = today or date.today()
        bill_date = bill_date or today
        unit = await units.get_or_404(db, rental_unit_id)
        unit_bills = await bills.list(db, rental_unit_id=rental_unit_id)
        items = draft_bill_items(unit, unit_bills, bill_date, today)
        return {
            "rental_unit_id": rental_unit_id,
            "bill_number": await BillingService.next_bill_number(db, today),
            "bill_date": bill_date,
            "due_date": default_due_date(bill_date),
            "items": items,
            "total": sum((item.amount for item in items), ZERO),
        }

    @staticmethod
    async def create_bill(
        db: AsyncSession,
        data: Dict[str, Any],
        today: Optional[date] = None
    ) -> Bill:
        """
        Create a bill and, in an increase month, escalate the unit's rent.

        Flow:
        1. Resolve unit, dates and items (drafted when none are given)
        2. Validate items and bill number uniqueness
        3. Insert bill (paid 0, remaining total, PENDING)
        4. Apply rent escalation to the unit
        5. Audit and commit

        Raises:
            ResourceNotFoundError: Unknown rental unit
            LedgerValidationError: Bad items or blank bill number
            ConflictError: Bill number already used
        """
        today = today or date.today()
        unit = await units.get_or_404(db, data["rental_unit_id"])
        bill_date = data.get("bill_date") or today
        due_date = data.get("due_date") or default_due_date(bill_date)

        items = data.get("items")
        if not items:
            unit_bills = await bills.list(db, rental_unit_id=unit.id)
            items = draft_bill_items(unit, unit_bills, bill_date, today)
        items = [item if hasattr(item, "description") else DraftItem(**item) for item in items]
        total = validate_bill_items(items)

        bill_number = data.get("bill_number")
        if bill_number is None:
            bill_number = await BillingService.next_bill_number(db, today)
        bill_number = bill_number.strip()
        if not bill_number:
            raise LedgerValidationError("Bill number is required", field="bill_number")
        if await BillingService.bill_number_taken(db, bill_number):
            raise ConflictError(f"Bill number {bill_number} already exists", details={"bill_number": bill_number})

        try:
            bill = Bill(
                rental_unit_id=unit.id,
                bill_number=bill_number,
                bill_date=bill_date,
                due_date=due_date,
                total=total,
                paid=ZERO,
                remaining=total,
                status=BillStatus.PENDING,
                items=_build_items(items),
            )
            db.add(bill)
            await db.flush()

            previous_rent = unit.monthly_rent
            escalation = apply_rent_escalation(unit, bill_date, today)

            await log_event(
                db=db,
                action=AuditAction.BILL_CREATED,
                entity_type="bills",
                entity_id=bill.id,
                metadata={
                    "bill_number": bill.bill_number,
                    "rental_unit_id": unit.id,
                    "total": str(total),
                    "items": len(items),
                },
                commit=False
            )
            if escalation is not None:
                await log_event(
                    db=db,
                    action=AuditAction.RENT_ESCALATED,
                    entity_type="rental_units",
                    entity_id=unit.id,
                    metadata={
                        "bill_id": bill.id,
                        "previous_rent": str(previous_rent),
                        "new_rent": str(escalation.new_rent),
                        "increase_amount": str(escalation.increase_amount),
                        "periods": escalation.periods_elapsed,
                    },
                    commit=False
                )

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(bill)
        logger.info(
            "Bill created",
            extra={"bill_id": bill.id, "bill_number": bill.bill_number, "total": str(total)},
        )
        return bill

    @staticmethod
    async def update_bill(
        db: AsyncSession,
        redis_client,
        bill_id: str,
        data: Dict[str, Any]
    ) -> Bill:
        """
        Edit a bill's number, dates or items.

        New items recompute total and remaining; paid is kept and status is
        re-derived from the totals.
        """
        async with bill_lock(redis_client, bill_id):
            try:
                bill = await bills.get_or_404(db, bill_id, for_update=True)

                bill_number = data.get("bill_number")
                if bill_number is not None:
                    bill_number = bill_number.strip()
                    if not bill_number:
                        raise LedgerValidationError("Bill number is required", field="bill_number")
                    if await BillingService.bill_number_taken(db, bill_number, exclude_id=bill.id):
                        raise ConflictError(
                            f"Bill number {bill_number} already exists",
                            details={"bill_number": bill_number},
                        )
                    bill.bill_number = bill_number

                if data.get("bill_date") is not None:
                    bill.bill_date = data["bill_date"]
                if data.get("due_date") is not None:
                    bill.due_date = data["due_date"]

                items = data.get("items")
                if items is not None:
                    items = [item if hasattr(item, "description") else DraftItem(**item) for item in items]
                    total = validate_bill_items(items)
                    bill.items = _build_items(items)
                    paid = parse_amount(bill.paid, "paid")
                    write_balance(bill, BillBalance(total=total, paid=paid, status=derive_status(total, paid)))

                await db.flush()
                await log_event(
                    db=db,
                    action=AuditAction.BILL_UPDATED,
                    entity_type="bills",
                    entity_id=bill.id,
                    metadata={
                        "updated_fields": sorted(key for key, value in data.items() if value is not None),
                        "total": str(bill.total),
                        "remaining": str(bill.remaining),
                    },
                    commit=False
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        await db.refresh(bill)
        return bill

    @staticmethod
    async def delete_bill(db: AsyncSession, redis_client, bill_id: str) -> None:
        """Delete a bill, its items and every payment recorded against it."""
        async with bill_lock(redis_client, bill_id):
            try:
                bill = await bills.get_or_404(db, bill_id, for_update=True)
                result = await db.execute(delete(Payment).where(Payment.bill_id == bill_id))
                removed_payments = result.rowcount
                await db.delete(bill)

                await log_event(
                    db=db,
                    action=AuditAction.BILL_DELETED,
                    entity_type="bills",
                    entity_id=bill_id,
                    metadata={"bill_number": bill.bill_number, "payments_removed": removed_payments},
                    commit=False
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info("Bill deleted", extra={"bill_id": bill_id, "payments_removed": removed_payments})
