"""
Ledger Service (Domain Logic).

Applies and reverses payments on bills. Every mutation is one transaction,
committed here while the bill's Redis lock is held and the bill row is
locked with SELECT ... FOR UPDATE.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.core.exceptions import LedgerValidationError
from shopledger.app.db.repository import Repository
from shopledger.app.domain import labels
from shopledger.app.domain.ledger.balances import LedgerRecords
from shopledger.app.domain.ledger.bill_ledger import (
    BillBalance, apply_payment, reverse_payment, write_balance, assert_consistent
)
from shopledger.app.domain.money import ZERO, exceeds_currency_scale, parse_amount
from shopledger.app.models.bill import Bill
from shopledger.app.models.family import FamilyExpense, FamilyIncome, BankDeposit
from shopledger.app.models.ledger_enums import PaymentMethod
from shopledger.app.models.payment import Payment
from shopledger.app.models.rental_unit import RentalUnit
from shopledger.app.services.audit import log_event, log_coercions, AuditAction
from shopledger.app.services.bill_locking import bill_lock

logger = logging.getLogger("shopledger.ledger")

units = Repository(RentalUnit, "Rental unit")
bills = Repository(Bill, "Bill")
payments = Repository(Payment, "Payment")


class LedgerService:

    @staticmethod
    async def load_records(db: AsyncSession) -> LedgerRecords:
        """Fetch every record the balance aggregation reads."""
        result = {}
        for key, model in (
            ("payments", Payment),
            ("incomes", FamilyIncome),
            ("expenses", FamilyExpense),
            ("deposits", BankDeposit),
        ):
            rows = await db.execute(select(model))
            result[key] = list(rows.scalars().all())
        return LedgerRecords(**result)

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        redis_client,
        data: Dict[str, Any]
    ) -> Tuple[Payment, Optional[Bill]]:
        """
        Record a payment and apply it to its bill.

        Flow:
        1. Validate amount and rental unit
        2. Lock the bill (Redis, then row lock)
        3. Check amount against the bill's remaining balance
        4. Insert the payment and update paid/remaining/status
        5. Audit and commit

        Args:
            db: Database session (committed here)
            redis_client: Redis client providing lock()
            data: rental_unit_id, bill_id, amount, method, reference, notes, date, is_advance

        Returns:
            (payment, updated bill or None for advance payments)
        """
        payments_created, bill = await LedgerService._record(db, redis_client, data, [data])
        return payments_created[0], bill

    @staticmethod
    async def record_split_payment(
        db: AsyncSession,
        redis_client,
        data: Dict[str, Any],
        parts: List[Dict[str, Any]],
        coercions: Optional[List[Dict[str, Any]]] = None
    ) -> Tuple[List[Payment], Optional[Bill]]:
        """
        Record one payment per method for a single settlement.

        Parts with a non-positive amount are skipped. Each payment's notes are
        tagged with the method it came in by. Part amounts that could not be
        read (from the request schema or parsed here) are audited as
        AMOUNT_COERCED together with the payments.
        """
        notes = (data.get("notes") or "").strip()
        coerced = list(coercions or [])
        entries = []
        for part in parts:
            amount = parse_amount(part.get("amount"), "amount", coerced)
            if amount <= 0:
                continue
            method = PaymentMethod(part["method"])
            tag = labels.SPLIT_PAYMENT_NOTE.format(method=labels.method_label(method))
            entries.append({
                **data,
                "amount": amount,
                "method": method,
                "reference": part.get("reference") or None,
                "notes": f"{notes} ({tag})" if notes else tag,
            })

        if not entries:
            raise LedgerValidationError("Split payment needs at least one positive amount", field="parts")

        context = {"rental_unit_id": data.get("rental_unit_id"), "bill_id": data.get("bill_id")}
        coerced = [{**coercion, **context} for coercion in coerced]
        return await LedgerService._record(db, redis_client, data, entries, coercions=coerced)

    @staticmethod
    async def _record(
        db: AsyncSession,
        redis_client,
        data: Dict[str, Any],
        entries: List[Dict[str, Any]],
        coercions: Optional[List[Dict[str, Any]]] = None
    ) -> Tuple[List[Payment], Optional[Bill]]:
        is_advance = bool(data.get("is_advance"))
        bill_id = None if is_advance else data.get("bill_id")

        amounts = [parse_amount(entry.get("amount"), "amount") for entry in entries]
        if any(amount <= 0 for amount in amounts):
            raise LedgerValidationError("Payment amount must be greater than zero", field="amount")
        if any(exceeds_currency_scale(amount) for amount in amounts):
            raise LedgerValidationError("Payment amount cannot have more than 2 decimal places", field="amount")
        total_amount = sum(amounts, ZERO)

        await units.get_or_404(db, data["rental_unit_id"])

        async with bill_lock(redis_client, bill_id):
            try:
                bill = None
                if bill_id is not None:
                    bill = await bills.get_or_404(db, bill_id, for_update=True)
                    if bill.rental_unit_id != data["rental_unit_id"]:
                        raise LedgerValidationError(
                            "Bill does not belong to this rental unit",
                            field="bill_id",
                            details={"bill_id": bill_id},
                        )
                    assert_consistent(bill)
                    if total_amount > parse_amount(bill.remaining, "remaining"):
                        raise LedgerValidationError(
                            "Payment amount cannot exceed remaining amount",
                            field="amount",
                            details={"remaining": str(bill.remaining), "amount": str(total_amount)},
                        )

                created = []
                for entry, amount in zip(entries, amounts):
                    payment = Payment(
                        rental_unit_id=data["rental_unit_id"],
                        bill_id=bill_id,
                        amount=amount,
                        method=PaymentMethod(entry["method"]),
                        reference=entry.get("reference"),
                        notes=entry.get("notes"),
                        date=entry.get("date") or date.today(),
                        is_advance=is_advance,
                    )
                    db.add(payment)
                    created.append(payment)

                    if bill is not None:
                        write_balance(bill, apply_payment(BillBalance.of(bill), amount))

                await db.flush()

                for payment in created:
                    await log_event(
                        db=db,
                        action=AuditAction.PAYMENT_APPLIED,
                        entity_type="payments",
                        entity_id=payment.id,
                        metadata={
                            "bill_id": bill_id,
                            "rental_unit_id": payment.rental_unit_id,
                            "amount": str(payment.amount),
                            "method": payment.method.value,
                            "is_advance": is_advance,
                        },
                        commit=False
                    )

                await log_coercions(db, "payments", coercions or [], entity_id=created[0].id)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

            for payment in created:
                await db.refresh(payment)
            if bill is not None:
                await db.refresh(bill)

        logger.info(
            "Payment applied",
            extra={
                "bill_id": bill_id,
                "amount": str(total_amount),
                "payments": len(created),
                "remaining": str(bill.remaining) if bill is not None else None,
            },
        )
        return created, bill

    @staticmethod
    async def delete_payment(
        db: AsyncSession,
        redis_client,
        payment_id: str
    ) -> Optional[Bill]:
        """
        Delete a payment and reverse its effect on the bill.

        If the bill has already been removed the reversal is skipped.

        Returns:
            The updated bill, or None when the payment had no (surviving) bill
        """
        payment = await payments.get_or_404(db, payment_id)
        bill_id = payment.bill_id
        amount = parse_amount(payment.amount, "amount")

        async with bill_lock(redis_client, bill_id):
            try:
                # Another request may have deleted it while this one waited for the lock.
                payment = await payments.get_or_404(db, payment_id, for_update=True)
                bill = await bills.get(db, bill_id, for_update=True) if bill_id else None
                if bill is not None:
                    assert_consistent(bill)

                await db.delete(payment)

                if bill is not None:
                    write_balance(bill, reverse_payment(BillBalance.of(bill), amount))

                await log_event(
                    db=db,
                    action=AuditAction.PAYMENT_REVERSED,
                    entity_type="payments",
                    entity_id=payment_id,
                    metadata={
                        "bill_id": bill_id,
                        "amount": str(amount),
                        "bill_found": bill is not None,
                    },
                    commit=False
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

            if bill is not None:
                await db.refresh(bill)

        logger.info(
            "Payment reversed",
            extra={"payment_id": payment_id, "bill_id": bill_id, "amount": str(amount)},
        )
        return bill

