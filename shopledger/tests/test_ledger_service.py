"""
Integration tests for payment application and reversal.
"""

import pytest
from datetime import date
from decimal import Decimal

from shopledger.app.core.exceptions import (
    LedgerValidationError, ResourceNotFoundError, BillLockedError
)
from shopledger.app.domain.ledger import ledger_service as ledger_module
from shopledger.app.domain.ledger.ledger_service import LedgerService
from shopledger.app.models.ledger_enums import BillStatus, PaymentMethod
from shopledger.app.services.audit import get_audit_trail, AuditAction
from shopledger.app.services.bill_locking import bill_lock_name


def payment_data(rental_unit, bill=None, amount="400", method=PaymentMethod.CASH, **extra):
    data = {
        "rental_unit_id": rental_unit.id,
        "bill_id": bill.id if bill is not None else None,
        "amount": Decimal(amount),
        "method": method,
        "date": date(2023, 2, 5),
    }
    data.update(extra)
    return data


@pytest.mark.asyncio
async def test_partial_full_and_reversed_payments(db_session, mock_redis, rental_unit, bill):
    """1000 bill: pay 400, pay 600, delete the 600 payment."""
    first, updated = await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "400"))
    assert updated.paid == Decimal("400")
    assert updated.remaining == Decimal("600")
    assert updated.status == BillStatus.PARTIAL

    second, updated = await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "600"))
    assert updated.remaining == 0
    assert updated.status == BillStatus.PAID

    reverted = await LedgerService.delete_payment(db_session, mock_redis, second.id)
    assert reverted.paid == Decimal("400")
    assert reverted.remaining == Decimal("600")
    assert reverted.status == BillStatus.PARTIAL

    reverted = await LedgerService.delete_payment(db_session, mock_redis, first.id)
    assert reverted.paid == 0
    assert reverted.status == BillStatus.PENDING

    assert bill_lock_name(bill.id) in mock_redis.acquired
    assert bill_lock_name(bill.id) not in mock_redis.store


@pytest.mark.asyncio
async def test_payment_cannot_exceed_remaining(db_session, mock_redis, rental_unit, bill):
    with pytest.raises(LedgerValidationError) as exc_info:
        await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "1500"))

    assert exc_info.value.details["field"] == "amount"
    await db_session.refresh(bill)
    assert bill.paid == 0


@pytest.mark.asyncio
async def test_non_positive_amount_rejected(db_session, mock_redis, rental_unit, bill):
    with pytest.raises(LedgerValidationError):
        await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "0"))


@pytest.mark.asyncio
async def test_advance_payment_has_no_bill(db_session, mock_redis, rental_unit, bill):
    payment, updated = await LedgerService.record_payment(
        db_session, mock_redis, payment_data(rental_unit, bill, "5000", is_advance=True)
    )

    assert payment.bill_id is None
    assert payment.is_advance is True
    assert updated is None
    await db_session.refresh(bill)
    assert bill.paid == 0

    assert await LedgerService.delete_payment(db_session, mock_redis, payment.id) is None


@pytest.mark.asyncio
async def test_unknown_bill_raises_not_found(db_session, mock_redis, rental_unit):
    data = payment_data(rental_unit)
    data["bill_id"] = "missing-bill"

    with pytest.raises(ResourceNotFoundError):
        await LedgerService.record_payment(db_session, mock_redis, data)


@pytest.mark.asyncio
async def test_unknown_payment_raises_not_found(db_session, mock_redis):
    with pytest.raises(ResourceNotFoundError):
        await LedgerService.delete_payment(db_session, mock_redis, "missing-payment")


@pytest.mark.asyncio
async def test_locked_bill_rejects_payment(db_session, mock_redis, rental_unit, bill):
    mock_redis.store[bill_lock_name(bill.id)] = "held-by-another-worker"

    with pytest.raises(BillLockedError) as exc_info:
        await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "100"))

    assert exc_info.value.status_code == 409
    await db_session.refresh(bill)
    assert bill.paid == 0


@pytest.mark.asyncio
async def test_reversal_is_noop_when_bill_is_gone(db_session, mock_redis, rental_unit, bill, mocker):
    payment, _ = await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "400"))
    mocker.patch.object(ledger_module.bills, "get", new_callable=mocker.AsyncMock, return_value=None)

    assert await LedgerService.delete_payment(db_session, mock_redis, payment.id) is None

    trail = await get_audit_trail(db_session, entity_id=payment.id, action=AuditAction.PAYMENT_REVERSED)
    assert trail[0].meta_data["bill_found"] is False


@pytest.mark.asyncio
async def test_split_payment_tags_notes_per_method(db_session, mock_redis, rental_unit, bill):
    data = payment_data(rental_unit, bill, notes="February rent")
    parts = [
        {"method": PaymentMethod.CASH, "amount": Decimal("300")},
        {"method": PaymentMethod.ONLINE, "amount": Decimal("200"), "reference": "UPI-123"},
        {"method": PaymentMethod.FAMILY_ACCOUNT, "amount": Decimal("0")},
    ]

    created, updated = await LedgerService.record_split_payment(db_session, mock_redis, data, parts)

    assert len(created) == 2
    assert created[0].notes == "February rent (Split Payment - Cash)"
    assert created[1].notes == "February rent (Split Payment - Online Payment)"
    assert created[1].reference == "UPI-123"
    assert updated.paid == Decimal("500")
    assert updated.status == BillStatus.PARTIAL


@pytest.mark.asyncio
async def test_split_payment_total_cannot_exceed_remaining(db_session, mock_redis, rental_unit, bill):
    parts = [
        {"method": PaymentMethod.CASH, "amount": Decimal("700")},
        {"method": PaymentMethod.ONLINE, "amount": Decimal("700")},
    ]
    with pytest.raises(LedgerValidationError):
        await LedgerService.record_split_payment(db_session, mock_redis, payment_data(rental_unit, bill), parts)


@pytest.mark.asyncio
async def test_payment_is_audited(db_session, mock_redis, rental_unit, bill):
    payment, _ = await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "250"))

    trail = await get_audit_trail(db_session, entity_id=payment.id)

    assert [event.action for event in trail] == [AuditAction.PAYMENT_APPLIED]
    assert Decimal(trail[0].meta_data["amount"]) == Decimal("250")


class RacingRedis:
    """Redis wrapper that lets a competing request run just before a lock is acquired."""

    def __init__(self, redis, before_acquire):
        self.redis = redis
        self.before_acquire = before_acquire

    def lock(self, name, **kwargs):
        lock = self.redis.lock(name, **kwargs)
        acquire = lock.acquire

        async def acquire_after_rival():
            await self.before_acquire()
            return await acquire()

        lock.acquire = acquire_after_rival
        return lock


@pytest.mark.asyncio
async def test_concurrent_delete_of_same_payment_reverses_once(
    db_session, other_db_session, mock_redis, rental_unit, bill
):
    await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "400"))
    second, _ = await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "600"))

    async def rival_delete():
        await LedgerService.delete_payment(other_db_session, mock_redis, second.id)

    # This request has loaded the payment and is waiting on the lock while the rival commits.
    with pytest.raises(ResourceNotFoundError):
        await LedgerService.delete_payment(db_session, RacingRedis(mock_redis, rival_delete), second.id)

    await db_session.refresh(bill)
    assert bill.paid == Decimal("400")
    assert bill.remaining == Decimal("600")
    assert bill.status == BillStatus.PARTIAL


@pytest.mark.asyncio
async def test_sub_paise_amount_rejected_before_touching_bill(db_session, mock_redis, rental_unit, bill):
    with pytest.raises(LedgerValidationError):
        await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "333.335"))

    _, updated = await LedgerService.record_payment(db_session, mock_redis, payment_data(rental_unit, bill, "100"))
    assert updated.paid == Decimal("100")
    assert updated.remaining == Decimal("900")


@pytest.mark.asyncio
async def test_unreadable_split_part_is_audited(db_session, mock_redis, rental_unit, bill):
    parts = [
        {"method": PaymentMethod.CASH, "amount": "abc"},
        {"method": PaymentMethod.ONLINE, "amount": Decimal("300")},
    ]

    created, updated = await LedgerService.record_split_payment(
        db_session, mock_redis, payment_data(rental_unit, bill), parts
    )

    assert len(created) == 1
    assert updated.paid == Decimal("300")
    trail = await get_audit_trail(db_session, entity_id=created[0].id, action=AuditAction.AMOUNT_COERCED)
    assert len(trail) == 1
    assert trail[0].meta_data["raw_value"] == "'abc'"
    assert trail[0].meta_data["bill_id"] == bill.id
