"""
Bill locking service.

Serializes payment application and reversal per bill across workers with a
Redis lock. Row-level SELECT ... FOR UPDATE inside the transaction is the
second guard.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.exceptions import LockError

from shopledger.app.core.config import settings
from shopledger.app.core.exceptions import BillLockedError

logger = logging.getLogger("shopledger.ledger")

LOCK_PREFIX = "bill-lock:"


def bill_lock_name(bill_id: str) -> str:
    return f"{LOCK_PREFIX}{bill_id}"


@asynccontextmanager
async def bill_lock(redis_client, bill_id: Optional[str]) -> AsyncIterator[None]:
    """
    Hold the write lock for a bill for the duration of the block.

    A payment with no bill (advance payment) needs no lock.

    Raises:
        BillLockedError: Lock not acquired within the blocking timeout
    """
    if bill_id is None:
        yield
        return

    lock = redis_client.lock(
        bill_lock_name(bill_id),
        timeout=settings.bill_lock_timeout_seconds,
        blocking_timeout=settings.bill_lock_blocking_timeout_seconds,
    )
    try:
        acquired = await lock.acquire()
    except LockError as exc:
        raise BillLockedError(bill_id) from exc
    if not acquired:
        logger.warning("Bill lock contention", extra={"bill_id": bill_id})
        raise BillLockedError(bill_id)

    try:
        yield
    finally:
        try:
            await lock.release()
        except LockError:
            # Lock expired before release; the timeout already freed it.
            logger.warning("Bill lock expired before release", extra={"bill_id": bill_id})
