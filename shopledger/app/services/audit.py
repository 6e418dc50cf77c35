"""
Audit logging service for tracking ledger events.

Provides centralized persistence of bill, payment and deposit mutations.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from shopledger.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    RENTAL_UNIT_CREATED = "RENTAL_UNIT_CREATED"
    RENTAL_UNIT_DELETED = "RENTAL_UNIT_DELETED"
    RENT_ESCALATED = "RENT_ESCALATED"

    BILL_CREATED = "BILL_CREATED"
    BILL_UPDATED = "BILL_UPDATED"
    BILL_DELETED = "BILL_DELETED"

    PAYMENT_APPLIED = "PAYMENT_APPLIED"
    PAYMENT_REVERSED = "PAYMENT_REVERSED"

    DEPOSIT_CREATED = "DEPOSIT_CREATED"

    AMOUNT_COERCED = "AMOUNT_COERCED"


async def log_event(
    db: AsyncSession,
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    commit: bool = True
) -> AuditLog:
    """
    Log a ledger event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        entity_type: Table name of the record acted upon
        entity_id: ID of the record acted upon
        metadata: Additional context as JSON
        commit: Commit immediately; pass False to join the caller's transaction

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        meta_data=metadata
    )

    db.add(audit_log)
    if commit:
        await db.commit()
        await db.refresh(audit_log)
    else:
        await db.flush()

    return audit_log


async def log_coercions(
    db: AsyncSession,
    entity_type: str,
    coercions: list[Dict[str, Any]],
    entity_id: Optional[str] = None
) -> None:
    """Record one AMOUNT_COERCED event per replaced input, inside the caller's transaction."""
    for coercion in coercions:
        await log_event(
            db=db,
            action=AuditAction.AMOUNT_COERCED,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata=coercion,
            commit=False
        )


async def get_audit_trail(
    db: AsyncSession,
    entity_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Args:
        db: Database session
        entity_id: Filter by entity ID
        action: Filter by action type
        limit: Maximum number of records to return

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if entity_id:
        query = query.where(AuditLog.entity_id == entity_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
