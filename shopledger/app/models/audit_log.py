"""
Audit Log Database Model.

Tracks ledger mutations and amount coercions for bookkeeping review.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from shopledger.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking ledger events.

    Events logged:
    - BILL_CREATED / BILL_UPDATED / BILL_DELETED
    - RENT_ESCALATED
    - PAYMENT_APPLIED / PAYMENT_REVERSED
    - RENTAL_UNIT_DELETED
    - DEPOSIT_CREATED
    - AMOUNT_COERCED (lenient parser replaced bad input with zero)
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which record it touched
    entity_type = Column(String(50), nullable=True, index=True)
    entity_id = Column(String(36), nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
