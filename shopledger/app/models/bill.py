"""
Bill and Bill Item database models.

One bill is one invoice cycle's line items and payment state for a rental unit.
"""

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shopledger.app.db.session import Base, generate_id
from shopledger.app.models.ledger_enums import BillStatus


class Bill(Base):
    """
    Bill model.

    Running payment state is kept on the row and maintained by the ledger
    service under a per-bill lock:
        remaining == total - paid
        status == PAID iff remaining <= 0
    """
    __tablename__ = "bills"

    id = Column(String(36), primary_key=True, default=generate_id)

    rental_unit_id = Column(String(36), ForeignKey('rental_units.id'), nullable=False, index=True)

    bill_number = Column(String(50), unique=True, nullable=False, index=True)
    bill_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)

    # Financials
    total = Column(Numeric(12, 2), nullable=False, default=0)
    paid = Column(Numeric(12, 2), nullable=False, default=0)
    remaining = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(Enum(BillStatus), default=BillStatus.PENDING, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "BillItem",
        order_by="BillItem.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Bill(id={self.id}, number='{self.bill_number}', status='{self.status.value}', remaining={self.remaining})>"


class BillItem(Base):
    """Ordered line item on a bill."""
    __tablename__ = "bill_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    bill_id = Column(String(36), ForeignKey('bills.id', ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    def __repr__(self):
        return f"<BillItem(bill_id={self.bill_id}, description='{self.description}', amount={self.amount})>"
