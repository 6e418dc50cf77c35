"""
Payment database model.

A payment either settles part of a bill or, with no bill reference, is an
advance (general) payment credited to the rental unit.
"""

from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, Enum, Boolean, Text
from sqlalchemy.sql import func
from shopledger.app.db.session import Base, generate_id
from shopledger.app.models.ledger_enums import PaymentMethod


class Payment(Base):
    """
    Payment model.

    Creating a payment applies it to its bill; deleting it reverses that effect.
    Payments are never edited in place.
    """
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Linkage
    bill_id = Column(String(36), ForeignKey('bills.id'), nullable=True, index=True)
    rental_unit_id = Column(String(36), ForeignKey('rental_units.id'), nullable=False, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    method = Column(Enum(PaymentMethod), nullable=False, index=True)
    reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    is_advance = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Payment(id={self.id}, bill_id={self.bill_id}, amount={self.amount}, method='{self.method.value}')>"
