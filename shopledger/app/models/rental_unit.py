"""
Rental Unit database model.

A rental unit is a leased shop that generates monthly rent bills.
"""

from sqlalchemy import Column, String, Numeric, Date, DateTime
from sqlalchemy.sql import func
from shopledger.app.db.session import Base, generate_id


class RentalUnit(Base):
    """
    Rental Unit model.

    Rent escalation mutates monthly_rent and last_rent_update when a bill is
    created in an increase-eligible month.
    Invariant: last_rent_update >= rent_start_date.
    """
    __tablename__ = "rental_units"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Tenant details
    name = Column(String(200), nullable=False)
    owner = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=False)
    address = Column(String(500), nullable=False)

    # Financials
    monthly_rent = Column(Numeric(12, 2), nullable=False, default=0)
    electricity_rate = Column(Numeric(12, 2), nullable=False, default=0)
    yearly_increase_percentage = Column(Numeric(6, 2), nullable=True)

    # Escalation tracking
    rent_start_date = Column(Date, nullable=True)
    last_rent_update = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<RentalUnit(id={self.id}, name='{self.name}', rent={self.monthly_rent})>"
