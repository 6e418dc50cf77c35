"""
Family budget database models.

Family expenses, income and bank deposits are leaf ledger entries; the
account balance engine aggregates them together with business payments.
"""

from sqlalchemy import Column, String, Numeric, Date, DateTime, Enum, Boolean, Text
from sqlalchemy.sql import func
from shopledger.app.db.session import Base, generate_id
from shopledger.app.models.ledger_enums import (
    ExpenseCategory, IncomeSource, FamilyPaymentMethod, DepositSource, FamilyRelation
)


class FamilyMember(Base):
    """
    Family member model.

    Inactive members stay on record but cannot be picked for new entries.
    Names are unique case-insensitively (enforced by the members service).
    """
    __tablename__ = "family_members"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False, index=True)
    relation = Column(Enum(FamilyRelation), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<FamilyMember(id={self.id}, name='{self.name}', active={self.is_active})>"


class FamilyExpense(Base):
    __tablename__ = "family_expenses"

    id = Column(String(36), primary_key=True, default=generate_id)
    category = Column(Enum(ExpenseCategory), nullable=False, index=True)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    paid_by = Column(String(100), nullable=False)
    payment_method = Column(Enum(FamilyPaymentMethod), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<FamilyExpense(id={self.id}, category='{self.category.value}', amount={self.amount})>"


class FamilyIncome(Base):
    __tablename__ = "family_income"

    id = Column(String(36), primary_key=True, default=generate_id)
    source = Column(Enum(IncomeSource), nullable=False, index=True)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    received_by = Column(String(100), nullable=False)
    payment_method = Column(Enum(FamilyPaymentMethod), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<FamilyIncome(id={self.id}, source='{self.source.value}', amount={self.amount})>"


class BankDeposit(Base):
    """
    Bank deposit model.

    Money leaving a tracked account into an untracked bank account; always a
    debit against the source account.
    """
    __tablename__ = "bank_deposits"

    id = Column(String(36), primary_key=True, default=generate_id)
    amount = Column(Numeric(12, 2), nullable=False)
    from_account = Column(Enum(DepositSource), nullable=False, index=True)
    bank_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<BankDeposit(id={self.id}, from='{self.from_account.value}', amount={self.amount})>"
