"""
Account balance response schemas.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from shopledger.app.models.ledger_enums import AccountBucket


class AvailableBalanceResponse(BaseModel):
    account: AccountBucket
    available: Decimal
    exclude_expense_id: Optional[str] = None
    exclude_income_id: Optional[str] = None
    exclude_deposit_id: Optional[str] = None
