"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from shopledger.app.api.v1.endpoints import (
    rental_units, bills, payments, family, accounts, reports
)

router = APIRouter()

# Shops and billing
router.include_router(rental_units.router)
router.include_router(bills.router)
router.include_router(payments.router)

# Family budget
router.include_router(family.members_router)
router.include_router(family.expenses_router)
router.include_router(family.income_router)
router.include_router(family.deposits_router)

# Balances and reports
router.include_router(accounts.router)
router.include_router(reports.router)
