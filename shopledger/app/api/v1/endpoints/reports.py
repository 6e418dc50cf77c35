"""
Reporting API Endpoints.
"""

from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.app.db.session import get_db
from shopledger.app.services.reports import ReportsService, DashboardSummary, MemberSummary, MonthSummary

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    as_of: Optional[date] = Query(None, description="Evaluate penalties as of this date"),
    db: AsyncSession = Depends(get_db)
):
    now = datetime.combine(as_of, time.min) if as_of else None
    return await ReportsService.dashboard(db, now)


@router.get("/members", response_model=List[MemberSummary])
async def get_member_summary(db: AsyncSession = Depends(get_db)):
    return await ReportsService.members(db)


@router.get("/monthly", response_model=List[MonthSummary])
async def get_monthly_summary(db: AsyncSession = Depends(get_db)):
    """Last twelve months with activity, newest first."""
    return await ReportsService.monthly(db)
