# finance_api/api/v1/routes/dashboard.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from finance_api.core.database import get_async_session
from finance_api.core.auth import User
from finance_api.api.deps import get_current_user
from finance_api.schemas.dashboard import DashboardSummary
from finance_api.utils.dashboard import build_dashboard_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    months: int = Query(6, ge=1, le=24, description="Length of the monthly overview series"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Returns the figures behind the dashboard cards and charts:
    - Cards: total balance, savings target vs. saved, this month's income and expense
    - Charts: spending by category, monthly income/expense overview
    - Goals: progress, status and projected completion date per goal
    """
    return await build_dashboard_summary(user, db, months=months)
