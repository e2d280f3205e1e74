# finance_api/api/v1/routes/insights.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from finance_api.core.database import get_async_session
from finance_api.core.auth import User
from finance_api.core.exceptions import RemoteWriteFailure
from finance_api.api.deps import get_current_user
from finance_api.schemas.insights import (
    CategorySuggestion,
    CategorySuggestionRequest,
    FinancialTipsRequest,
    FinancialTipsResponse,
)
from finance_api.utils.insights import build_spending_summary, get_financial_tips, suggest_category

router = APIRouter(prefix="/insights", tags=["insights"])
logger = logging.getLogger(__name__)

@router.post("/tips", response_model=FinancialTipsResponse)
async def financial_tips(
    request: Request,
    tips_in: Optional[FinancialTipsRequest] = None,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Personalized saving tips built from the user's budgets and this month's income."""
    spending_data, income = await build_spending_summary(user, db)
    starred = tips_in.starred_tips if tips_in else []
    tips = await get_financial_tips(spending_data, income, starred)
    if tips is None:
        logger.warning(f"No financial tips could be generated for user {user.id}")
        raise RemoteWriteFailure(
            "We couldn't generate tips right now. Please try again later.",
            operation="financial tips",
        )
    return tips

@router.post("/categorize", response_model=CategorySuggestion)
async def categorize_transaction(
    suggestion_in: CategorySuggestionRequest,
    request: Request,
    user: User = Depends(get_current_user),
):
    """Suggest a category for a transaction; an empty category means no suggestion."""
    return await suggest_category(
        suggestion_in.description,
        suggestion_in.amount,
        suggestion_in.account_type,
    )
