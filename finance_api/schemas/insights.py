# finance_api/schemas/insights.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class TipAction(BaseModel):
    type: Literal["navigate", "open_dialog"]
    payload: str = Field(..., description='A path such as "/dashboard/budgets" or a dialog such as "add_goal"')


class FinancialTip(BaseModel):
    tip: str
    action: Optional[TipAction] = None


class FinancialTipsRequest(BaseModel):
    starred_tips: List[str] = Field(default_factory=list, description="Tips the user already starred; similar ones are skipped")


class FinancialTipsResponse(BaseModel):
    tips: List[FinancialTip] = Field(default_factory=list)
    message: Optional[str] = None


class CategorySuggestionRequest(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float
    account_type: str = "bank"


class CategorySuggestion(BaseModel):
    category: str = ""
    confidence: float = Field(0.0, ge=0.0, le=1.0)
