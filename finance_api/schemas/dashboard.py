# finance_api/schemas/dashboard.py
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel
import uuid


class CategorySpending(BaseModel):
    category: str
    amount: float


class MonthlyOverview(BaseModel):
    month: str
    income: float
    expense: float


class GoalProgress(BaseModel):
    id: uuid.UUID
    name: str
    target_amount: float
    current_amount: float
    progress_percentage: float
    status: str
    projected_completion_date: Optional[datetime] = None


class DashboardSummary(BaseModel):
    currency: str
    total_balance: float
    total_saving_target: float
    total_saved: float
    monthly_income: float
    monthly_expense: float
    spending_by_category: List[CategorySpending]
    overview: List[MonthlyOverview]
    goals: List[GoalProgress]
