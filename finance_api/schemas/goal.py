# finance_api/schemas/goal.py
from typing import Optional
from pydantic import BaseModel, Field, computed_field
from datetime import datetime
import uuid

from finance_api.models.goal import SavingStrategy
from finance_api.schemas.budget import BudgetRead
from finance_api.utils.goal_planning import goal_status, progress_percentage

class GoalPlanInput(BaseModel):
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(0.0, ge=0)
    saving_strategy: SavingStrategy = SavingStrategy.monthly
    target_date: Optional[datetime] = Field(None, description="Drives the plan when supplied")
    periodic_contribution: Optional[float] = Field(None, ge=0, description="Drives the plan when no target date is supplied")

class GoalCreate(GoalPlanInput):
    name: str = Field(..., min_length=2, description="E.g. New Graphics Card")

class GoalUpdate(BaseModel):
    # Accepted only when unchanged; goal names are fixed at creation
    name: Optional[str] = None
    target_amount: Optional[float] = Field(None, gt=0)
    current_amount: Optional[float] = Field(None, ge=0)
    saving_strategy: Optional[SavingStrategy] = None
    target_date: Optional[datetime] = None
    periodic_contribution: Optional[float] = Field(None, ge=0)

class GoalRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    target_amount: float
    current_amount: float
    saving_strategy: SavingStrategy
    target_date: Optional[datetime] = None
    periodic_contribution: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def status(self) -> str:
        return goal_status(self.current_amount, self.target_amount)

    @computed_field
    @property
    def progress_percentage(self) -> float:
        return progress_percentage(self.current_amount, self.target_amount)

    class Config:
        from_attributes = True

class GoalPlanPreview(BaseModel):
    saving_strategy: SavingStrategy
    target_date: Optional[datetime] = None
    periodic_contribution: float
    remaining_amount: float
    periods_remaining: Optional[int] = None

class GoalContributionCreate(BaseModel):
    amount: float = Field(..., gt=0, description="Contribution amount")
    from_account_id: uuid.UUID = Field(..., description="Account the funds come from")

class GoalContributionResult(BaseModel):
    goal: GoalRead
    requested_amount: float
    applied_amount: float
    account_balance: float
    status: str
    linked_budget: Optional[BudgetRead] = None
    transaction_id: uuid.UUID
