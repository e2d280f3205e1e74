# finance_api/schemas/budget.py
from typing import Optional
from pydantic import BaseModel, Field
import uuid

class BudgetBase(BaseModel):
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, description="Target per period")

class BudgetCreate(BudgetBase):
    pass

class BudgetUpdate(BaseModel):
    category: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)

class BudgetRead(BudgetBase):
    id: uuid.UUID
    user_id: uuid.UUID
    spent: float
    is_goal: bool
    goal_id: Optional[uuid.UUID] = None

    class Config:
        from_attributes = True
