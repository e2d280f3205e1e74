# finance_api/crud/budget.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from finance_api.models.budget import Budget
from finance_api.core.db_utils import with_db_retry
from finance_api.utils.goal_planning import utcnow
from typing import List, Optional
import uuid
from finance_api.schemas.budget import BudgetCreate, BudgetUpdate

@with_db_retry()
async def get_budgets_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Budget]:
    result = await db.execute(
        select(Budget).where(Budget.user_id == user_id).order_by(Budget.created_at)
    )
    return result.scalars().all()

@with_db_retry()
async def get_budget_by_id(budget_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Budget]:
    result = await db.execute(
        select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
    )
    return result.scalar_one_or_none()

@with_db_retry()
async def get_budget_by_category(category: str, user_id: uuid.UUID, db: AsyncSession) -> Optional[Budget]:
    """Case-insensitive lookup of a budget by its category label."""
    result = await db.execute(
        select(Budget).where(
            Budget.user_id == user_id,
            func.lower(Budget.category) == func.lower(category),
        )
    )
    return result.scalars().first()

@with_db_retry()
async def get_budget_for_goal(goal_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Budget]:
    """The savings record linked to a goal, found by its goal_id reference."""
    result = await db.execute(
        select(Budget).where(Budget.goal_id == goal_id, Budget.user_id == user_id)
    )
    return result.scalar_one_or_none()

def new_budget(
    user_id: uuid.UUID,
    category: str,
    amount: float,
    *,
    spent: float = 0.0,
    goal_id: Optional[uuid.UUID] = None,
) -> Budget:
    now = utcnow()
    return Budget(
        user_id=user_id,
        category=category,
        amount=amount,
        spent=spent,
        is_goal=goal_id is not None,
        goal_id=goal_id,
        created_at=now,
        updated_at=now,
    )

async def create_budget_for_user(user_id: uuid.UUID, budget_in: BudgetCreate, db: AsyncSession) -> Budget:
    budget = new_budget(user_id, budget_in.category, budget_in.amount)
    db.add(budget)
    await db.commit()
    await db.refresh(budget)
    return budget

async def update_budget(budget: Budget, budget_in: BudgetUpdate, db: AsyncSession) -> Budget:
    for field, value in budget_in.model_dump(exclude_unset=True).items():
        setattr(budget, field, value)
    budget.updated_at = utcnow()
    db.add(budget)
    await db.commit()
    await db.refresh(budget)
    return budget

async def delete_budget(budget: Budget, db: AsyncSession) -> None:
    await db.delete(budget)
    await db.commit()
