# finance_api/api/v1/routes/budgets.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from finance_api.schemas.budget import BudgetCreate, BudgetRead, BudgetUpdate
from finance_api.crud.budget import (
    create_budget_for_user,
    get_budgets_for_user,
    get_budget_by_id,
    get_budget_by_category,
    update_budget,
    delete_budget,
)
from finance_api.models.budget import Budget
from finance_api.core.database import get_async_session
from finance_api.core.auth import User
from finance_api.core.exceptions import ConflictError
from finance_api.api.deps import get_current_user

router = APIRouter(prefix="/budgets", tags=["budgets"])

async def _get_owned_budget(budget_id: uuid.UUID, user: User, db: AsyncSession) -> Budget:
    budget = await get_budget_by_id(budget_id, user.id, db)
    if not budget:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return budget

def _ensure_not_goal_linked(budget: Budget) -> None:
    # Goal-linked savings plans change only through their goal
    if budget.goal_id is not None or budget.is_goal:
        raise ConflictError(
            f'"{budget.category}" is linked to a goal. Edit or delete the goal instead.'
        )

@router.get("", response_model=List[BudgetRead])
async def read_budgets(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_budgets_for_user(user.id, db)

@router.post("", response_model=BudgetRead, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget_in: BudgetCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget_in.category = budget_in.category.strip()
    if await get_budget_by_category(budget_in.category, user.id, db):
        raise ConflictError(f'A budget for "{budget_in.category}" already exists.')
    return await create_budget_for_user(user.id, budget_in, db)

@router.get("/{budget_id}", response_model=BudgetRead)
async def read_budget(
    budget_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _get_owned_budget(budget_id, user, db)

@router.patch("/{budget_id}", response_model=BudgetRead)
async def update_budget_endpoint(
    budget_id: uuid.UUID,
    budget_in: BudgetUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await _get_owned_budget(budget_id, user, db)
    _ensure_not_goal_linked(budget)

    if budget_in.category is not None:
        budget_in.category = budget_in.category.strip()
        existing = await get_budget_by_category(budget_in.category, user.id, db)
        if existing is not None and existing.id != budget.id:
            raise ConflictError(f'A budget for "{budget_in.category}" already exists.')
    return await update_budget(budget, budget_in, db)

@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget_endpoint(
    budget_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    budget = await _get_owned_budget(budget_id, user, db)
    _ensure_not_goal_linked(budget)
    await delete_budget(budget, db)
    return None
