# finance_api/api/v1/routes/goals.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from finance_api.schemas.goal import (
    GoalContributionCreate,
    GoalContributionResult,
    GoalCreate,
    GoalPlanInput,
    GoalPlanPreview,
    GoalRead,
    GoalUpdate,
)
from finance_api.crud.goal import get_goals_for_user, get_goal_by_id
from finance_api.models.goal import Goal
from finance_api.core.database import get_async_session
from finance_api.core.auth import User
from finance_api.api.deps import get_current_user
from finance_api.utils.goals import (
    contribute_to_goal,
    create_goal_with_plan,
    delete_goal_with_plan,
    preview_plan,
    update_goal_with_plan,
)

router = APIRouter(prefix="/goals", tags=["goals"])

async def _get_owned_goal(goal_id: uuid.UUID, user: User, db: AsyncSession) -> Goal:
    goal = await get_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

@router.get("", response_model=List[GoalRead])
async def read_goals(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_goals_for_user(user.id, db)

@router.post("", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_in: GoalCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Create a savings goal.

    - **saving_strategy**: daily, weekly, monthly, quarterly, yearly or self-dependent
    - **target_date**: when supplied, the per-period contribution is derived from it
    - **periodic_contribution**: used when there is no target date; the date is derived

    Structured strategies also get a linked savings plan under the budgets collection.
    """
    goal, _ = await create_goal_with_plan(user, goal_in, db)
    return goal

@router.post("/plan/preview", response_model=GoalPlanPreview)
async def preview_goal_plan(
    plan_in: GoalPlanInput,
    request: Request,
    user: User = Depends(get_current_user),
):
    """Derive the missing side of a plan without saving anything."""
    return preview_plan(plan_in)

@router.get("/{goal_id}", response_model=GoalRead)
async def read_goal(
    goal_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _get_owned_goal(goal_id, user, db)

@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal(
    goal_id: uuid.UUID,
    goal_in: GoalUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await _get_owned_goal(goal_id, user, db)
    return await update_goal_with_plan(user, goal, goal_in, db)

@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await _get_owned_goal(goal_id, user, db)
    await delete_goal_with_plan(user, goal, db)
    return None

@router.post("/{goal_id}/contribute", response_model=GoalContributionResult)
async def contribute(
    goal_id: uuid.UUID,
    contribution_in: GoalContributionCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Move money from one of the user's accounts into the goal.

    Only what the goal still needs is taken from the account; the response
    reports both the requested and the applied amount.
    """
    goal = await _get_owned_goal(goal_id, user, db)
    return await contribute_to_goal(user, goal, contribution_in, db)
