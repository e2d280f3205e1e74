# finance_api/utils/goals.py
"""
Goal orchestration.

Each public coroutine here is one logical operation: every row it touches
(goal, linked savings record, account, transaction, notifications) is staged
in the same session and committed once, so a failure leaves nothing
half-applied.
"""
import logging
import uuid
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from finance_api.core.auth import User
from finance_api.core.db_utils import commit_or_rollback
from finance_api.core.exceptions import (
    ConflictError,
    GoalReachedError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from finance_api.crud.account import adjust_balance, get_account_by_id
from finance_api.crud.budget import get_budget_by_category, get_budget_for_goal, new_budget
from finance_api.crud.transaction import add_transaction
from finance_api.models.budget import Budget
from finance_api.models.goal import Goal, SavingStrategy
from finance_api.models.transaction import TransactionType
from finance_api.schemas.goal import (
    GoalContributionCreate,
    GoalCreate,
    GoalPlanInput,
    GoalPlanPreview,
    GoalUpdate,
)
from finance_api.utils.goal_planning import (
    GOAL_REACHED,
    count_periods,
    goal_category,
    goal_status,
    reconcile_plan,
    round_currency,
    utcnow,
    validate_goal_values,
)
from finance_api.utils.notifications import (
    notify_goal_added,
    notify_goal_contribution,
    notify_goal_reached,
    push_notifications,
)

logger = logging.getLogger(__name__)

SAVINGS_CATEGORY = "Savings"


async def _ensure_label_free(user_id: uuid.UUID, name: str, db: AsyncSession) -> None:
    existing = await get_budget_by_category(goal_category(name), user_id, db)
    if existing is not None:
        raise ConflictError(f'A savings plan named "{goal_category(name)}" already exists.')


def preview_plan(plan_in: GoalPlanInput, now=None) -> GoalPlanPreview:
    """Recompute the derived side of a plan without persisting anything."""
    now = now or utcnow()
    target_date, contribution = reconcile_plan(
        plan_in.target_amount,
        plan_in.current_amount,
        plan_in.saving_strategy,
        plan_in.target_date,
        plan_in.periodic_contribution,
        now,
    )
    periods = None
    if target_date is not None:
        periods = max(0, count_periods(plan_in.saving_strategy, now, target_date))
    return GoalPlanPreview(
        saving_strategy=plan_in.saving_strategy,
        target_date=target_date,
        periodic_contribution=contribution,
        remaining_amount=round_currency(max(0.0, plan_in.target_amount - plan_in.current_amount)),
        periods_remaining=periods,
    )


async def create_goal_with_plan(
    user: User,
    goal_in: GoalCreate,
    db: AsyncSession,
) -> Tuple[Goal, Optional[Budget]]:
    """Persist a goal and, for structured strategies, its linked savings record."""
    now = utcnow()
    name = goal_in.name.strip()
    validate_goal_values(
        name,
        goal_in.target_amount,
        goal_in.current_amount,
        goal_in.saving_strategy,
        goal_in.target_date,
        goal_in.periodic_contribution,
        now,
    )
    target_date, contribution = reconcile_plan(
        goal_in.target_amount,
        goal_in.current_amount,
        goal_in.saving_strategy,
        goal_in.target_date,
        goal_in.periodic_contribution,
        now,
    )

    structured = goal_in.saving_strategy != SavingStrategy.self_dependent
    if structured:
        await _ensure_label_free(user.id, name, db)

    goal = Goal(
        id=uuid.uuid4(),
        user_id=user.id,
        name=name,
        target_amount=goal_in.target_amount,
        current_amount=goal_in.current_amount,
        saving_strategy=goal_in.saving_strategy,
        target_date=target_date,
        periodic_contribution=contribution,
        created_at=now,
        updated_at=now,
    )
    db.add(goal)
    await db.flush()

    linked = None
    if structured:
        linked = new_budget(user.id, goal_category(name), contribution, goal_id=goal.id)
        db.add(linked)

    notification = await notify_goal_added(db, user.id, name)
    await commit_or_rollback(db, "create goal")
    logger.info(f"Goal {goal.id} created for user {user.id} (strategy={goal.saving_strategy.value})")

    await push_notifications(user.id, [notification])
    return goal, linked


async def update_goal_with_plan(
    user: User,
    goal: Goal,
    goal_in: GoalUpdate,
    db: AsyncSession,
) -> Goal:
    """Apply edited values, re-derive the plan and re-sync the linked record."""
    now = utcnow()
    changes = goal_in.model_dump(exclude_unset=True)

    new_name = changes.pop("name", None)
    if new_name is not None and new_name.strip() != goal.name:
        raise ValidationError("Goal name cannot be changed after creation.", field="name")

    target = changes.get("target_amount") or goal.target_amount
    current = changes["current_amount"] if changes.get("current_amount") is not None else goal.current_amount
    strategy = changes.get("saving_strategy") or goal.saving_strategy

    # A newly supplied contribution drives unless a target date came with it
    target_date = changes.get("target_date")
    contribution = None
    if target_date is None:
        supplied = changes.get("periodic_contribution")
        if supplied is not None and supplied > 0:
            contribution = supplied
        else:
            target_date = goal.target_date

    validate_goal_values(goal.name, target, current, strategy, target_date, contribution, now)
    target_date, contribution = reconcile_plan(target, current, strategy, target_date, contribution, now)

    goal.target_amount = target
    goal.current_amount = current
    goal.saving_strategy = strategy
    goal.target_date = target_date
    goal.periodic_contribution = contribution
    goal.updated_at = now

    linked = await get_budget_for_goal(goal.id, user.id, db)
    if strategy != SavingStrategy.self_dependent:
        if linked is None:
            await _ensure_label_free(user.id, goal.name, db)
            db.add(new_budget(user.id, goal_category(goal.name), contribution, goal_id=goal.id))
        else:
            linked.amount = contribution
            linked.updated_at = now
    elif linked is not None:
        await db.delete(linked)

    await commit_or_rollback(db, "update goal")
    logger.info(f"Goal {goal.id} updated for user {user.id}")
    return goal


async def delete_goal_with_plan(user: User, goal: Goal, db: AsyncSession) -> None:
    """Delete a goal together with the savings record that references it."""
    linked = await get_budget_for_goal(goal.id, user.id, db)
    if linked is not None:
        await db.delete(linked)
        await db.flush()
    await db.delete(goal)
    await commit_or_rollback(db, "delete goal")
    logger.info(f"Goal {goal.id} deleted for user {user.id} (linked plan removed: {linked is not None})")


async def contribute_to_goal(
    user: User,
    goal: Goal,
    contribution_in: GoalContributionCreate,
    db: AsyncSession,
) -> Dict[str, Any]:
    """
    Move funds from an account into a goal.

    The applied amount is capped at what the goal still needs, so the goal's
    current amount never passes its target. All checks run before anything is
    written.
    """
    if goal_status(goal.current_amount, goal.target_amount) == GOAL_REACHED:
        raise GoalReachedError(f'The "{goal.name}" goal has already been reached.', field="amount")

    account = await get_account_by_id(contribution_in.from_account_id, user.id, db)
    if account is None:
        raise NotFoundError("Account", "The selected source account was not found.")

    requested = round_currency(contribution_in.amount)
    applied = round_currency(min(requested, goal.target_amount - goal.current_amount))
    if account.balance < applied:
        raise InsufficientFundsError(account.name, account.balance, applied)

    linked = None
    if goal.is_structured:
        linked = await get_budget_for_goal(goal.id, user.id, db)
        if linked is None:
            raise NotFoundError("Savings plan", f'The savings plan linked to "{goal.name}" was not found.')

    now = utcnow()
    goal.current_amount = min(goal.target_amount, round_currency(goal.current_amount + applied))
    _, goal.periodic_contribution = reconcile_plan(
        goal.target_amount,
        goal.current_amount,
        goal.saving_strategy,
        goal.target_date,
        goal.periodic_contribution,
        now,
    )
    goal.updated_at = now

    balance = adjust_balance(account, -applied)

    if linked is not None:
        linked.spent = round_currency((linked.spent or 0.0) + applied)
        linked.amount = goal.periodic_contribution
        linked.updated_at = now

    tx = await add_transaction(
        user.id,
        db,
        description=f"Contribution to goal: {goal.name}",
        amount=applied,
        tx_type=TransactionType.expense,
        category=SAVINGS_CATEGORY,
        account_id=account.id,
        transaction_date=now,
    )

    currency = account.currency or user.preferred_currency
    notifications = [await notify_goal_contribution(db, user.id, goal.name, applied, currency)]
    status = goal_status(goal.current_amount, goal.target_amount)
    if status == GOAL_REACHED:
        notifications.append(await notify_goal_reached(db, user.id, goal.name, goal.target_amount, currency))

    await commit_or_rollback(db, "contribute to goal")
    logger.info(f"Contributed {applied} (requested {requested}) to goal {goal.id} from account {account.id}")

    await push_notifications(user.id, notifications)
    return {
        "goal": goal,
        "requested_amount": requested,
        "applied_amount": applied,
        "account_balance": balance,
        "status": status,
        "linked_budget": linked,
        "transaction_id": tx.id,
    }
