# finance_api/utils/dashboard.py
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from finance_api.core.auth import User
from finance_api.crud.account import get_accounts_for_user
from finance_api.crud.budget import get_budgets_for_user
from finance_api.crud.goal import get_goals_for_user
from finance_api.crud.transaction import get_transactions_between
from finance_api.models.transaction import Transaction, TransactionType
from finance_api.utils.goal_planning import (
    derive_completion_date,
    goal_status,
    progress_percentage,
    utcnow,
)


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS – PERIODS
# ────────────────────────────────────────────────────────────────────────────────
def month_bounds(day: datetime) -> Tuple[datetime, datetime]:
    """[start, end) of the calendar month containing ``day``."""
    start = datetime(day.year, day.month, 1)
    return start, start + relativedelta(months=1)


def month_key(day: datetime) -> str:
    return f"{day.year:04d}-{day.month:02d}"


# ────────────────────────────────────────────────────────────────────────────────
# REDUCTIONS
# ────────────────────────────────────────────────────────────────────────────────
def summarize_income_expense(txns: Iterable[Transaction]) -> Dict[str, float]:
    txns = list(txns)
    income = sum(t.amount for t in txns if t.type == TransactionType.income)
    expense = sum(t.amount for t in txns if t.type == TransactionType.expense)
    return {"income": round(income, 2), "expense": round(expense, 2)}


def spending_by_category(txns: Iterable[Transaction]) -> List[Dict[str, float]]:
    totals: Dict[str, float] = defaultdict(float)
    for t in txns:
        if t.type == TransactionType.expense:
            totals[t.category or "Other"] += t.amount
    ordered = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [{"category": k, "amount": round(v, 2)} for k, v in ordered]


def monthly_overview(txns: Iterable[Transaction], now: datetime, months: int = 6) -> List[Dict[str, float]]:
    """Income/expense per calendar month for the last ``months`` months, oldest first."""
    first, _ = month_bounds(now - relativedelta(months=months - 1))
    buckets = {}
    for i in range(months):
        buckets[month_key(first + relativedelta(months=i))] = {"income": 0.0, "expense": 0.0}

    for t in txns:
        bucket = buckets.get(month_key(t.transaction_date))
        if bucket is None:
            continue
        bucket[t.type.value] += t.amount

    return [
        {"month": m, "income": round(v["income"], 2), "expense": round(v["expense"], 2)}
        for m, v in buckets.items()
    ]


# ────────────────────────────────────────────────────────────────────────────────
# MAIN ENTRY
# ────────────────────────────────────────────────────────────────────────────────
async def build_dashboard_summary(
    user: User,
    db: AsyncSession,
    months: int = 6,
    now: Optional[datetime] = None,
) -> Dict:
    now = now or utcnow()

    accounts = await get_accounts_for_user(user.id, db)
    budgets = await get_budgets_for_user(user.id, db)
    goals = await get_goals_for_user(user.id, db)

    window_start, _ = month_bounds(now - relativedelta(months=months - 1))
    _, window_end = month_bounds(now)
    transactions = await get_transactions_between(user.id, window_start, window_end, db)

    month_start, month_end = month_bounds(now)
    this_month = [t for t in transactions if month_start <= t.transaction_date < month_end]
    totals = summarize_income_expense(this_month)

    goal_rows = []
    for goal in goals:
        goal_rows.append({
            "id": goal.id,
            "name": goal.name,
            "target_amount": goal.target_amount,
            "current_amount": goal.current_amount,
            "progress_percentage": progress_percentage(goal.current_amount, goal.target_amount),
            "status": goal_status(goal.current_amount, goal.target_amount),
            "projected_completion_date": derive_completion_date(
                goal.target_amount,
                goal.current_amount,
                goal.saving_strategy,
                goal.periodic_contribution,
                now,
            ),
        })

    return {
        "currency": user.preferred_currency,
        "total_balance": round(sum(a.balance for a in accounts), 2),
        "total_saving_target": round(sum(b.amount for b in budgets), 2),
        "total_saved": round(sum(b.spent for b in budgets), 2),
        "monthly_income": totals["income"],
        "monthly_expense": totals["expense"],
        "spending_by_category": spending_by_category(this_month),
        "overview": monthly_overview(transactions, now, months),
        "goals": goal_rows,
    }
