# finance_api/utils/goal_planning.py
"""
Savings-plan arithmetic for goals.

Everything here is a pure function of its arguments: callers pass ``now``
explicitly when they need reproducible results, otherwise the current UTC
time is used. Money is handled as floats at the edges and rounded half-up to
cents through ``Decimal``.
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from finance_api.core.exceptions import ValidationError
from finance_api.models.goal import SavingStrategy

GOAL_ACTIVE = "active"
GOAL_REACHED = "reached"

GOAL_CATEGORY_PREFIX = "Goal: "

MIN_GOAL_NAME_LENGTH = 2

Cadence = Union[SavingStrategy, str]


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS – COMMON
# ────────────────────────────────────────────────────────────────────────────────
def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def round_currency(amount: float) -> float:
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def goal_category(name: str) -> str:
    """Display label of the savings record generated for a goal."""
    return f"{GOAL_CATEGORY_PREFIX}{name}"


def _strategy(cadence: Cadence) -> SavingStrategy:
    return cadence if isinstance(cadence, SavingStrategy) else SavingStrategy(cadence)


# ────────────────────────────────────────────────────────────────────────────────
# CALENDAR ARITHMETIC
# ────────────────────────────────────────────────────────────────────────────────
def count_periods(cadence: Cadence, start: datetime, end: datetime) -> int:
    """Whole cadence periods between ``start`` and ``end`` (negative if end < start)."""
    cadence = _strategy(cadence)
    if cadence == SavingStrategy.self_dependent:
        return 0

    if cadence in (SavingStrategy.daily, SavingStrategy.weekly):
        days = (end - start).days
        return days if cadence == SavingStrategy.daily else int(days / 7)

    delta = relativedelta(end, start)
    months = delta.years * 12 + delta.months
    if cadence == SavingStrategy.monthly:
        return months
    if cadence == SavingStrategy.quarterly:
        return int(months / 3)
    return delta.years


def advance_by_periods(cadence: Cadence, start: datetime, periods: int) -> datetime:
    """Move ``start`` forward by whole cadence periods, staying on valid calendar dates."""
    cadence = _strategy(cadence)
    steps = {
        SavingStrategy.daily: relativedelta(days=periods),
        SavingStrategy.weekly: relativedelta(weeks=periods),
        SavingStrategy.monthly: relativedelta(months=periods),
        SavingStrategy.quarterly: relativedelta(months=3 * periods),
        SavingStrategy.yearly: relativedelta(years=periods),
    }
    if cadence not in steps:
        raise ValueError(f"Cadence {cadence.value} has no calendar step")
    return start + steps[cadence]


# ────────────────────────────────────────────────────────────────────────────────
# CONTRIBUTION / DATE RECONCILIATION
# ────────────────────────────────────────────────────────────────────────────────
def derive_contribution(
    target: float,
    current: float,
    cadence: Cadence,
    deadline: Optional[datetime],
    now: Optional[datetime] = None,
) -> float:
    """
    Per-period contribution needed to reach ``target`` by ``deadline``.

    Returns 0.0 for self-dependent goals and goals already met. When the
    deadline is missing, passed, or inside the current period the whole
    remaining amount is due in the next period.
    """
    if _strategy(cadence) == SavingStrategy.self_dependent:
        return 0.0

    remaining = target - current
    if remaining <= 0:
        return 0.0

    if deadline is None:
        return round_currency(remaining)

    periods = count_periods(cadence, as_naive_utc(now) or utcnow(), as_naive_utc(deadline))
    if periods <= 0:
        return round_currency(remaining)

    return round_currency(remaining / periods)


def derive_completion_date(
    target: float,
    current: float,
    cadence: Cadence,
    contribution: Optional[float],
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """Projected completion date when saving ``contribution`` every period."""
    if _strategy(cadence) == SavingStrategy.self_dependent:
        return None

    remaining = target - current
    if remaining <= 0 or not contribution or contribution <= 0:
        return None

    # Ceiling so the plan never under-shoots the target; Decimal keeps exact multiples whole
    quotient = Decimal(str(round_currency(remaining))) / Decimal(str(contribution))
    periods_needed = int(quotient.to_integral_value(rounding=ROUND_CEILING))
    return advance_by_periods(cadence, as_naive_utc(now) or utcnow(), periods_needed)


def reconcile_plan(
    target: float,
    current: float,
    cadence: Cadence,
    target_date: Optional[datetime] = None,
    contribution: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Tuple[Optional[datetime], float]:
    """
    Derive the missing side of a savings plan.

    A target date drives when present; otherwise a positive contribution
    drives and the completion date is projected from it. Returns
    ``(target_date, periodic_contribution)``.
    """
    if _strategy(cadence) == SavingStrategy.self_dependent:
        return None, 0.0

    target_date = as_naive_utc(target_date)
    if target_date is not None:
        return target_date, derive_contribution(target, current, cadence, target_date, now)

    if contribution and contribution > 0:
        if target - current <= 0:
            return None, 0.0
        projected = derive_completion_date(target, current, cadence, contribution, now)
        return projected, round_currency(contribution)

    return None, derive_contribution(target, current, cadence, None, now)


def goal_status(current: float, target: float) -> str:
    return GOAL_REACHED if current >= target else GOAL_ACTIVE


def progress_percentage(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return round(min(100.0, current / target * 100.0), 2)


# ────────────────────────────────────────────────────────────────────────────────
# VALIDATION
# ────────────────────────────────────────────────────────────────────────────────
def validate_goal_values(
    name: str,
    target: float,
    current: float,
    cadence: Cadence,
    target_date: Optional[datetime],
    contribution: Optional[float],
    now: Optional[datetime] = None,
) -> None:
    """Raise ValidationError when a goal's values break a planning rule."""
    if not name or len(name.strip()) < MIN_GOAL_NAME_LENGTH:
        raise ValidationError("Goal name must be at least 2 characters.", field="name")
    if target is None or target <= 0:
        raise ValidationError("Target amount must be positive.", field="target_amount")
    if current is None or current < 0:
        raise ValidationError("Current amount cannot be negative.", field="current_amount")
    if current > target:
        raise ValidationError("Current amount cannot be greater than the target amount.", field="current_amount")

    if _strategy(cadence) == SavingStrategy.self_dependent:
        return

    if target_date is not None:
        if as_naive_utc(target_date) <= (as_naive_utc(now) or utcnow()):
            raise ValidationError(
                "Target date must be in the future for a structured saving plan.",
                field="target_date",
            )
    elif not contribution or contribution <= 0:
        raise ValidationError(
            "A structured saving plan needs a future target date or a positive contribution per period.",
            field="target_date",
        )
