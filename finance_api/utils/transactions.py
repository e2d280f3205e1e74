# finance_api/utils/transactions.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from finance_api.core.auth import User
from finance_api.core.db_utils import commit_or_rollback
from finance_api.core.exceptions import NotFoundError
from finance_api.crud.account import adjust_balance, get_account_by_id
from finance_api.crud.budget import get_budget_by_category
from finance_api.crud.transaction import add_transaction
from finance_api.models.transaction import Transaction, TransactionType
from finance_api.schemas.transaction import TransactionCreate
from finance_api.utils.goal_planning import as_naive_utc, round_currency, utcnow
from finance_api.utils.notifications import notify_transaction_recorded, push_notifications

logger = logging.getLogger(__name__)


async def record_transaction(user: User, tx_in: TransactionCreate, db: AsyncSession) -> Transaction:
    """
    Add a transaction and apply it to its account in one commit.

    Income credits the account, expenses debit it. An expense also counts
    towards the user's plain budget for the same category; goal-linked
    savings plans only move through goal contributions.
    """
    account = await get_account_by_id(tx_in.account_id, user.id, db)
    if account is None:
        raise NotFoundError("Account", "Selected account not found.")

    amount = round_currency(tx_in.amount)
    is_income = tx_in.type == TransactionType.income

    tx = await add_transaction(
        user.id,
        db,
        description=tx_in.description.strip(),
        amount=amount,
        tx_type=tx_in.type,
        category=tx_in.category.strip(),
        account_id=account.id,
        transaction_date=as_naive_utc(tx_in.transaction_date),
    )
    adjust_balance(account, amount if is_income else -amount)

    if not is_income:
        budget = await get_budget_by_category(tx.category, user.id, db)
        if budget is not None and not budget.is_goal:
            budget.spent = round_currency((budget.spent or 0.0) + amount)
            budget.updated_at = utcnow()

    currency = account.currency or user.preferred_currency
    notification = await notify_transaction_recorded(db, user.id, tx.description, amount, is_income, currency)

    await commit_or_rollback(db, "record transaction")
    logger.info(f"Recorded {tx.type.value} {amount} on account {account.id} for user {user.id}")

    await push_notifications(user.id, [notification])
    return tx
