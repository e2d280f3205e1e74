# finance_api/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc
from finance_api.models.transaction import Transaction, TransactionType
from finance_api.core.db_utils import with_db_retry
from finance_api.utils.goal_planning import utcnow
from typing import List, Optional
from datetime import datetime
import uuid

@with_db_retry()
async def get_transactions_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    tx_type: Optional[TransactionType] = None,
    category: Optional[str] = None,
    account_id: Optional[uuid.UUID] = None,
) -> List[Transaction]:
    """Newest first, optionally filtered by type, category or account."""
    query = select(Transaction).where(Transaction.user_id == user_id)
    if tx_type is not None:
        query = query.where(Transaction.type == tx_type)
    if category:
        query = query.where(Transaction.category == category)
    if account_id is not None:
        query = query.where(Transaction.account_id == account_id)
    result = await db.execute(query.order_by(desc(Transaction.transaction_date)))
    return result.scalars().all()

@with_db_retry()
async def get_transactions_between(
    user_id: uuid.UUID,
    start: datetime,
    end: datetime,
    db: AsyncSession,
) -> List[Transaction]:
    result = await db.execute(
        select(Transaction).where(
            Transaction.user_id == user_id,
            Transaction.transaction_date >= start,
            Transaction.transaction_date < end,
        )
    )
    return result.scalars().all()

@with_db_retry()
async def get_transaction_by_id(transaction_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def add_transaction(
    user_id: uuid.UUID,
    db: AsyncSession,
    *,
    description: str,
    amount: float,
    tx_type: TransactionType,
    category: str,
    account_id: Optional[uuid.UUID],
    transaction_date: Optional[datetime] = None,
) -> Transaction:
    """Stage a transaction in the session and flush it; the caller commits."""
    now = utcnow()
    tx = Transaction(
        user_id=user_id,
        description=description,
        amount=amount,
        type=tx_type,
        category=category,
        account_id=account_id,
        transaction_date=transaction_date or now,
        created_at=now,
        updated_at=now,
    )
    db.add(tx)
    await db.flush()
    return tx

async def delete_transaction(tx: Transaction, db: AsyncSession) -> None:
    await db.delete(tx)
    await db.commit()
