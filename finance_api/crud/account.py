# finance_api/crud/account.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from finance_api.models.account import Account
from finance_api.core.db_utils import with_db_retry
from finance_api.utils.goal_planning import utcnow
from typing import List, Optional
import uuid
from finance_api.schemas.account import AccountCreate, AccountUpdate

@with_db_retry()
async def get_accounts_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Account]:
    result = await db.execute(
        select(Account).where(Account.user_id == user_id).order_by(Account.created_at)
    )
    return result.scalars().all()

@with_db_retry()
async def get_account_by_id(account_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Account]:
    result = await db.execute(
        select(Account).where(Account.id == account_id, Account.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_account_for_user(user_id: uuid.UUID, acc_in: AccountCreate, db: AsyncSession) -> Account:
    now = utcnow()
    new_acc = Account(**acc_in.model_dump(), user_id=user_id, created_at=now, updated_at=now)
    db.add(new_acc)
    await db.commit()
    await db.refresh(new_acc)
    return new_acc

async def update_account(account: Account, acc_in: AccountUpdate, db: AsyncSession) -> Account:
    for field, value in acc_in.model_dump(exclude_unset=True).items():
        setattr(account, field, value)
    account.updated_at = utcnow()
    db.add(account)
    await db.commit()
    await db.refresh(account)
    return account

def adjust_balance(account: Account, delta: float) -> float:
    """Apply a balance change in the session; the caller commits."""
    account.balance = round((account.balance or 0.0) + delta, 2)
    account.updated_at = utcnow()
    return account.balance

async def delete_account(account: Account, db: AsyncSession) -> None:
    await db.delete(account)
    await db.commit()
