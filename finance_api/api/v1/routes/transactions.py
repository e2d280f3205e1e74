# finance_api/api/v1/routes/transactions.py
from fastapi import APIRouter, Depends, HTTPException, status, Request, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from finance_api.schemas.transaction import TransactionCreate, TransactionRead
from finance_api.crud.transaction import (
    get_transactions_for_user,
    get_transaction_by_id,
    delete_transaction,
)
from finance_api.models.transaction import TransactionType
from finance_api.core.database import get_async_session
from finance_api.core.auth import User
from finance_api.api.deps import get_current_user
from finance_api.utils.transactions import record_transaction

router = APIRouter(prefix="/transactions", tags=["transactions"])

@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    request: Request,
    type: Optional[TransactionType] = Query(None, description="Only income or only expense"),
    category: Optional[str] = Query(None),
    account_id: Optional[uuid.UUID] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_transactions_for_user(
        user.id, db, tx_type=type, category=category, account_id=account_id
    )

@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Record a transaction against one of the user's accounts.

    - **income** credits the account balance
    - **expense** debits it and counts towards the budget of the same category
    """
    return await record_transaction(user, tx_in, db)

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return tx

@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction_endpoint(
    transaction_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    tx = await get_transaction_by_id(transaction_id, user.id, db)
    if not tx:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    await delete_transaction(tx, db)
    return None
