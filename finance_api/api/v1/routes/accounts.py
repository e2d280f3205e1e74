# finance_api/api/v1/routes/accounts.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from finance_api.schemas.account import AccountCreate, AccountRead, AccountUpdate
from finance_api.crud.account import (
    create_account_for_user,
    get_accounts_for_user,
    get_account_by_id,
    update_account,
    delete_account,
)
from finance_api.core.database import get_async_session
from finance_api.core.auth import User
from finance_api.api.deps import get_current_user

router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.get("", response_model=List[AccountRead])
async def read_accounts(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_accounts_for_user(user.id, db)

@router.post("", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
async def create_account(
    acc_in: AccountCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    if acc_in.currency:
        acc_in.currency = acc_in.currency.upper()
    return await create_account_for_user(user.id, acc_in, db)

@router.get("/{account_id}", response_model=AccountRead)
async def read_account(
    account_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    account = await get_account_by_id(account_id, user.id, db)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return account

@router.patch("/{account_id}", response_model=AccountRead)
async def update_account_endpoint(
    account_id: uuid.UUID,
    acc_in: AccountUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    account = await get_account_by_id(account_id, user.id, db)
    if not account:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Account not found")
    if acc_in.currency:
        acc_in.currency = acc_in.currency.upper()
    return await update_account(account, acc_in, db)

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account_endpoint(
    account_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Delete an account; its transactions stay, detached from it."""
    account = await get_account_by_id(account_id, user.id, db)
    if not account:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Account not found")
    await delete_account(account, db)
    return None
