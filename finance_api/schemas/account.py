# finance_api/schemas/account.py
from typing import Optional
from pydantic import BaseModel, Field
import uuid
from finance_api.models.account import AccountType

class AccountBase(BaseModel):
    name: str = Field(..., min_length=2, description="E.g. Main checking, Wallet")
    type: AccountType = AccountType.bank
    balance: float = 0.0
    bank_name: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

class AccountCreate(AccountBase):
    pass

class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    type: Optional[AccountType] = None
    balance: Optional[float] = None
    bank_name: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

class AccountRead(AccountBase):
    id: uuid.UUID
    user_id: uuid.UUID

    class Config:
        from_attributes = True
