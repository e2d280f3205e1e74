# finance_api/schemas/transaction.py
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
import uuid
from finance_api.models.transaction import TransactionType

class TransactionBase(BaseModel):
    description: str = Field(..., min_length=2, description="E.g. Grocery at Costco")
    amount: float = Field(..., gt=0)
    type: TransactionType = TransactionType.expense
    category: str = Field("Other", min_length=1)
    account_id: Optional[uuid.UUID] = None
    transaction_date: datetime = Field(..., description="ISO 8601 date/time of transaction")

class TransactionCreate(TransactionBase):
    account_id: uuid.UUID

class TransactionRead(TransactionBase):
    id: uuid.UUID
    user_id: uuid.UUID

    class Config:
        from_attributes = True
