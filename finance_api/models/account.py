# finance_api/models/account.py
import uuid
import enum
from sqlalchemy import Column, String, ForeignKey, Float, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from finance_api.core.database import Base

class AccountType(str, enum.Enum):
    bank = "bank"
    card = "card"
    cash = "cash"

class Account(Base):
    __tablename__ = "accounts"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    type = Column(Enum(AccountType), default=AccountType.bank, nullable=False)
    # Cards may carry a negative balance
    balance = Column(Float, nullable=False, default=0.0)
    bank_name = Column(String(length=150), nullable=True)
    currency = Column(String(length=3), nullable=True)

    created_at = Column(DateTime, default=None)
    updated_at = Column(DateTime, default=None)

    user = relationship("User", back_populates="accounts")
    transactions = relationship("Transaction", back_populates="account", passive_deletes=True)

    def __repr__(self):
        return f"<Account name={self.name} balance={self.balance} user_id={self.user_id}>"
