# finance_api/models/transaction.py
import uuid
import enum
from sqlalchemy import Column, String, ForeignKey, Float, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from finance_api.core.database import Base

class TransactionType(str, enum.Enum):
    income = "income"
    expense = "expense"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id = Column(PG_UUID(as_uuid=True), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(length=255), nullable=False)
    # Always positive; the direction lives in `type`
    amount = Column(Float, nullable=False)
    type = Column(Enum(TransactionType), nullable=False, default=TransactionType.expense)
    category = Column(String(length=100), nullable=False, default="Other")
    transaction_date = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=None)
    updated_at = Column(DateTime, default=None)

    user = relationship("User", back_populates="transactions")
    account = relationship("Account", back_populates="transactions")

    def __repr__(self):
        return f"<Transaction {self.type} amount={self.amount} date={self.transaction_date} user_id={self.user_id}>"
