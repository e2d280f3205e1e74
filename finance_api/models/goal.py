# finance_api/models/goal.py
import uuid
import enum
from sqlalchemy import Column, String, Float, DateTime, ForeignKey, Enum
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from finance_api.core.database import Base

class SavingStrategy(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"
    self_dependent = "self-dependent"  # no structured plan, no linked savings record

class Goal(Base):
    __tablename__ = "goals"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    target_amount = Column(Float, nullable=False)
    # Never exceeds target_amount; grows through contributions
    current_amount = Column(Float, nullable=False, default=0.0)
    saving_strategy = Column(
        Enum(SavingStrategy, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SavingStrategy.monthly,
    )
    target_date = Column(DateTime, nullable=True)
    periodic_contribution = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, default=None)
    updated_at = Column(DateTime, default=None)

    user = relationship("User", back_populates="goals")

    @property
    def is_structured(self) -> bool:
        return self.saving_strategy != SavingStrategy.self_dependent

    def __repr__(self):
        return f"<Goal name={self.name} target={self.target_amount} current={self.current_amount} user_id={self.user_id}>"
