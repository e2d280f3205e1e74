# finance_api/models/budget.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Float, Boolean, DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from finance_api.core.database import Base

class Budget(Base):
    """A recurring budget or savings plan.

    Rows with ``is_goal`` set are the savings plans generated for a goal; they
    point back at it through ``goal_id`` and only change through the goal.
    """
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "category", name="uq_budgets_user_category"),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(length=150), nullable=False)
    # Per-period target
    amount = Column(Float, nullable=False)
    # Cumulative amount spent (budgets) or contributed (goal plans)
    spent = Column(Float, nullable=False, default=0.0)
    is_goal = Column(Boolean, nullable=False, default=False)
    goal_id = Column(PG_UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=True, unique=True)

    created_at = Column(DateTime, default=None)
    updated_at = Column(DateTime, default=None)

    user = relationship("User", back_populates="budgets")

    def __repr__(self):
        return f"<Budget category={self.category} amount={self.amount} spent={self.spent} user_id={self.user_id}>"
