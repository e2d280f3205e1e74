# finance_api/models/notification.py
import uuid
import enum
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from finance_api.core.database import Base

class NotificationType(str, enum.Enum):
    info = "info"
    warning = "warning"
    alert = "alert"
    ai = "ai"
    milestone = "milestone"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    # One of NotificationType; stored as plain text so new kinds need no migration
    type = Column(String, nullable=False, default=NotificationType.info.value)
    # Free-form UI hint, e.g. 'info', 'completed', 'alert'
    status = Column(String, nullable=False, default="info")
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification {self.type} title={self.title!r} read={self.is_read} user_id={self.user_id}>"
