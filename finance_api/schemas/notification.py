# finance_api/schemas/notification.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
import uuid
from finance_api.models.notification import NotificationType

class NotificationCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: uuid.UUID
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.info
    status: str = "info"

class NotificationRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    message: str
    type: str
    status: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
