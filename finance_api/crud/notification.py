# finance_api/crud/notification.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update, delete, desc, func
from finance_api.models.notification import Notification
from finance_api.schemas.notification import NotificationCreate
from finance_api.core.db_utils import with_db_retry
from finance_api.utils.goal_planning import utcnow
from typing import List, Optional
import uuid

def _unread(user_id: uuid.UUID):
    return (Notification.user_id == user_id, Notification.is_read.is_(False))

async def create_notification(db: AsyncSession, notification: NotificationCreate, commit: bool = True) -> Notification:
    """Add a notification; with commit=False it is only flushed into the caller's unit of work."""
    row = Notification(**notification.model_dump(), is_read=False, created_at=utcnow())
    db.add(row)
    if not commit:
        await db.flush()
        return row
    await db.commit()
    await db.refresh(row)
    return row

@with_db_retry()
async def get_notifications_for_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = 50
) -> List[Notification]:
    """Newest first, optionally only the unread ones."""
    conditions = _unread(user_id) if unread_only else (Notification.user_id == user_id,)
    result = await db.execute(
        select(Notification)
        .where(*conditions)
        .order_by(desc(Notification.created_at))
        .limit(limit)
    )
    return result.scalars().all()

@with_db_retry()
async def get_notification_for_user(db: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Notification]:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    return result.scalar_one_or_none()

@with_db_retry()
async def get_unread_count(db: AsyncSession, user_id: uuid.UUID) -> int:
    result = await db.execute(select(func.count(Notification.id)).where(*_unread(user_id)))
    return result.scalar_one() or 0

async def mark_notification_as_read(db: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Notification]:
    notification = await get_notification_for_user(db, notification_id, user_id)
    if notification is None:
        return None
    if not notification.is_read:
        notification.is_read = True
        await db.commit()
    return notification

async def mark_all_notifications_as_read(db: AsyncSession, user_id: uuid.UUID) -> int:
    """Returns how many notifications changed."""
    result = await db.execute(update(Notification).where(*_unread(user_id)).values(is_read=True))
    await db.commit()
    return result.rowcount

async def delete_notification(db: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    result = await db.execute(
        delete(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    await db.commit()
    return result.rowcount > 0
