# finance_api/utils/notifications.py
from typing import Dict, List, Any, Iterable
from finance_api.utils.goal_planning import utcnow
from sqlalchemy.ext.asyncio import AsyncSession
from finance_api.schemas.notification import NotificationCreate
from finance_api.crud.notification import create_notification
from finance_api.models.notification import Notification
import uuid
from fastapi import WebSocket
import logging

logger = logging.getLogger(__name__)

# Store active WebSocket connections by user_id
active_connections: Dict[uuid.UUID, List[WebSocket]] = {}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}

def format_currency(amount: float, currency: str) -> str:
    symbol = CURRENCY_SYMBOLS.get((currency or "").upper())
    if symbol:
        return f"{'-' if amount < 0 else ''}{symbol}{abs(amount):,.2f}"
    return f"{currency} {amount:,.2f}"

# Status can be 'info', 'alert', 'completed', etc. Type can be 'info', 'milestone', 'ai', etc.
async def queue_notification(
    db: AsyncSession,
    user_id: uuid.UUID,
    title: str,
    message: str,
    type: str = "info",
    status: str = "info",
) -> Notification:
    """Stage a notification in the caller's unit of work; push it after commit."""
    notification = NotificationCreate(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        status=status,
    )
    return await create_notification(db, notification, commit=False)

async def notify_goal_added(db: AsyncSession, user_id: uuid.UUID, goal_name: str) -> Notification:
    return await queue_notification(
        db, user_id,
        title="Goal Added",
        message=f'Successfully added the "{goal_name}" goal.',
    )

async def notify_goal_contribution(
    db: AsyncSession, user_id: uuid.UUID, goal_name: str, amount: float, currency: str
) -> Notification:
    return await queue_notification(
        db, user_id,
        title="Contribution Successful!",
        message=f'Successfully saved {format_currency(amount, currency)} for your "{goal_name}" goal.',
        status="completed",
    )

async def notify_goal_reached(
    db: AsyncSession, user_id: uuid.UUID, goal_name: str, target: float, currency: str
) -> Notification:
    return await queue_notification(
        db, user_id,
        title="Goal Reached! 🎉",
        message=f'Congratulations! You reached your target of {format_currency(target, currency)} for "{goal_name}".',
        type="milestone",
        status="completed",
    )

async def notify_transaction_recorded(
    db: AsyncSession, user_id: uuid.UUID, description: str, amount: float, is_income: bool, currency: str
) -> Notification:
    verb = "Credited" if is_income else "Deducted"
    return await queue_notification(
        db, user_id,
        title="Transaction Added",
        message=f'{verb} {format_currency(amount, currency)} for "{description}"',
    )

# WebSocket connection management
def connect_user(websocket: WebSocket, user_id: uuid.UUID):
    """Register a new WebSocket connection for a user"""
    if user_id not in active_connections:
        active_connections[user_id] = []
    active_connections[user_id].append(websocket)
    logger.info(f"User {user_id} connected. Total connections: {len(active_connections[user_id])}")

def disconnect_user(websocket: WebSocket, user_id: uuid.UUID):
    """Remove a WebSocket connection for a user"""
    if user_id in active_connections:
        if websocket in active_connections[user_id]:
            active_connections[user_id].remove(websocket)

        # Clean up if no connections left
        if not active_connections[user_id]:
            del active_connections[user_id]

    logger.info(f"User {user_id} disconnected. Remaining connections: {len(active_connections.get(user_id, []))}")

def serialize_notification(notification: Notification) -> Dict[str, Any]:
    created_at = notification.created_at or utcnow()
    return {
        "id": str(notification.id),
        "title": notification.title,
        "message": notification.message,
        "type": notification.type,
        "status": notification.status,
        "is_read": bool(notification.is_read),
        "created_at": created_at.isoformat(),
    }

async def send_realtime_notification(user_id: uuid.UUID, notification: Notification):
    """Send a notification to a user via WebSocket if they're connected"""
    if user_id not in active_connections:
        return

    notification_data = serialize_notification(notification)

    # Send to all active connections for this user
    dead_connections = []
    for websocket in active_connections[user_id]:
        try:
            await websocket.send_json({
                "type": "notification",
                "data": notification_data
            })
        except Exception as e:
            logger.error(f"Failed to send to websocket: {str(e)}")
            dead_connections.append(websocket)

    # Clean up dead connections
    for dead in dead_connections:
        disconnect_user(dead, user_id)

async def push_notifications(user_id: uuid.UUID, notifications: Iterable[Notification]) -> None:
    """Fan committed notifications out to the user's open sockets."""
    for notification in notifications:
        await send_realtime_notification(user_id, notification)
