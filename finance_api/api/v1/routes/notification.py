# finance_api/api/v1/routes/notification.py
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from finance_api.schemas.notification import NotificationRead
from finance_api.crud import notification as crud_notification
from finance_api.api import deps
from uuid import UUID
from finance_api.core.database import get_async_session
from finance_api.utils.notifications import connect_user, disconnect_user
from finance_api.utils.goal_planning import utcnow
from finance_api.core.auth import User
import logging

router = APIRouter(prefix="/notification", tags=["notifications"])
logger = logging.getLogger(__name__)

@router.get("/", response_model=List[NotificationRead])
async def list_notifications(
    unread_only: bool = Query(False, description="Filter to only unread notifications"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of notifications to return"),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    """Get notifications for the current user, newest first"""
    return await crud_notification.get_notifications_for_user(
        db,
        user_id=current_user.id,
        unread_only=unread_only,
        limit=limit
    )

@router.get("/unread-count", response_model=int)
async def unread_count(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    """Badge count for the bell icon"""
    return await crud_notification.get_unread_count(db, current_user.id)

@router.post("/read_all", response_model=int)
async def mark_all_read(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    """Returns how many notifications were marked read"""
    return await crud_notification.mark_all_notifications_as_read(db, current_user.id)

@router.get("/{notification_id}", response_model=NotificationRead)
async def read_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    notification = await crud_notification.get_notification_for_user(db, notification_id, current_user.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification

@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    """Mark one of the current user's notifications as read"""
    notification = await crud_notification.mark_notification_as_read(db, notification_id, current_user.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification

@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    deleted = await crud_notification.delete_notification(db, notification_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Notification not found")
    return None

@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(...),
    db: AsyncSession = Depends(get_async_session)
):
    """Push new notifications to the client as they are committed"""
    try:
        user = await deps.get_user_from_token(token, db)
    except HTTPException:
        await websocket.close(code=4001, reason="Authentication failed")
        return

    await websocket.accept()
    connect_user(websocket, user.id)

    try:
        # Keep the connection alive; inbound messages are only acknowledged
        while True:
            await websocket.receive_text()
            await websocket.send_json({"status": "received", "timestamp": utcnow().isoformat()})
    except WebSocketDisconnect:
        logger.info(f"WebSocket closed by client for user {user.id}")
    finally:
        disconnect_user(websocket, user.id)
