# finance_api/api/v1/routes/users.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from finance_api.core.auth import User
from finance_api.core.database import get_async_session
from finance_api.crud.user import update_user_profile
from finance_api.schemas.user import UserProfile, UserProfileUpdate
from finance_api.api.deps import get_current_user

router = APIRouter(prefix="/users", tags=["User Management"])
logger = logging.getLogger(__name__)

# 1) GET /users/me
@router.get("/me", response_model=UserProfile)
async def read_own_profile(
    request: Request,
    user: User = Depends(get_current_user)
):
    """Get current user's profile"""
    return user

# 2) PATCH /users/me
@router.patch("/me", response_model=UserProfile)
async def update_own_profile(
    profile_in: UserProfileUpdate,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update the display name or preferred currency"""
    if not profile_in.model_dump(exclude_unset=True):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update"
        )

    try:
        return await update_user_profile(user, profile_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Profile update failed for user {user.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while updating profile"
        )
