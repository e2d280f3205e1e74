# finance_api/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from finance_api.core.auth import User
from finance_api.schemas.user import UserProfileUpdate

async def update_user_profile(user: User, profile_in: UserProfileUpdate, db: AsyncSession) -> User:
    for field, value in profile_in.model_dump(exclude_unset=True).items():
        if field == "currency" and value:
            value = value.upper()
        setattr(user, field, value)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
