# finance_api/schemas/user.py
from typing import Optional
import uuid
from pydantic import BaseModel, EmailStr, Field

# Public fields returned on GET /users/me
class UserProfile(BaseModel):
    id: uuid.UUID
    email: EmailStr
    full_name: Optional[str] = None
    currency: Optional[str] = None
    is_active: bool = True
    is_verified: bool = False

    class Config:
        from_attributes = True

# Fields accepted on PATCH /users/me
class UserProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
