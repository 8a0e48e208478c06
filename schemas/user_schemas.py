from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from models.users import AuthProvider


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: str
    auth_provider: AuthProvider
    photo_url: Optional[str] = None
    is_premium: bool
    premium_expired_at: Optional[datetime] = None
    created_at: datetime


class SessionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime


class SessionList(BaseModel):
    count: int
    sessions: list[SessionInfo]
