from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class UserCreate(BaseModel):
    email: str
    name: str
    auth_id: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    tower: Optional[str] = None
    apartment: Optional[str] = None


class UserStatusUpdate(BaseModel):
    status: str


class UserOut(BaseModel):
    id: UUID
    email: str
    name: str
    role: str

    community_id: Optional[UUID] = None
    tower: Optional[str] = None
    apartment: Optional[str] = None
    avatar_url: Optional[str] = None

    points: int
    status: str

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
