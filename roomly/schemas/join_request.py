from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class JoinRequestCreate(BaseModel):
    community_id: UUID
    tower: Optional[str] = None
    unit: Optional[str] = None


class JoinRequestOut(BaseModel):
    id: UUID
    ticket_code: str
    community_id: UUID

    user_email: str
    user_name: str
    tower: Optional[str] = None
    unit: Optional[str] = None

    status: str

    created_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JoinRequestDecisionOut(BaseModel):
    request: JoinRequestOut
    linked_user_id: Optional[UUID] = None
