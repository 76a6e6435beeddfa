from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class PointLogOut(BaseModel):
    id: UUID
    user_id: UUID
    community_id: Optional[UUID] = None

    action: str
    points: int
    description: Optional[str] = None

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PointActionOut(BaseModel):
    action: str
    description: str
    points: int


class LevelOut(BaseModel):
    key: str
    name: str
    min: int
    rank: int
    color: str
    icon: str


class NextLevelOut(LevelOut):
    points_needed: int


class UserLevelOut(BaseModel):
    user_id: UUID
    points: int
    level: LevelOut
    next_level: Optional[NextLevelOut] = None


class LeaderboardEntryOut(BaseModel):
    position: int
    user_id: UUID
    name: str
    avatar_url: Optional[str] = None
    points: int
    level: LevelOut
