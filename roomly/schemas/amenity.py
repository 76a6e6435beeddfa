from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class AmenityCreate(BaseModel):
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    amenity_type: str = "OTHER"
    category: Optional[str] = None
    capacity: int = 1
    points_reward: int = 10


class AmenityUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    amenity_type: Optional[str] = None
    category: Optional[str] = None
    capacity: Optional[int] = None
    points_reward: Optional[int] = None


class AmenityOut(BaseModel):
    id: UUID
    community_id: Optional[UUID] = None

    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None

    amenity_type: str
    category: Optional[str] = None

    capacity: int
    points_reward: int

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
