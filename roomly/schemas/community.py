from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class CommunityCreate(BaseModel):
    name: str
    address: Optional[str] = None
    total_floors: Optional[int] = None
    units_per_floor: Optional[int] = None
    num_buildings: Optional[int] = None


class CommunityOut(BaseModel):
    id: UUID
    name: str
    address: Optional[str] = None
    admin_email: Optional[str] = None

    total_floors: Optional[int] = None
    units_per_floor: Optional[int] = None
    num_buildings: Optional[int] = None

    total_points: int

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
