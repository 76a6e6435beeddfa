from datetime import date, datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class ReservationCreate(BaseModel):
    amenity_id: UUID
    date: date
    time_slot: str


class ReservationGrade(BaseModel):
    outcome: str  # FULFILLED / UNFULFILLED


class ReservationOut(BaseModel):
    id: UUID
    user_id: UUID
    amenity_id: UUID

    date: date
    time_slot: str

    status: str
    grade: str

    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SlotAvailabilityOut(BaseModel):
    amenity_id: UUID
    date: date
    slots: list[str]
    booked: list[str]
