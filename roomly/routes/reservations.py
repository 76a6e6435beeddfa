from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.deps.user import get_current_user
from roomly.models.user import User
from roomly.schemas.reservation import ReservationCreate, ReservationOut, SlotAvailabilityOut
from roomly.services.amenity_service import get_amenity
from roomly.services.reservation_service import (
    TIME_SLOTS,
    booked_slots,
    cancel_reservation,
    create_reservation,
    list_amenity_reservations,
    list_user_reservations,
)

router = APIRouter(tags=["reservations"])


@router.get("/reservations/slots", response_model=list[str])
def list_time_slots():
    return TIME_SLOTS


@router.post("/reservations", response_model=ReservationOut, status_code=201)
def book_amenity(
    payload: ReservationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_reservation(
        db,
        user_id=user.id,
        amenity_id=payload.amenity_id,
        day=payload.date,
        time_slot=payload.time_slot,
    )


@router.get("/reservations/me", response_model=list[ReservationOut])
def my_reservations(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return list_user_reservations(db, user.id)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationOut)
def cancel_my_reservation(
    reservation_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return cancel_reservation(db, reservation_id, acting_user=user)


@router.get("/amenities/{amenity_id}/reservations", response_model=list[ReservationOut])
def amenity_reservations(amenity_id: UUID, date: date, db: Session = Depends(get_db)):
    get_amenity(db, amenity_id)
    return list_amenity_reservations(db, amenity_id, date)


@router.get("/amenities/{amenity_id}/availability", response_model=SlotAvailabilityOut)
def amenity_availability(amenity_id: UUID, date: date, db: Session = Depends(get_db)):
    get_amenity(db, amenity_id)
    return {
        "amenity_id": amenity_id,
        "date": date,
        "slots": TIME_SLOTS,
        "booked": booked_slots(db, amenity_id, date),
    }
