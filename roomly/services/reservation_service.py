import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from roomly import config
from roomly.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RoomlyError,
    StateError,
    StoreError,
    ValidationError,
)
from roomly.models.amenity import Amenity
from roomly.models.reservation import Reservation
from roomly.models.user import User
from roomly.services.points_service import award_points


logger = logging.getLogger(__name__)


# 13:00-14:00 is closed for cleaning
TIME_SLOTS = [
    "08:00-09:00",
    "09:00-10:00",
    "10:00-11:00",
    "11:00-12:00",
    "12:00-13:00",
    "14:00-15:00",
    "15:00-16:00",
    "16:00-17:00",
    "17:00-18:00",
    "18:00-19:00",
    "19:00-20:00",
]

GRADE_OUTCOMES = {"FULFILLED", "UNFULFILLED"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _get_reservation(db: Session, reservation_id) -> Reservation:
    reservation = db.query(Reservation).filter(Reservation.id == reservation_id).first()
    if not reservation:
        raise NotFoundError("Reservation not found")
    return reservation


def _in_community(db: Session, reservation: Reservation, community_id) -> bool:
    amenity_community = db.query(Amenity.community_id).filter(Amenity.id == reservation.amenity_id).scalar()
    owner_community = db.query(User.community_id).filter(User.id == reservation.user_id).scalar()
    return community_id in (amenity_community, owner_community)


def _find_slot_holder(db: Session, amenity_id, day: date, time_slot: str):
    return (
        db.query(Reservation)
        .filter(Reservation.amenity_id == amenity_id)
        .filter(Reservation.date == day)
        .filter(Reservation.time_slot == time_slot)
        .filter(Reservation.status != "CANCELLED")
        .first()
    )


def _check_category_window(db: Session, user: User, amenity: Amenity, now: datetime):
    category = (amenity.category or "").upper()
    window_days = config.RESTRICTED_CATEGORY_WINDOWS.get(category)
    if not category or not window_days:
        return

    since = now - timedelta(days=window_days)
    recent = (
        db.query(Reservation)
        .join(Amenity, Amenity.id == Reservation.amenity_id)
        .filter(Reservation.user_id == user.id)
        .filter(Reservation.status == "ACTIVE")
        .filter(Amenity.category == amenity.category)
        .filter(Reservation.created_at > since)
        .order_by(Reservation.created_at.desc())
        .first()
    )
    if recent:
        available_on = (recent.created_at + timedelta(days=window_days)).date()
        raise ConflictError(
            f"You can only book the {category.lower()} once every {window_days} days "
            f"(next booking available on {available_on.isoformat()})"
        )


# ============================================================
# CREATE
# ============================================================
def create_reservation(
    db: Session,
    *,
    user_id,
    amenity_id,
    day: date,
    time_slot: str,
    now: datetime | None = None,
) -> Reservation:
    if now is None:
        now = _utcnow()

    if not time_slot:
        raise ValidationError("time_slot is required")
    if time_slot not in TIME_SLOTS:
        raise ValidationError(f"Unknown time slot: {time_slot}")
    if day is None:
        raise ValidationError("date is required")
    if day < now.date():
        raise ValidationError("Cannot book a date in the past")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    if user.status != "ACTIVE":
        raise ValidationError("Inactive users cannot book amenities")

    amenity = db.query(Amenity).filter(Amenity.id == amenity_id).first()
    if not amenity:
        raise NotFoundError("Amenity not found")
    if amenity.community_id is not None and amenity.community_id != user.community_id:
        raise ForbiddenError("Amenity belongs to another community")

    _check_category_window(db, user, amenity, now)

    if _find_slot_holder(db, amenity.id, day, time_slot):
        raise ConflictError(f"{amenity.name} is already booked on {day.isoformat()} at {time_slot}")

    reservation = Reservation(
        user_id=user.id,
        amenity_id=amenity.id,
        date=day,
        time_slot=time_slot,
        status="ACTIVE",
        grade="PENDING",
        created_at=now,
    )

    # the partial unique index settles concurrent bookings of the same slot
    try:
        db.add(reservation)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(
            "slot taken by concurrent booking",
            extra={"amenity_id": str(amenity.id), "date": day.isoformat(), "time_slot": time_slot},
        )
        raise ConflictError(f"{amenity.name} is already booked on {day.isoformat()} at {time_slot}")
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Could not save the reservation") from e

    db.refresh(reservation)

    logger.info(
        "reservation created",
        extra={
            "reservation_id": str(reservation.id),
            "user_id": str(user.id),
            "amenity_id": str(amenity.id),
            "date": day.isoformat(),
            "time_slot": time_slot,
        },
    )

    if user.community_id is not None:
        try:
            award_points(
                db,
                user_id=user.id,
                community_id=user.community_id,
                action="RESERVATION_COMPLETED",
                points=amenity.points_reward or None,
                description=f"Reservation at {amenity.name}",
                now=now,
            )
        except RoomlyError:
            # the booking is the user-visible contract; points can be reconciled later
            logger.exception(
                "points award failed after reservation",
                extra={"reservation_id": str(reservation.id), "user_id": str(user.id)},
            )

    return reservation


# ============================================================
# CANCEL
# ============================================================
def cancel_reservation(db: Session, reservation_id, *, acting_user: User | None = None, now: datetime | None = None):
    reservation = _get_reservation(db, reservation_id)

    if acting_user is not None and reservation.user_id != acting_user.id:
        if acting_user.role != "ADMIN":
            raise ForbiddenError("Only the owner can cancel this reservation")
        if acting_user.community_id is not None and not _in_community(db, reservation, acting_user.community_id):
            raise ForbiddenError("Reservation belongs to another community")

    updated = (
        db.query(Reservation)
        .filter(Reservation.id == reservation.id)
        .filter(Reservation.status == "ACTIVE")
        .update(
            {Reservation.status: "CANCELLED", Reservation.cancelled_at: now or _utcnow()},
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        raise StateError(f"Reservation is {reservation.status}, only ACTIVE reservations can be cancelled")

    db.commit()
    db.refresh(reservation)

    logger.info("reservation cancelled", extra={"reservation_id": str(reservation.id)})
    return reservation


# ============================================================
# GRADE (admin audit)
# ============================================================
def grade_reservation(db: Session, reservation_id, outcome: str, *, community_id=None, now: datetime | None = None):
    outcome = (outcome or "").upper()
    if outcome not in GRADE_OUTCOMES:
        raise ValidationError("outcome must be FULFILLED or UNFULFILLED")

    reservation = _get_reservation(db, reservation_id)
    if community_id is not None and not _in_community(db, reservation, community_id):
        raise ForbiddenError("Reservation belongs to another community")

    updated = (
        db.query(Reservation)
        .filter(Reservation.id == reservation.id)
        .filter(Reservation.grade == "PENDING")
        .filter(Reservation.status == "ACTIVE")
        .update(
            {
                Reservation.grade: outcome,
                Reservation.status: "FINALIZED",
                Reservation.graded_at: now or _utcnow(),
            },
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        raise StateError(
            f"Reservation is {reservation.status}/{reservation.grade}, only ACTIVE/PENDING reservations can be graded"
        )

    db.commit()
    db.refresh(reservation)

    logger.info("reservation graded", extra={"reservation_id": str(reservation.id), "grade": outcome})
    return reservation


# ============================================================
# QUERIES
# ============================================================
def list_user_reservations(db: Session, user_id):
    return (
        db.query(Reservation)
        .filter(Reservation.user_id == user_id)
        .order_by(Reservation.date.desc(), Reservation.time_slot.desc())
        .all()
    )


def list_amenity_reservations(db: Session, amenity_id, day: date):
    return (
        db.query(Reservation)
        .filter(Reservation.amenity_id == amenity_id)
        .filter(Reservation.date == day)
        .filter(Reservation.status != "CANCELLED")
        .order_by(Reservation.time_slot.asc())
        .all()
    )


def booked_slots(db: Session, amenity_id, day: date) -> list[str]:
    return [r.time_slot for r in list_amenity_reservations(db, amenity_id, day)]


def list_reservations_for_audit(db: Session, community_id=None):
    q = (
        db.query(Reservation)
        .join(Amenity, Amenity.id == Reservation.amenity_id)
        .join(User, User.id == Reservation.user_id)
    )
    if community_id is not None:
        q = q.filter(or_(Amenity.community_id == community_id, User.community_id == community_id))

    return q.order_by(Reservation.date.desc(), Reservation.time_slot.desc()).all()
