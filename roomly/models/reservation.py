import uuid
from sqlalchemy import Column, Date, Index, String, TIMESTAMP, ForeignKey, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class Reservation(Base):
    __tablename__ = "reservations"

    # at most one non-cancelled reservation per (amenity, date, slot)
    __table_args__ = (
        Index(
            "uq_reservations_amenity_date_slot_taken",
            "amenity_id",
            "date",
            "time_slot",
            unique=True,
            postgresql_where=text("status <> 'CANCELLED'"),
            sqlite_where=text("status <> 'CANCELLED'"),
        ),
        Index("ix_reservations_user_id_created_at", "user_id", "created_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    amenity_id = Column(UUID(as_uuid=True), ForeignKey("amenities.id"), nullable=False)

    date = Column(Date, nullable=False)
    time_slot = Column(String(20), nullable=False)

    status = Column(String(20), nullable=False, default="ACTIVE")
    # ACTIVE | CANCELLED | FINALIZED

    grade = Column(String(20), nullable=False, default="PENDING")
    # PENDING | FULFILLED | UNFULFILLED

    created_at = Column(TIMESTAMP, server_default=func.now())
    cancelled_at = Column(TIMESTAMP, nullable=True)
    graded_at = Column(TIMESTAMP, nullable=True)
