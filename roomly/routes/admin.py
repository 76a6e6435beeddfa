from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.deps.user import require_admin
from roomly.errors import ForbiddenError
from roomly.models.user import User
from roomly.schemas.amenity import AmenityCreate, AmenityOut, AmenityUpdate
from roomly.schemas.join_request import JoinRequestDecisionOut, JoinRequestOut
from roomly.schemas.reservation import ReservationGrade, ReservationOut
from roomly.schemas.user import UserOut, UserStatusUpdate
from roomly.services.amenity_service import (
    create_amenity,
    delete_amenity,
    get_amenity,
    seed_default_amenities,
    update_amenity,
)
from roomly.services.analytics_service import get_analytics
from roomly.services.join_request_service import (
    approve_join_request,
    list_pending_requests,
    reject_join_request,
)
from roomly.services.points_ledger_service import reconcile_all
from roomly.services.reservation_service import grade_reservation, list_reservations_for_audit
from roomly.services.user_service import list_users, set_user_status


router = APIRouter(prefix="/admin", tags=["admin"])


def _own_amenity(db: Session, admin: User, amenity_id: UUID):
    amenity = get_amenity(db, amenity_id)
    if admin.community_id is not None and amenity.community_id != admin.community_id:
        raise ForbiddenError("Amenity belongs to another community")
    return amenity


# ─── Amenities ───────────────────────────────────────────────────

@router.post("/amenities", response_model=AmenityOut, status_code=201)
def admin_create_amenity(payload: AmenityCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return create_amenity(db, admin.community_id, payload.model_dump())


@router.patch("/amenities/{amenity_id}", response_model=AmenityOut)
def admin_update_amenity(
    amenity_id: UUID,
    payload: AmenityUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _own_amenity(db, admin, amenity_id)
    return update_amenity(db, amenity_id, payload.model_dump(exclude_unset=True))


@router.delete("/amenities/{amenity_id}")
def admin_delete_amenity(amenity_id: UUID, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    _own_amenity(db, admin, amenity_id)
    delete_amenity(db, amenity_id)
    return {"deleted": True}


@router.post("/amenities/seed", response_model=list[AmenityOut])
def admin_seed_amenities(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    if admin.community_id is None:
        raise ForbiddenError("Admin does not manage a community")
    return seed_default_amenities(db, admin.community_id)


# ─── Reservations audit ──────────────────────────────────────────

@router.get("/reservations", response_model=list[ReservationOut])
def admin_audit_reservations(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return list_reservations_for_audit(db, admin.community_id)


@router.post("/reservations/{reservation_id}/grade", response_model=ReservationOut)
def admin_grade_reservation(
    reservation_id: UUID,
    payload: ReservationGrade,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return grade_reservation(db, reservation_id, payload.outcome, community_id=admin.community_id)


# ─── Join requests ───────────────────────────────────────────────

@router.get("/join-requests", response_model=list[JoinRequestOut])
def admin_pending_requests(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    if admin.community_id is None:
        return []
    return list_pending_requests(db, admin.community_id)


@router.post("/join-requests/{request_id}/approve", response_model=JoinRequestDecisionOut)
def admin_approve_request(request_id: UUID, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    result = approve_join_request(db, request_id, community_id=admin.community_id)
    return {"request": result.request, "linked_user_id": result.linked_user_id}


@router.post("/join-requests/{request_id}/reject", response_model=JoinRequestOut)
def admin_reject_request(request_id: UUID, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return reject_join_request(db, request_id, community_id=admin.community_id)


# ─── Users ───────────────────────────────────────────────────────

@router.get("/users", response_model=list[UserOut])
def admin_list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return list_users(db)


@router.patch("/users/{user_id}/status", response_model=UserOut)
def admin_set_user_status(
    user_id: UUID,
    payload: UserStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return set_user_status(db, user_id, payload.status)


# ─── Analytics / maintenance ─────────────────────────────────────

@router.get("/analytics")
def admin_analytics(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return get_analytics(db, admin.community_id)


@router.post("/points/reconcile")
def admin_reconcile_points(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    stats = reconcile_all(db, community_id=admin.community_id)
    db.commit()
    return stats
