import logging

from sqlalchemy.orm import Session

from roomly import config
from roomly.errors import ConflictError, NotFoundError, ValidationError
from roomly.models.amenity import Amenity
from roomly.models.reservation import Reservation


logger = logging.getLogger(__name__)


DEFAULT_AMENITIES = [
    {"name": "Pool", "amenity_type": "POOL", "category": "POOL", "capacity": 30,
     "description": "Community pool with lounge area"},
    {"name": "Gym", "amenity_type": "GYM", "category": None, "capacity": 15,
     "description": "Modern equipment and open space"},
    {"name": "Grill Area", "amenity_type": "GRILL", "category": None, "capacity": 20,
     "description": "BBQ zone with tables and benches"},
    {"name": "Event Hall", "amenity_type": "HALL", "category": None, "capacity": 50,
     "description": "Hall equipped for social events"},
    {"name": "Coworking", "amenity_type": "COWORKING", "category": None, "capacity": 10,
     "description": "Shared workspace with WiFi"},
]

EDITABLE_FIELDS = {"name", "description", "image_url", "amenity_type", "category", "capacity", "points_reward"}


def _validate(data: dict):
    if "name" in data and not (data["name"] or "").strip():
        raise ValidationError("name is required")
    if data.get("capacity") is not None and int(data["capacity"]) < 1:
        raise ValidationError("capacity must be >= 1")
    if data.get("points_reward") is not None and int(data["points_reward"]) < 0:
        raise ValidationError("points_reward must be >= 0")


def _default_category(amenity: Amenity):
    # restricted amenity types double as their rate-limit category
    if amenity.category is None and (amenity.amenity_type or "").upper() in config.RESTRICTED_CATEGORY_WINDOWS:
        amenity.category = amenity.amenity_type.upper()


def get_amenity(db: Session, amenity_id) -> Amenity:
    amenity = db.query(Amenity).filter(Amenity.id == amenity_id).first()
    if not amenity:
        raise NotFoundError("Amenity not found")
    return amenity


def list_amenities(db: Session, community_id=None):
    q = db.query(Amenity)
    if community_id is not None:
        q = q.filter(Amenity.community_id == community_id)
    return q.order_by(Amenity.name.asc()).all()


def create_amenity(db: Session, community_id, data: dict) -> Amenity:
    if not (data.get("name") or "").strip():
        raise ValidationError("name is required")
    _validate(data)

    amenity = Amenity(community_id=community_id)
    for k, v in data.items():
        if k in EDITABLE_FIELDS and v is not None:
            setattr(amenity, k, v.upper() if k in {"amenity_type", "category"} else v)
    _default_category(amenity)

    db.add(amenity)
    db.commit()
    db.refresh(amenity)
    return amenity


def update_amenity(db: Session, amenity_id, data: dict) -> Amenity:
    _validate(data)

    amenity = get_amenity(db, amenity_id)
    for k, v in data.items():
        if k not in EDITABLE_FIELDS:
            continue
        if k in {"amenity_type", "category"} and v:
            v = v.upper()
        setattr(amenity, k, v)
    if "category" not in data:
        _default_category(amenity)

    db.commit()
    db.refresh(amenity)
    return amenity


def delete_amenity(db: Session, amenity_id):
    amenity = get_amenity(db, amenity_id)

    has_reservations = db.query(Reservation.id).filter(Reservation.amenity_id == amenity.id).first()
    if has_reservations:
        raise ConflictError("Amenity has reservations and cannot be deleted")

    db.delete(amenity)
    db.commit()


def seed_default_amenities(db: Session, community_id) -> list[Amenity]:
    existing = {a.name for a in list_amenities(db, community_id)}

    created = []
    for defaults in DEFAULT_AMENITIES:
        if defaults["name"] in existing:
            continue
        amenity = Amenity(community_id=community_id, points_reward=10, **defaults)
        db.add(amenity)
        created.append(amenity)

    db.commit()
    for a in created:
        db.refresh(a)

    logger.info("default amenities seeded", extra={"community_id": str(community_id), "created": len(created)})
    return created
