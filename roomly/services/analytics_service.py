from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from roomly.models.amenity import Amenity
from roomly.models.post import Post
from roomly.models.reservation import Reservation
from roomly.models.user import User


def get_analytics(db: Session, community_id=None) -> dict:
    q = db.query(Reservation).join(Amenity, Amenity.id == Reservation.amenity_id)
    users_q = db.query(func.count(User.id)).filter(User.status == "ACTIVE")
    posts_q = db.query(func.count(Post.id))

    if community_id is not None:
        q = q.join(User, User.id == Reservation.user_id).filter(
            or_(Amenity.community_id == community_id, User.community_id == community_id)
        )
        users_q = users_q.filter(User.community_id == community_id)
        posts_q = posts_q.filter(Post.community_id == community_id)

    total = q.count()
    completed = q.filter(Reservation.grade == "FULFILLED").count()
    audited = q.filter(Reservation.grade != "PENDING").count()

    by_amenity_rows = (
        q.with_entities(Amenity.name, func.count(Reservation.id))
        .group_by(Amenity.name)
        .order_by(Amenity.name.asc())
        .all()
    )

    return {
        "totalReservations": total,
        "completedReservations": completed,
        "auditedReservations": audited,
        "occupancyRate": round(completed * 100 / total) if total else 0,
        "totalUsers": int(users_q.scalar() or 0),
        "totalPosts": int(posts_q.scalar() or 0),
        "byAmenity": {name: int(count) for name, count in by_amenity_rows},
    }
