from sqlalchemy.orm import Session

from roomly.errors import NotFoundError, ValidationError
from roomly.models.community import Community
from roomly.models.user import User


def get_community(db: Session, community_id) -> Community:
    community = db.query(Community).filter(Community.id == community_id).first()
    if not community:
        raise NotFoundError("Community not found")
    return community


def list_communities(db: Session):
    return db.query(Community).order_by(Community.name.asc()).all()


def create_community(db: Session, creator: User, data: dict) -> Community:
    """
    Registers a new tower; whoever creates it becomes its admin.
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("name is required")

    community = Community(
        name=name,
        address=data.get("address"),
        admin_email=creator.email,
        total_floors=data.get("total_floors"),
        units_per_floor=data.get("units_per_floor"),
        num_buildings=data.get("num_buildings") or 1,
        total_points=0,
    )
    db.add(community)
    db.flush()

    creator.community_id = community.id
    creator.role = "ADMIN"

    db.commit()
    db.refresh(community)
    return community
