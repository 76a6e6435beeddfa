import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roomly.errors import ConflictError, NotFoundError, RoomlyError, ValidationError
from roomly.models.user import User
from roomly.services.points_service import award_points
from roomly.storage import ObjectStorage


logger = logging.getLogger(__name__)

USER_STATUSES = {"ACTIVE", "INACTIVE"}
PROFILE_FIELDS = {"name", "tower", "apartment", "avatar_url"}


def get_user(db: Session, user_id) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == (email or "").strip().lower()).first()


def create_user_profile(db: Session, *, email: str, name: str, auth_id: str | None = None, role: str = "RESIDENT"):
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if not (name or "").strip():
        raise ValidationError("name is required")
    if role not in {"RESIDENT", "ADMIN"}:
        raise ValidationError("role must be RESIDENT or ADMIN")

    user = User(email=email, name=name.strip(), auth_id=auth_id, role=role, status="ACTIVE", points=0)
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A profile already exists for this email")

    db.refresh(user)
    return user


def update_user_profile(db: Session, user: User, updates: dict) -> User:
    for k, v in updates.items():
        if k not in PROFILE_FIELDS:
            continue
        setattr(user, k, v)

    db.commit()
    db.refresh(user)
    return user


def set_user_status(db: Session, user_id, status: str) -> User:
    if status not in USER_STATUSES:
        raise ValidationError("status must be ACTIVE or INACTIVE")

    user = get_user(db, user_id)
    user.status = status
    db.commit()
    db.refresh(user)

    logger.info("user status changed", extra={"user_id": str(user.id), "status": status})
    return user


def list_users(db: Session):
    return db.query(User).order_by(User.created_at.desc()).all()


def list_community_users(db: Session, community_id):
    return (
        db.query(User)
        .filter(User.community_id == community_id)
        .filter(User.status == "ACTIVE")
        .order_by(User.points.desc())
        .all()
    )


def upload_avatar(db: Session, storage: ObjectStorage, user: User, data: bytes, *, extension: str = "jpg") -> User:
    if not data:
        raise ValidationError("Empty upload")

    url = storage.upload(f"avatars/{user.id}/avatar.{extension.lstrip('.')}", data)
    user.avatar_url = url
    db.commit()
    db.refresh(user)

    if user.community_id is not None:
        try:
            award_points(
                db,
                user_id=user.id,
                community_id=user.community_id,
                action="PROFILE_PHOTO",
            )
        except RoomlyError:
            logger.exception("points award failed after avatar upload", extra={"user_id": str(user.id)})
        db.refresh(user)

    return user
