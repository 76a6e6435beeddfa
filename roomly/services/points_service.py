import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roomly.errors import StoreError, ValidationError
from roomly.models.point_log import PointLog
from roomly.services.points_ledger_service import apply_community_delta, apply_user_delta


logger = logging.getLogger(__name__)


# action -> (default points, description, caller may override amount)
POINT_ACTIONS = {
    "PROFILE_PHOTO": (20, "Profile photo uploaded", False),
    "UPLOAD_AREA_PHOTO": (15, "Common area photo uploaded", False),
    "COMMENT": (5, "Community comment", False),
    "BUG_REPORT": (25, "Bug reported", False),
    "RESERVATION_COMPLETED": (10, "Reservation completed", True),
    "LIKE_RECEIVED": (2, "Like received", False),
}


@dataclass
class AwardResult:
    log: PointLog
    user_updated: bool
    community_updated: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def list_point_actions():
    return [
        {"action": action, "description": description, "points": points}
        for action, (points, description, _override) in POINT_ACTIONS.items()
    ]


def resolve_points(action: str, points: int | None = None) -> int:
    if action not in POINT_ACTIONS:
        raise ValidationError(f"Unknown point action: {action}")

    default, _description, allows_override = POINT_ACTIONS[action]
    if points is None:
        return default

    if allows_override:
        if int(points) < 0:
            raise ValidationError("points must be >= 0")
        return int(points)

    if int(points) != default:
        raise ValidationError(f"{action} is worth {default} points, got {points}")
    return default


# ============================================================
# AWARD POINTS
# ============================================================
def award_points(
    db: Session,
    *,
    user_id,
    community_id,
    action: str,
    description: str | None = None,
    points: int | None = None,
    now: datetime | None = None,
) -> AwardResult:
    """
    Records a point-earning event, then pushes it into the two cached totals.

    The ledger insert is the only step that can fail the call. The user and
    community totals are updated afterwards as separate commits; if one of them
    fails the ledger stays authoritative and ``reconcile_all`` repairs the cache.
    """
    amount = resolve_points(action, points)

    log = PointLog(
        user_id=user_id,
        community_id=community_id,
        action=action,
        points=amount,
        description=description or POINT_ACTIONS[action][1],
        created_at=now or _utcnow(),
    )

    try:
        db.add(log)
        db.commit()
        db.refresh(log)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("point log insert failed", extra={"user_id": str(user_id), "action": action})
        raise StoreError("Could not record points") from e

    user_updated = apply_user_delta(db, user_id, amount)

    community_updated = False
    if community_id is not None:
        community_updated = apply_community_delta(db, community_id, amount)

    logger.info(
        "points awarded",
        extra={
            "user_id": str(user_id),
            "community_id": str(community_id) if community_id else None,
            "action": action,
            "points": amount,
            "user_updated": user_updated,
            "community_updated": community_updated,
        },
    )

    return AwardResult(log=log, user_updated=user_updated, community_updated=community_updated)
