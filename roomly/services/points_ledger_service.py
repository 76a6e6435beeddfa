import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roomly.models.community import Community
from roomly.models.point_log import PointLog
from roomly.models.user import User


logger = logging.getLogger(__name__)


# ============================================================
# Ledger reads
# ============================================================

def list_point_logs(db: Session, user_id, *, limit: int = 100, offset: int = 0):
    limit = max(1, min(limit, 500))
    offset = max(0, offset)

    return (
        db.query(PointLog)
        .filter(PointLog.user_id == user_id)
        .order_by(PointLog.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def ledger_total_for_user(db: Session, user_id) -> int:
    total = (
        db.query(func.coalesce(func.sum(PointLog.points), 0))
        .filter(PointLog.user_id == user_id)
        .scalar()
    )
    return int(total or 0)


def ledger_total_for_community(db: Session, community_id) -> int:
    total = (
        db.query(func.coalesce(func.sum(PointLog.points), 0))
        .filter(PointLog.community_id == community_id)
        .scalar()
    )
    return int(total or 0)


# ============================================================
# Cached totals (best effort)
# ============================================================

def apply_user_delta(db: Session, user_id, points: int) -> bool:
    """
    Adds ``points`` to the cached user total in one UPDATE.

    Returns False (and leaves the ledger as the only record of the award) when
    the user is gone or the write fails.
    """
    try:
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.points: User.points + points}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("user points update failed", extra={"user_id": str(user_id), "points": points})
        return False

    if not updated:
        logger.warning("user points update matched no row", extra={"user_id": str(user_id)})
    return bool(updated)


def apply_community_delta(db: Session, community_id, points: int) -> bool:
    try:
        updated = (
            db.query(Community)
            .filter(Community.id == community_id)
            .update({Community.total_points: Community.total_points + points}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "community total update failed",
            extra={"community_id": str(community_id), "points": points},
        )
        return False

    if not updated:
        logger.warning("community total update matched no row", extra={"community_id": str(community_id)})
    return bool(updated)


# ============================================================
# Reconciliation: recompute the caches from the ledger
# ============================================================

def reconcile_user(db: Session, user: User) -> bool:
    expected = ledger_total_for_user(db, user.id)
    if int(user.points or 0) == expected:
        return False

    logger.info(
        "reconciling user points",
        extra={"user_id": str(user.id), "cached": user.points, "ledger": expected},
    )
    user.points = expected
    db.flush()
    return True


def reconcile_community(db: Session, community: Community) -> bool:
    expected = ledger_total_for_community(db, community.id)
    if int(community.total_points or 0) == expected:
        return False

    logger.info(
        "reconciling community total",
        extra={"community_id": str(community.id), "cached": community.total_points, "ledger": expected},
    )
    community.total_points = expected
    db.flush()
    return True


def reconcile_all(db: Session, *, community_id=None) -> dict:
    """
    Rewrites every drifted cache. Does not commit; the caller owns the transaction.
    """
    users_q = db.query(User)
    communities_q = db.query(Community)
    if community_id is not None:
        users_q = users_q.filter(User.community_id == community_id)
        communities_q = communities_q.filter(Community.id == community_id)

    users = users_q.all()
    communities = communities_q.all()

    users_fixed = sum(1 for u in users if reconcile_user(db, u))
    communities_fixed = sum(1 for c in communities if reconcile_community(db, c))

    return {
        "users": len(users),
        "usersFixed": users_fixed,
        "communities": len(communities),
        "communitiesFixed": communities_fixed,
    }
