from sqlalchemy.orm import Session

from roomly.models.community import Community
from roomly.models.user import User


# Highest threshold first; the last entry must start at 0.
LEVELS = [
    {"key": "LEGEND", "name": "Legend", "min": 500, "rank": 3, "color": "#a855f7", "icon": "crown"},
    {"key": "COMMUNITY_LEADER", "name": "Community Leader", "min": 200, "rank": 2, "color": "#7c3aed", "icon": "star"},
    {"key": "ACTIVE_NEIGHBOR", "name": "Active Neighbor", "min": 50, "rank": 1, "color": "#8b5cf6", "icon": "home"},
    {"key": "NEW_NEIGHBOR", "name": "New Neighbor", "min": 0, "rank": 0, "color": "#a78bfa", "icon": "seedling"},
]


def level_for_points(points: int | None) -> dict:
    pts = max(0, int(points or 0))
    for level in LEVELS:
        if pts >= level["min"]:
            return dict(level)
    return dict(LEVELS[-1])


def next_level(points: int | None) -> dict | None:
    """
    The tier right above the current one, with the points still missing.
    None once the top tier is reached.
    """
    pts = max(0, int(points or 0))
    current = level_for_points(pts)

    above = [lvl for lvl in LEVELS if lvl["rank"] == current["rank"] + 1]
    if not above:
        return None

    target = dict(above[0])
    target["points_needed"] = target["min"] - pts
    return target


def community_leaderboard(db: Session, *, limit: int = 50):
    limit = max(1, min(limit, 500))
    return (
        db.query(Community)
        .order_by(Community.total_points.desc(), Community.name.asc())
        .limit(limit)
        .all()
    )


def user_leaderboard(db: Session, community_id, *, limit: int = 50):
    limit = max(1, min(limit, 500))
    users = (
        db.query(User)
        .filter(User.community_id == community_id)
        .filter(User.status == "ACTIVE")
        .order_by(User.points.desc(), User.name.asc())
        .limit(limit)
        .all()
    )

    return [
        {
            "position": i,
            "user_id": u.id,
            "name": u.name,
            "avatar_url": u.avatar_url,
            "points": int(u.points or 0),
            "level": level_for_points(u.points),
        }
        for i, u in enumerate(users, start=1)
    ]
