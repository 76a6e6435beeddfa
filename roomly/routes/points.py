from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.schemas.community import CommunityOut
from roomly.schemas.point_log import LeaderboardEntryOut, LevelOut, PointActionOut
from roomly.services.community_service import get_community
from roomly.services.level_service import LEVELS, community_leaderboard, user_leaderboard
from roomly.services.points_service import list_point_actions

router = APIRouter(tags=["points"])


@router.get("/points/actions", response_model=list[PointActionOut])
def read_point_actions():
    return list_point_actions()


@router.get("/points/levels", response_model=list[LevelOut])
def read_levels():
    return LEVELS


@router.get("/leaderboard/communities", response_model=list[CommunityOut])
def read_community_leaderboard(limit: int = 50, db: Session = Depends(get_db)):
    return community_leaderboard(db, limit=limit)


@router.get("/leaderboard/communities/{community_id}/users", response_model=list[LeaderboardEntryOut])
def read_user_leaderboard(community_id: UUID, limit: int = 50, db: Session = Depends(get_db)):
    get_community(db, community_id)
    return user_leaderboard(db, community_id, limit=limit)
