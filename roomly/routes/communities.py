from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.deps.user import get_current_user
from roomly.models.user import User
from roomly.schemas.community import CommunityCreate, CommunityOut
from roomly.schemas.join_request import JoinRequestCreate, JoinRequestOut
from roomly.schemas.user import UserOut
from roomly.services.community_service import create_community, list_communities
from roomly.services.join_request_service import create_join_request
from roomly.services.user_service import list_community_users

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("", response_model=list[CommunityOut])
def read_communities(db: Session = Depends(get_db)):
    return list_communities(db)


@router.post("", response_model=CommunityOut, status_code=201)
def register_community(
    payload: CommunityCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_community(db, user, payload.model_dump())


@router.get("/mine/members", response_model=list[UserOut])
def read_my_community_members(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if user.community_id is None:
        return []
    return list_community_users(db, user.community_id)


@router.post("/join-requests", response_model=JoinRequestOut, status_code=201)
def request_to_join(
    payload: JoinRequestCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_join_request(
        db,
        community_id=payload.community_id,
        user_email=user.email,
        user_name=user.name,
        tower=payload.tower,
        unit=payload.unit,
    )
