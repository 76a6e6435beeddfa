import os

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.deps.user import get_current_user
from roomly.models.user import User
from roomly.schemas.point_log import PointLogOut, UserLevelOut
from roomly.schemas.user import UserCreate, UserOut, UserUpdate
from roomly.services.level_service import level_for_points, next_level
from roomly.services.points_ledger_service import list_point_logs
from roomly.services.user_service import create_user_profile, update_user_profile, upload_avatar
from roomly.storage import ObjectStorage, get_storage

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=201)
def create_profile(payload: UserCreate, db: Session = Depends(get_db)):
    return create_user_profile(db, email=payload.email, name=payload.name, auth_id=payload.auth_id)


@router.get("/me", response_model=UserOut)
def read_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserOut)
def update_me(payload: UserUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return update_user_profile(db, user, payload.model_dump(exclude_unset=True))


@router.put("/me/avatar", response_model=UserOut)
async def put_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    data = await file.read()
    extension = os.path.splitext(file.filename or "")[1] or ".jpg"
    return upload_avatar(db, storage, user, data, extension=extension)


@router.get("/me/point-logs", response_model=list[PointLogOut])
def read_my_point_logs(
    limit: int = 100,
    offset: int = 0,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return list_point_logs(db, user.id, limit=limit, offset=offset)


@router.get("/me/level", response_model=UserLevelOut)
def read_my_level(user: User = Depends(get_current_user)):
    return {
        "user_id": user.id,
        "points": int(user.points or 0),
        "level": level_for_points(user.points),
        "next_level": next_level(user.points),
    }
