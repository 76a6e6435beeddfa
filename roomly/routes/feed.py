import os
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.deps.user import get_current_user, require_community
from roomly.models.user import User
from roomly.schemas.post import CommentCreate, CommentOut, PostCreate, PostOut, PostWithCommentsOut
from roomly.services.feed_service import (
    add_comment,
    create_post,
    like_post,
    list_community_posts,
    list_user_likes,
    unlike_post,
)
from roomly.storage import ObjectStorage, get_storage

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=list[PostWithCommentsOut])
def read_feed(
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(require_community),
    db: Session = Depends(get_db),
):
    items = list_community_posts(db, user.community_id, limit=limit, offset=offset)
    return [
        {**PostOut.model_validate(i["post"]).model_dump(), "comments": i["comments"]}
        for i in items
    ]


@router.post("/posts", response_model=PostOut, status_code=201)
def publish_post(payload: PostCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return create_post(db, user, text=payload.text, post_type=payload.post_type)


@router.post("/posts/{post_id}/comments", response_model=CommentOut, status_code=201)
def comment_post(
    post_id: UUID,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return add_comment(db, user, post_id, payload.text)


@router.post("/posts/{post_id}/like", response_model=PostOut)
def like(post_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return like_post(db, user, post_id)


@router.delete("/posts/{post_id}/like", response_model=PostOut)
def unlike(post_id: UUID, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return unlike_post(db, user, post_id)


@router.get("/likes/me", response_model=list[UUID])
def my_likes(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return list_user_likes(db, user.id)


@router.post("/posts/photo", response_model=PostOut, status_code=201)
async def publish_photo_post(
    text: str = Form(...),
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    image = await file.read()
    extension = os.path.splitext(file.filename or "")[1] or ".jpg"
    return create_post(
        db,
        user,
        text=text,
        post_type="AREA_PHOTO",
        image=image,
        image_extension=extension,
        storage=storage,
    )
