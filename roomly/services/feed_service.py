import logging
from datetime import datetime, timezone

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roomly.errors import ConflictError, NotFoundError, RoomlyError, ValidationError
from roomly.models.post import Comment, Like, Post
from roomly.models.user import User
from roomly.services.points_service import award_points
from roomly.storage import ObjectStorage


logger = logging.getLogger(__name__)


# post type -> point action
POST_TYPE_ACTIONS = {
    "GENERAL": "COMMENT",
    "AREA_PHOTO": "UPLOAD_AREA_PHOTO",
    "BUG_REPORT": "BUG_REPORT",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _require_community(user: User):
    if user.community_id is None:
        raise ValidationError("Join a community before posting")


def _award_quietly(db: Session, **kwargs):
    try:
        award_points(db, **kwargs)
    except RoomlyError:
        logger.exception(
            "points award failed after feed action",
            extra={"user_id": str(kwargs.get("user_id")), "action": kwargs.get("action")},
        )


def _get_post(db: Session, post_id) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post


def create_post(
    db: Session,
    user: User,
    *,
    text: str,
    post_type: str = "GENERAL",
    image: bytes | None = None,
    image_extension: str = "jpg",
    storage: ObjectStorage | None = None,
) -> Post:
    _require_community(user)
    if not (text or "").strip():
        raise ValidationError("text is required")

    post_type = (post_type or "GENERAL").upper()
    if post_type not in POST_TYPE_ACTIONS:
        raise ValidationError(f"Unknown post type: {post_type}")

    image_url = None
    if image:
        if storage is None:
            raise ValidationError("Image uploads are not configured")
        ts = _utcnow().strftime("%Y%m%d%H%M%S%f")
        image_url = storage.upload(f"posts/{user.id}/{ts}.{image_extension.lstrip('.')}", image)
        # a picture of a shared area is worth more than a plain post
        if post_type == "GENERAL":
            post_type = "AREA_PHOTO"

    post = Post(
        user_id=user.id,
        community_id=user.community_id,
        text=text.strip(),
        image_url=image_url,
        post_type=post_type,
        likes_count=0,
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    _award_quietly(
        db,
        user_id=user.id,
        community_id=user.community_id,
        action=POST_TYPE_ACTIONS[post_type],
    )

    return post


def list_community_posts(db: Session, community_id, *, limit: int = 50, offset: int = 0):
    limit = max(1, min(limit, 200))
    offset = max(0, offset)

    posts = (
        db.query(Post)
        .filter(Post.community_id == community_id)
        .order_by(Post.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    if not posts:
        return []

    comments = (
        db.query(Comment)
        .filter(Comment.post_id.in_([p.id for p in posts]))
        .order_by(Comment.created_at.asc())
        .all()
    )
    by_post: dict = {}
    for c in comments:
        by_post.setdefault(c.post_id, []).append(c)

    return [{"post": p, "comments": by_post.get(p.id, [])} for p in posts]


def add_comment(db: Session, user: User, post_id, text: str) -> Comment:
    _require_community(user)
    if not (text or "").strip():
        raise ValidationError("text is required")

    post = _get_post(db, post_id)

    comment = Comment(post_id=post.id, user_id=user.id, text=text.strip())
    db.add(comment)
    db.commit()
    db.refresh(comment)

    _award_quietly(
        db,
        user_id=user.id,
        community_id=user.community_id,
        action="COMMENT",
    )

    return comment


def like_post(db: Session, user: User, post_id) -> Post:
    post = _get_post(db, post_id)

    try:
        db.add(Like(post_id=post.id, user_id=user.id))
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Post already liked")

    db.query(Post).filter(Post.id == post.id).update(
        {Post.likes_count: Post.likes_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(post)

    if post.user_id != user.id:
        author = db.query(User).filter(User.id == post.user_id).first()
        if author:
            _award_quietly(
                db,
                user_id=author.id,
                community_id=author.community_id,
                action="LIKE_RECEIVED",
            )

    return post


def unlike_post(db: Session, user: User, post_id) -> Post:
    post = _get_post(db, post_id)

    deleted = (
        db.query(Like)
        .filter(Like.post_id == post.id)
        .filter(Like.user_id == user.id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        raise NotFoundError("Like not found")

    db.query(Post).filter(Post.id == post.id).update(
        {Post.likes_count: case((Post.likes_count > 0, Post.likes_count - 1), else_=0)},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(post)
    return post


def list_user_likes(db: Session, user_id) -> list:
    return [row[0] for row in db.query(Like.post_id).filter(Like.user_id == user_id).all()]
