from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class PostCreate(BaseModel):
    text: str
    post_type: str = "GENERAL"


class CommentCreate(BaseModel):
    text: str


class CommentOut(BaseModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    text: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PostOut(BaseModel):
    id: UUID
    user_id: UUID
    community_id: UUID

    text: str
    image_url: Optional[str] = None
    post_type: str
    likes_count: int

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PostWithCommentsOut(PostOut):
    comments: list[CommentOut] = []
