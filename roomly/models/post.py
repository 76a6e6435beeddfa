import uuid
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    community_id = Column(UUID(as_uuid=True), ForeignKey("communities.id"), nullable=False)

    text = Column(Text, nullable=False)
    image_url = Column(String(500))

    post_type = Column(String(20), nullable=False, default="GENERAL")  # GENERAL / AREA_PHOTO / BUG_REPORT
    likes_count = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, server_default=func.now())


class Comment(Base):
    __tablename__ = "comments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    text = Column(Text, nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now())


class Like(Base):
    __tablename__ = "likes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    created_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_likes_post_id_user_id"),)
