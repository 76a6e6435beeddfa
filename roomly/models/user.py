import uuid
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    auth_id = Column(String(100))
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(200), nullable=False)

    role = Column(String(20), nullable=False, default="RESIDENT")  # RESIDENT / ADMIN

    community_id = Column(UUID(as_uuid=True), ForeignKey("communities.id"), nullable=True)
    tower = Column(String(50))
    apartment = Column(String(50))

    avatar_url = Column(String(500))

    # cache of sum(point_logs.points) for this user
    points = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE / INACTIVE

    created_at = Column(TIMESTAMP, server_default=func.now())
