import uuid
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class PointLog(Base):
    __tablename__ = "point_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    community_id = Column(UUID(as_uuid=True), ForeignKey("communities.id"), nullable=True, index=True)

    action = Column(String(50), nullable=False)  # see services.points_service.POINT_ACTIONS
    points = Column(Integer, nullable=False)
    description = Column(String(255))

    created_at = Column(TIMESTAMP, server_default=func.now())
