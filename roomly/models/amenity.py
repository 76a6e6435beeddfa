import uuid
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class Amenity(Base):
    __tablename__ = "amenities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    community_id = Column(UUID(as_uuid=True), ForeignKey("communities.id"), nullable=True)

    name = Column(String(100), nullable=False)
    description = Column(String(255))
    image_url = Column(String(500))

    # display tag: POOL / GYM / GRILL / HALL / COWORKING / ...
    amenity_type = Column(String(50), nullable=False, default="OTHER")

    # booking-frequency class; NULL = unrestricted
    category = Column(String(50), nullable=True)

    capacity = Column(Integer, nullable=False, default=1)
    points_reward = Column(Integer, nullable=False, default=10)

    created_at = Column(TIMESTAMP, server_default=func.now())
