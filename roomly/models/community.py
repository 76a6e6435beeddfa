import uuid
from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class Community(Base):
    __tablename__ = "communities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False)
    address = Column(String(255))
    admin_email = Column(String(255))

    total_floors = Column(Integer)
    units_per_floor = Column(Integer)
    num_buildings = Column(Integer, default=1)

    # cache of sum(point_logs.points) for this community, see points_ledger_service
    total_points = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, server_default=func.now())
