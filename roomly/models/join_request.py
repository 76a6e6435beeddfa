import uuid
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from roomly.db import Base


class JoinRequest(Base):
    __tablename__ = "join_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    ticket_code = Column(String(20), nullable=False, unique=True)

    community_id = Column(UUID(as_uuid=True), ForeignKey("communities.id"), nullable=False)

    user_email = Column(String(255), nullable=False)
    user_name = Column(String(200), nullable=False)
    tower = Column(String(50))
    unit = Column(String(50))

    status = Column(String(20), nullable=False, default="PENDING")
    # PENDING | APPROVED | REJECTED

    created_at = Column(TIMESTAMP, server_default=func.now())
    decided_at = Column(TIMESTAMP, nullable=True)
