import logging
import secrets
import string
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from roomly.errors import ConflictError, ForbiddenError, NotFoundError, StateError, ValidationError
from roomly.models.community import Community
from roomly.models.join_request import JoinRequest
from roomly.services.user_service import get_user_by_email


logger = logging.getLogger(__name__)

_TICKET_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class ApprovalResult:
    request: JoinRequest
    linked_user_id: uuid.UUID | None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_ticket_code() -> str:
    return "TKT-" + "".join(secrets.choice(_TICKET_ALPHABET) for _ in range(6))


def _get_request(db: Session, request_id, community_id=None) -> JoinRequest:
    req = db.query(JoinRequest).filter(JoinRequest.id == request_id).first()
    if not req:
        raise NotFoundError("Join request not found")
    if community_id is not None and req.community_id != community_id:
        raise ForbiddenError("Join request belongs to another community")
    return req


def create_join_request(
    db: Session,
    *,
    community_id,
    user_email: str,
    user_name: str,
    tower: str | None = None,
    unit: str | None = None,
) -> JoinRequest:
    email = (user_email or "").strip().lower()
    if not email or not (user_name or "").strip():
        raise ValidationError("user_email and user_name are required")

    if not db.query(Community.id).filter(Community.id == community_id).first():
        raise NotFoundError("Community not found")

    pending = (
        db.query(JoinRequest.id)
        .filter(JoinRequest.community_id == community_id)
        .filter(JoinRequest.user_email == email)
        .filter(JoinRequest.status == "PENDING")
        .first()
    )
    if pending:
        raise ConflictError("A pending request already exists for this community")

    req = JoinRequest(
        ticket_code=_new_ticket_code(),
        community_id=community_id,
        user_email=email,
        user_name=user_name.strip(),
        tower=tower,
        unit=unit,
        status="PENDING",
    )
    db.add(req)
    db.commit()
    db.refresh(req)
    return req


def list_pending_requests(db: Session, community_id):
    return (
        db.query(JoinRequest)
        .filter(JoinRequest.community_id == community_id)
        .filter(JoinRequest.status == "PENDING")
        .order_by(JoinRequest.created_at.desc())
        .all()
    )


def _decide(db: Session, req: JoinRequest, status: str):
    updated = (
        db.query(JoinRequest)
        .filter(JoinRequest.id == req.id)
        .filter(JoinRequest.status == "PENDING")
        .update({JoinRequest.status: status, JoinRequest.decided_at: _utcnow()}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise StateError(f"Join request is already {req.status}")
    db.commit()


def approve_join_request(db: Session, request_id, *, community_id=None) -> ApprovalResult:
    req = _get_request(db, request_id, community_id)
    _decide(db, req, "APPROVED")
    db.refresh(req)

    user = get_user_by_email(db, req.user_email)
    if not user:
        # approval stands; the account is linked by hand once it exists
        logger.warning(
            "approved join request has no matching user",
            extra={"request_id": str(req.id), "user_email": req.user_email},
        )
        return ApprovalResult(request=req, linked_user_id=None)

    user.community_id = req.community_id
    user.tower = req.tower
    user.apartment = req.unit
    db.commit()

    logger.info(
        "join request approved",
        extra={"request_id": str(req.id), "user_id": str(user.id), "community_id": str(req.community_id)},
    )
    return ApprovalResult(request=req, linked_user_id=user.id)


def reject_join_request(db: Session, request_id, *, community_id=None) -> JoinRequest:
    req = _get_request(db, request_id, community_id)
    _decide(db, req, "REJECTED")
    db.refresh(req)

    logger.info("join request rejected", extra={"request_id": str(req.id)})
    return req
