from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roomly.db import get_db
from roomly.schemas.amenity import AmenityOut
from roomly.services.amenity_service import get_amenity, list_amenities

router = APIRouter(prefix="/amenities", tags=["amenities"])


@router.get("", response_model=list[AmenityOut])
def read_amenities(community_id: UUID | None = None, db: Session = Depends(get_db)):
    return list_amenities(db, community_id)


@router.get("/{amenity_id}", response_model=AmenityOut)
def read_amenity(amenity_id: UUID, db: Session = Depends(get_db)):
    return get_amenity(db, amenity_id)
