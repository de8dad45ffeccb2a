from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.models.users import User
from openmic.routes.deps import get_current_user
from openmic.schemas.base import MessageOut
from openmic.schemas.venues import VenueCreate, VenueOut, VenueUpdate
from openmic.services import venues as venue_service

router = APIRouter(prefix="/api/venues", tags=["venues"])


@router.get("", response_model=list[VenueOut])
def list_venues(db: Session = Depends(get_db)):
    return venue_service.list_venues(db)


@router.get("/owner/{owner_id}", response_model=list[VenueOut])
def list_venues_by_owner(owner_id: int, db: Session = Depends(get_db)):
    return venue_service.list_venues(db, owner_id=owner_id)


@router.get("/{venue_id}", response_model=VenueOut)
def get_venue(venue_id: int, db: Session = Depends(get_db)):
    return venue_service.get_venue(db, venue_id)


@router.post("", response_model=VenueOut, status_code=status.HTTP_201_CREATED)
def create_venue(
    payload: VenueCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return venue_service.create_venue(db, owner=user, payload=payload)


@router.put("/{venue_id}", response_model=VenueOut)
def update_venue(
    venue_id: int,
    payload: VenueUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return venue_service.update_venue(db, venue_id=venue_id, actor=user, payload=payload)


@router.delete("/{venue_id}", response_model=MessageOut)
def delete_venue(
    venue_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    venue_service.delete_venue(db, venue_id=venue_id, actor=user)
    return {"message": "Venue deleted successfully"}
