from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from openmic.models.users import User
from openmic.models.venues import Venue
from openmic.schemas.venues import VenueCreate, VenueUpdate
from openmic.services.errors import DomainError, ErrorCode, ForbiddenError, NotFoundError

_NULLABLE_FIELDS = {"phone", "email", "description", "capacity"}


def get_venue(db: Session, venue_id: int) -> Venue:
    venue = db.scalar(
        select(Venue).options(selectinload(Venue.owner)).where(Venue.id == venue_id)
    )
    if venue is None:
        raise NotFoundError("Venue")
    return venue


def list_venues(db: Session, *, owner_id: int | None = None) -> list[Venue]:
    stmt = select(Venue).options(selectinload(Venue.owner))
    if owner_id is not None:
        stmt = stmt.where(Venue.owner_id == owner_id)
    return list(db.scalars(stmt.order_by(Venue.name)))


def create_venue(db: Session, *, owner: User, payload: VenueCreate) -> Venue:
    venue = Venue(owner_id=owner.id, **payload.model_dump())
    db.add(venue)
    db.commit()
    return get_venue(db, venue.id)


def _ensure_owner(venue: Venue, user: User) -> None:
    if venue.owner_id != user.id and not user.is_admin:
        raise ForbiddenError("Not authorized to manage this venue")


def update_venue(db: Session, *, venue_id: int, actor: User, payload: VenueUpdate) -> Venue:
    venue = get_venue(db, venue_id)
    _ensure_owner(venue, actor)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field not in _NULLABLE_FIELDS:
            continue
        setattr(venue, field, value)
    db.commit()
    return get_venue(db, venue_id)


def delete_venue(db: Session, *, venue_id: int, actor: User) -> None:
    venue = get_venue(db, venue_id)
    _ensure_owner(venue, actor)
    if venue.events:
        raise DomainError(ErrorCode.VALIDATION_ERROR, "Venue still has events")
    db.delete(venue)
    db.commit()
