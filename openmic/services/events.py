import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from openmic.models.events import Event
from openmic.models.signups import Signup, SignupStatus
from openmic.models.users import User
from openmic.models.venues import Venue
from openmic.schemas.events import EventCreate, EventUpdate
from openmic.services.errors import (
    DomainError,
    ErrorCode,
    EventNotFoundError,
    ForbiddenError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_EVENT_LOADERS = (
    selectinload(Event.venue),
    selectinload(Event.host),
    selectinload(Event.signups),
)
_NULLABLE_FIELDS = {"description", "signup_opens", "signup_deadline"}


def to_utc(value: datetime | None) -> datetime | None:
    """Normalize to aware UTC; naive values (e.g. read back from SQLite) are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_event_host(event: Event, user: User) -> None:
    if event.host_id != user.id and not user.is_admin:
        raise ForbiddenError("Not authorized to manage this event")


def get_event(db: Session, event_id: int) -> Event:
    event = db.scalar(select(Event).options(*_EVENT_LOADERS).where(Event.id == event_id))
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def list_events(
    db: Session,
    *,
    on_date: date | None = None,
    event_type: str | None = None,
    venue_id: int | None = None,
) -> list[Event]:
    stmt = select(Event).options(*_EVENT_LOADERS)
    if on_date is not None:
        stmt = stmt.where(Event.date == on_date)
    if event_type is not None:
        stmt = stmt.where(Event.event_type == event_type)
    if venue_id is not None:
        stmt = stmt.where(Event.venue_id == venue_id)
    return list(db.scalars(stmt.order_by(Event.date, Event.start_time)))


def list_events_by_host(db: Session, host_id: int) -> list[Event]:
    stmt = (
        select(Event)
        .options(*_EVENT_LOADERS)
        .where(Event.host_id == host_id)
        .order_by(Event.date.desc())
    )
    return list(db.scalars(stmt))


def create_event(db: Session, *, host: User, payload: EventCreate) -> Event:
    if db.get(Venue, payload.venue_id) is None:
        raise NotFoundError("Venue")

    values = payload.model_dump()
    values["signup_opens"] = to_utc(values["signup_opens"])
    values["signup_deadline"] = to_utc(values["signup_deadline"])
    event = Event(host_id=host.id, **values)
    db.add(event)
    db.commit()
    logger.info(f"Event {event.id} created by user {host.id}")
    return get_event(db, event.id)


def update_event(db: Session, *, event_id: int, actor: User, payload: EventUpdate) -> Event:
    event = get_event(db, event_id)
    ensure_event_host(event, actor)

    updates = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if "venue_id" in updates and db.get(Venue, updates["venue_id"]) is None:
        raise NotFoundError("Venue")
    for field in ("signup_opens", "signup_deadline"):
        if field in updates:
            updates[field] = to_utc(updates[field])
    opens = to_utc(updates.get("signup_opens", event.signup_opens))
    deadline = to_utc(updates.get("signup_deadline", event.signup_deadline))
    if opens and deadline and opens > deadline:
        raise DomainError(ErrorCode.VALIDATION_ERROR, "signupOpens must be before signupDeadline")

    for field, value in updates.items():
        setattr(event, field, value)
    db.commit()
    return get_event(db, event_id)


def delete_event(db: Session, *, event_id: int, actor: User) -> None:
    event = get_event(db, event_id)
    ensure_event_host(event, actor)
    db.delete(event)
    db.commit()
    logger.info(f"Event {event_id} deleted by user {actor.id}")


def reminder_recipients(db: Session, *, event_id: int, actor: User) -> list[Signup]:
    """Confirmed signups of the event that belong to a registered user."""
    event = get_event(db, event_id)
    ensure_event_host(event, actor)
    stmt = select(Signup).where(
        Signup.event_id == event_id,
        Signup.status == SignupStatus.CONFIRMED.value,
        Signup.user_id.is_not(None),
    )
    return list(db.scalars(stmt.order_by(Signup.id)))
