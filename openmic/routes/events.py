from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.models.users import User
from openmic.routes.deps import get_current_user
from openmic.schemas.base import MessageOut
from openmic.schemas.events import EventCreate, EventOut, EventType, EventUpdate, ReminderOut
from openmic.services import events as event_service
from openmic.tasks import dispatch, send_event_reminder_task

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventOut])
def list_events(
    on_date: date | None = Query(default=None, alias="date"),
    event_type: EventType | None = Query(default=None, alias="eventType"),
    venue_id: int | None = Query(default=None, alias="venueId"),
    db: Session = Depends(get_db),
):
    return event_service.list_events(
        db, on_date=on_date, event_type=event_type, venue_id=venue_id
    )


@router.get("/host/{host_id}", response_model=list[EventOut])
def list_events_by_host(host_id: int, db: Session = Depends(get_db)):
    return event_service.list_events_by_host(db, host_id)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return event_service.create_event(db, host=user, payload=payload)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return event_service.update_event(db, event_id=event_id, actor=user, payload=payload)


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event_service.delete_event(db, event_id=event_id, actor=user)
    return {"message": "Event deleted successfully"}


@router.post("/{event_id}/reminders", response_model=ReminderOut)
def send_reminders(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    signups = event_service.reminder_recipients(db, event_id=event_id, actor=user)
    queued = sum(1 for signup in signups if dispatch(send_event_reminder_task, signup.id))
    return {"event_id": event_id, "queued": queued}
