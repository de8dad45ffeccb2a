import logging
from contextlib import contextmanager
from datetime import datetime, timezone

import redis
from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from openmic.core.config import settings
from openmic.database.redis import get_redis_client
from openmic.models.events import Event
from openmic.models.signups import Signup, SignupStatus
from openmic.models.users import User
from openmic.services.errors import (
    DuplicateSignupError,
    EventBusyError,
    EventFullError,
    EventNotFoundError,
    ForbiddenError,
    SignupNotFoundError,
    SignupsClosedError,
    SignupsNotOpenError,
)
from openmic.services.events import ensure_event_host, to_utc

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def event_lock(event_id: int):
    """
    Hold the per-event Redis lock while a signup list is read and written.
    Only one request per event can register, cancel or add a performer at a time.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(
        f"event_lock:{event_id}",
        timeout=settings.SIGNUP_LOCK_TIMEOUT,
        blocking_timeout=settings.SIGNUP_LOCK_BLOCKING_TIMEOUT,
    )
    if not lock.acquire(blocking=True):
        logger.warning(f"Could not acquire signup lock for event {event_id}")
        raise EventBusyError()
    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockError:
            # lock timed out while held; the write has already been committed
            logger.warning(f"Signup lock for event {event_id} expired before release")


def _get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def get_signup(db: Session, signup_id: int) -> Signup:
    signup = db.get(Signup, signup_id)
    if signup is None:
        raise SignupNotFoundError()
    return signup


def _managed_signup(db: Session, signup_id: int, actor: User | None) -> Signup:
    """Load a signup and, when an actor is given, check they host its event."""
    signup = get_signup(db, signup_id)
    if actor is not None:
        ensure_event_host(signup.event, actor)
    return signup


def _find_active_signup(db: Session, event_id: int, user_id: int) -> Signup | None:
    return db.scalar(
        select(Signup).where(
            Signup.event_id == event_id,
            Signup.user_id == user_id,
            Signup.status != SignupStatus.CANCELLED.value,
        )
    )


def _confirmed_count(db: Session, event_id: int) -> int:
    count = db.scalar(
        select(func.count(Signup.id)).where(
            Signup.event_id == event_id,
            Signup.status == SignupStatus.CONFIRMED.value,
        )
    )
    return int(count or 0)


def register(
    db: Session,
    *,
    event_id: int,
    user_id: int,
    performance_name: str,
    performance_type: str,
    notes: str | None = None,
    now: datetime | None = None,
) -> Signup:
    """
    Sign a user up to perform at an event.

    Raises DuplicateSignupError, EventNotFoundError, SignupsNotOpenError,
    SignupsClosedError or EventFullError, checked in that order.
    """
    now = to_utc(now) if now else utcnow()

    with event_lock(event_id):
        if _find_active_signup(db, event_id, user_id) is not None:
            raise DuplicateSignupError()

        event = _get_event(db, event_id)
        opens = to_utc(event.signup_opens)
        deadline = to_utc(event.signup_deadline)
        if opens is not None and now < opens:
            raise SignupsNotOpenError()
        if deadline is not None and now > deadline:
            raise SignupsClosedError()
        if _confirmed_count(db, event_id) >= event.max_performers:
            raise EventFullError()

        signup = Signup(
            event_id=event_id,
            user_id=user_id,
            performance_name=performance_name,
            performance_type=performance_type,
            notes=notes,
            status=SignupStatus.CONFIRMED.value,
            performance_order=None,
            created_at=now,
            updated_at=now,
        )
        db.add(signup)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateSignupError() from e
        db.refresh(signup)

    logger.info(f"User {user_id} signed up for event {event_id} (signup {signup.id})")
    return signup


def cancel(db: Session, *, event_id: int, user_id: int) -> None:
    """Remove the user's signup(s) for the event. Raises SignupNotFoundError if none."""
    with event_lock(event_id):
        res = db.execute(
            delete(Signup).where(Signup.event_id == event_id, Signup.user_id == user_id)
        )
        if res.rowcount == 0:  # type: ignore
            db.rollback()
            raise SignupNotFoundError()
        db.commit()
    logger.info(f"User {user_id} cancelled signup for event {event_id}")


def cancel_by_id(db: Session, *, signup_id: int, actor: User | None = None) -> None:
    """Remove a signup by id; the actor must own the signup or host its event."""
    signup = get_signup(db, signup_id)
    if actor is not None and signup.user_id != actor.id:
        try:
            ensure_event_host(signup.event, actor)
        except ForbiddenError:
            raise ForbiddenError("Not authorized to cancel this signup") from None

    event_id = signup.event_id
    with event_lock(event_id):
        db.delete(signup)
        db.commit()
    logger.info(f"Signup {signup_id} for event {event_id} deleted")


def list_for_event(db: Session, event_id: int) -> list[Signup]:
    """All signups for an event, in signup order."""
    _get_event(db, event_id)
    stmt = (
        select(Signup)
        .options(selectinload(Signup.user))
        .where(Signup.event_id == event_id)
        .order_by(Signup.created_at, Signup.id)
    )
    return list(db.scalars(stmt))


def list_ordered(db: Session, event_id: int) -> list[Signup]:
    """Confirmed signups by performance_order (nulls last), then by creation time."""
    _get_event(db, event_id)
    stmt = (
        select(Signup)
        .options(selectinload(Signup.user))
        .where(
            Signup.event_id == event_id,
            Signup.status == SignupStatus.CONFIRMED.value,
        )
        .order_by(
            case((Signup.performance_order.is_(None), 1), else_=0),
            Signup.performance_order,
            Signup.created_at,
            Signup.id,
        )
    )
    return list(db.scalars(stmt))


def list_for_user(db: Session, user_id: int) -> list[Signup]:
    stmt = (
        select(Signup)
        .join(Event, Signup.event_id == Event.id)
        .options(selectinload(Signup.event).selectinload(Event.venue))
        .where(Signup.user_id == user_id)
        .order_by(Event.date.desc(), Signup.id)
    )
    return list(db.scalars(stmt))


def update_status(
    db: Session, *, signup_id: int, status: str, actor: User | None = None
) -> Signup:
    signup = _managed_signup(db, signup_id, actor)
    signup.status = status
    signup.updated_at = utcnow()
    try:
        db.commit()
    except IntegrityError as e:
        # re-activating a signup while the user already holds another one
        db.rollback()
        raise DuplicateSignupError() from e
    db.refresh(signup)
    return signup


def _apply_order(
    db: Session, *, event_id: int, signup_id: int, position: int, now: datetime
) -> Signup | None:
    signup = db.scalar(
        select(Signup).where(Signup.id == signup_id, Signup.event_id == event_id)
    )
    if signup is None:
        return None
    signup.performance_order = position
    signup.updated_at = now
    db.flush()
    return signup


def reorder(
    db: Session, *, event_id: int, signup_ids: list[int], actor: User | None = None
) -> list[Signup]:
    """
    Number the given signups 1..N in list order, as one transaction.

    Ids that do not belong to the event are skipped. Signups left out of the
    list keep whatever order value they had.
    """
    event = _get_event(db, event_id)
    if actor is not None:
        ensure_event_host(event, actor)

    now = utcnow()
    updated: list[Signup] = []
    try:
        for position, signup_id in enumerate(signup_ids, start=1):
            signup = _apply_order(
                db, event_id=event_id, signup_id=signup_id, position=position, now=now
            )
            if signup is not None:
                updated.append(signup)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for signup in updated:
        db.refresh(signup)
    logger.info(f"Reordered {len(updated)} performers for event {event_id}")
    return updated


def mark_finished(
    db: Session, *, signup_id: int, actor: User | None = None, now: datetime | None = None
) -> Signup:
    signup = _managed_signup(db, signup_id, actor)
    now = now or utcnow()
    signup.is_finished = True
    signup.finished_at = now
    signup.updated_at = now
    db.commit()
    db.refresh(signup)
    return signup


def unmark_finished(db: Session, *, signup_id: int, actor: User | None = None) -> Signup:
    signup = _managed_signup(db, signup_id, actor)
    signup.is_finished = False
    signup.finished_at = None
    signup.updated_at = utcnow()
    db.commit()
    db.refresh(signup)
    return signup


def set_current_performer(
    db: Session, *, signup_id: int, is_current: bool, actor: User | None = None
) -> Signup:
    """Write the flag as given. Other signups of the event are left untouched."""
    signup = _managed_signup(db, signup_id, actor)
    signup.is_current_performer = is_current
    signup.updated_at = utcnow()
    db.commit()
    db.refresh(signup)
    return signup


def add_manual(
    db: Session,
    *,
    event_id: int,
    performer_name: str,
    performance_name: str,
    performance_type: str,
    notes: str | None = None,
    actor: User | None = None,
) -> Signup:
    """Add a performer without an account, placed after the highest order value."""
    event = _get_event(db, event_id)
    if actor is not None:
        ensure_event_host(event, actor)

    now = utcnow()
    with event_lock(event_id):
        max_order = db.scalar(
            select(func.max(Signup.performance_order)).where(Signup.event_id == event_id)
        )
        signup = Signup(
            event_id=event_id,
            user_id=None,
            performer_name=performer_name,
            performance_name=performance_name,
            performance_type=performance_type,
            notes=notes,
            status=SignupStatus.CONFIRMED.value,
            performance_order=(max_order or 0) + 1,
            created_at=now,
            updated_at=now,
        )
        db.add(signup)
        db.commit()
        db.refresh(signup)

    logger.info(
        f"Manual performer '{performer_name}' added to event {event_id} at {signup.performance_order}"
    )
    return signup
