"""
Event invitations: a host invites a registered user to co-host or perform.

Only the invitee can answer an invitation, and only once. Either side may
delete it.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from openmic.models.invitations import Invitation, InvitationStatus
from openmic.models.users import User
from openmic.schemas.invitations import InvitationCreate
from openmic.services.auth import get_user
from openmic.services.errors import (
    DuplicateInvitationError,
    ForbiddenError,
    InvitationNotFoundError,
)
from openmic.services.events import ensure_event_host, get_event

logger = logging.getLogger(__name__)

_INVITATION_LOADERS = (
    selectinload(Invitation.event),
    selectinload(Invitation.inviter),
    selectinload(Invitation.invitee),
)


def get_invitation(db: Session, invitation_id: int) -> Invitation:
    invitation = db.scalar(
        select(Invitation).options(*_INVITATION_LOADERS).where(Invitation.id == invitation_id)
    )
    if invitation is None:
        raise InvitationNotFoundError()
    return invitation


def list_for_user(db: Session, user_id: int) -> list[Invitation]:
    """Invitations received by the user, newest first."""
    stmt = (
        select(Invitation)
        .options(*_INVITATION_LOADERS)
        .where(Invitation.invitee_id == user_id)
        .order_by(Invitation.created_at.desc(), Invitation.id.desc())
    )
    return list(db.scalars(stmt))


def list_for_event(db: Session, *, event_id: int, actor: User) -> list[Invitation]:
    ensure_event_host(get_event(db, event_id), actor)
    stmt = (
        select(Invitation)
        .options(*_INVITATION_LOADERS)
        .where(Invitation.event_id == event_id)
        .order_by(Invitation.id)
    )
    return list(db.scalars(stmt))


def _pending_exists(db: Session, payload: InvitationCreate) -> bool:
    stmt = select(Invitation.id).where(
        Invitation.event_id == payload.event_id,
        Invitation.invitee_id == payload.invitee_id,
        Invitation.type == payload.type,
        Invitation.status == InvitationStatus.PENDING.value,
    )
    return db.scalar(stmt) is not None


def create(db: Session, *, inviter: User, payload: InvitationCreate) -> Invitation:
    ensure_event_host(get_event(db, payload.event_id), inviter)
    get_user(db, payload.invitee_id)
    if _pending_exists(db, payload):
        raise DuplicateInvitationError()

    invitation = Invitation(
        event_id=payload.event_id,
        inviter_id=inviter.id,
        invitee_id=payload.invitee_id,
        type=payload.type,
        message=payload.message,
    )
    db.add(invitation)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateInvitationError() from e

    logger.info(
        f"User {inviter.id} invited user {payload.invitee_id} "
        f"to event {payload.event_id} as {payload.type}"
    )
    return get_invitation(db, invitation.id)


def respond(db: Session, *, invitation_id: int, actor: User, status: str) -> Invitation:
    invitation = db.get(Invitation, invitation_id)
    if invitation is None or invitation.status != InvitationStatus.PENDING.value:
        raise InvitationNotFoundError("Invitation not found or already responded to")
    if invitation.invitee_id != actor.id:
        raise ForbiddenError("Not authorized to respond to this invitation")

    invitation.status = status
    invitation.responded_at = datetime.now(timezone.utc)
    db.commit()
    logger.info(f"Invitation {invitation_id} {status} by user {actor.id}")
    return get_invitation(db, invitation_id)


def delete(db: Session, *, invitation_id: int, actor: User) -> None:
    invitation = db.get(Invitation, invitation_id)
    if invitation is None or actor.id not in (invitation.inviter_id, invitation.invitee_id):
        raise InvitationNotFoundError("Invitation not found or unauthorized")
    db.delete(invitation)
    db.commit()
