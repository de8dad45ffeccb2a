import logging

from openmic.core.celery_config import celery_app
from openmic.core.email import EmailService
from openmic.database import base  # noqa: F401
from openmic.database.db import SessionLocal
from openmic.models.invitations import Invitation
from openmic.models.signups import Signup

logger = logging.getLogger(__name__)


@celery_app.task(bind=True)
def send_password_reset_email_task(self, email: str, user_name: str, token: str) -> dict:
    """Email a password-reset link."""
    return EmailService().send_password_reset_email(email, user_name, token)


@celery_app.task(bind=True)
def send_event_reminder_task(self, signup_id: int) -> dict:
    """Email the performer of a signup a reminder about their event."""
    db = SessionLocal()
    try:
        signup = db.get(Signup, signup_id)
        if not signup or not signup.user:
            logger.info(f"Skipping reminder for signup {signup_id}: no user to notify")
            return {"success": False, "error": "no recipient"}

        event = signup.event
        return EmailService().send_event_reminder(
            signup.user.email,
            event_id=event.id,
            user_name=signup.user.name,
            event_title=event.title,
            event_date=event.date.isoformat(),
            event_time=event.start_time.strftime("%H:%M"),
            venue_name=event.venue_name,
            venue_address=event.venue_address,
            performance_name=signup.performance_name,
            performance_order=signup.performance_order,
        )
    finally:
        db.close()


@celery_app.task(bind=True)
def send_event_invitation_task(self, invitation_id: int) -> dict:
    """Email the invitee of an invitation with accept and decline links."""
    db = SessionLocal()
    try:
        invitation = db.get(Invitation, invitation_id)
        if invitation is None or invitation.status != "pending":
            logger.info(f"Skipping invitation {invitation_id}: no longer pending")
            return {"success": False, "error": "not pending"}

        event = invitation.event
        return EmailService().send_event_invitation(
            invitation.invitee.email,
            invitation_id=invitation.id,
            user_name=invitation.invitee.name,
            inviter_name=invitation.inviter.name,
            invitation_type=invitation.type,
            event_title=event.title,
            event_date=event.date.isoformat(),
            event_time=event.start_time.strftime("%H:%M"),
            venue_name=event.venue_name,
            venue_address=event.venue_address,
            message=invitation.message,
        )
    finally:
        db.close()


def dispatch(task, *args) -> bool:
    """Queue a fire-and-forget task; a broker failure never fails the request."""
    try:
        task.delay(*args)
    except Exception:
        logger.exception(f"Could not queue task {task.name}")
        return False
    return True
