"""
Transactional email over AWS SES.

Templates are plain string formatting; each returns (subject, html, text).
"""
import logging
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from openmic.core.config import settings

logger = logging.getLogger(__name__)

_BASE_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: #2563eb; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background: #f9f9f9; }
    .button { display: inline-block; background: #2563eb; color: white; padding: 12px 24px;
              text-decoration: none; border-radius: 5px; margin: 20px 0; }
    .footer { padding: 20px; text-align: center; color: #666; font-size: 14px; }
"""


def _wrap_html(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{title}</title>
  <style>{_BASE_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>Open Mic</h1></div>
    <div class="content">
      {body}
    </div>
    <div class="footer"><p>Open Mic Platform<br>Supporting the local performer community</p></div>
  </div>
</body>
</html>"""


def render_password_reset(user_name: str, reset_link: str) -> tuple[str, str, str]:
    subject = "Open Mic - Password Reset"
    html = _wrap_html(
        "Password Reset",
        f"""<h2>Password Reset Request</h2>
      <p>Hi {user_name},</p>
      <p>We received a request to reset your password.</p>
      <a href="{reset_link}" class="button">Reset Password</a>
      <p>This link will expire in 1 hour.</p>
      <p>If you didn't request this, you can ignore this email.</p>""",
    )
    text = (
        f"Hi {user_name},\n\n"
        "We received a request to reset your password.\n\n"
        f"Reset it here: {reset_link}\n\n"
        "This link will expire in 1 hour.\n"
        "If you didn't request this, you can ignore this email.\n"
    )
    return subject, html, text


def render_event_reminder(
    *,
    user_name: str,
    event_title: str,
    event_date: str,
    event_time: str,
    venue_name: str | None,
    venue_address: str | None,
    performance_name: str,
    performance_order: int | None,
    event_link: str,
) -> tuple[str, str, str]:
    subject = f"Reminder: {event_title} on {event_date}"
    slot = f"#{performance_order}" if performance_order else "not assigned yet"
    where = ", ".join(part for part in (venue_name, venue_address) if part) or "TBA"
    html = _wrap_html(
        "Event Reminder",
        f"""<h2>You're performing soon!</h2>
      <p>Hi {user_name},</p>
      <p>This is a reminder that you're signed up to perform at <strong>{event_title}</strong>.</p>
      <p><strong>When:</strong> {event_date} at {event_time}<br>
         <strong>Where:</strong> {where}<br>
         <strong>Performance:</strong> {performance_name}<br>
         <strong>Slot:</strong> {slot}</p>
      <a href="{event_link}" class="button">View Event</a>""",
    )
    text = (
        f"Hi {user_name},\n\n"
        f"This is a reminder that you're signed up to perform at {event_title}.\n\n"
        f"When: {event_date} at {event_time}\n"
        f"Where: {where}\n"
        f"Performance: {performance_name}\n"
        f"Slot: {slot}\n\n"
        f"Event details: {event_link}\n"
    )
    return subject, html, text



def render_event_invitation(
    *,
    user_name: str,
    inviter_name: str,
    invitation_type: str,
    event_title: str,
    event_date: str,
    event_time: str,
    venue_name: str | None,
    venue_address: str | None,
    message: str | None,
    accept_link: str,
    decline_link: str,
) -> tuple[str, str, str]:
    role = "co-host" if invitation_type == "cohost" else "perform at"
    subject = f"You're invited to {role} {event_title}"
    where = ", ".join(part for part in (venue_name, venue_address) if part) or "TBA"
    note = f"<p><em>\"{message}\"</em></p>" if message else ""
    html = _wrap_html(
        "Event Invitation",
        f"""<h2>You're invited!</h2>
      <p>Hi {user_name},</p>
      <p>{inviter_name} invited you to {role} <strong>{event_title}</strong>.</p>
      {note}
      <p><strong>When:</strong> {event_date} at {event_time}<br>
         <strong>Where:</strong> {where}</p>
      <a href="{accept_link}" class="button">Accept</a>
      <p><a href="{decline_link}">Decline this invitation</a></p>""",
    )
    text = (
        f"Hi {user_name},\n\n"
        f"{inviter_name} invited you to {role} {event_title}.\n\n"
        + (f"Message: {message}\n\n" if message else "")
        + f"When: {event_date} at {event_time}\n"
        f"Where: {where}\n\n"
        f"Accept: {accept_link}\n"
        f"Decline: {decline_link}\n"
    )
    return subject, html, text


class EmailService:
    """Thin wrapper around the SES ``send_email`` call."""

    def __init__(self, client=None, from_email: str | None = None, platform_url: str | None = None):
        self._client = client
        self.from_email = from_email or settings.FROM_EMAIL
        self.platform_url = (platform_url or settings.PLATFORM_URL).rstrip("/")

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("ses", region_name=settings.AWS_REGION)
        return self._client

    def send_email(self, to: str, subject: str, html_body: str, text_body: str) -> dict:
        try:
            result = self.client.send_email(
                Source=self.from_email,
                Destination={"ToAddresses": [to]},
                Message={
                    "Subject": {"Charset": "UTF-8", "Data": subject},
                    "Body": {
                        "Html": {"Charset": "UTF-8", "Data": html_body},
                        "Text": {"Charset": "UTF-8", "Data": text_body},
                    },
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.exception(f"Failed to send email '{subject}' to {to}")
            return {"success": False, "error": str(e)}

        logger.info(f"Email sent to {to}: {result['MessageId']}")
        return {"success": True, "message_id": result["MessageId"]}

    def send_password_reset_email(self, user_email: str, user_name: str, reset_token: str) -> dict:
        reset_link = (
            f"{self.platform_url}/reset-password?token={reset_token}&email={quote(user_email)}"
        )
        subject, html, text = render_password_reset(user_name, reset_link)
        return self.send_email(user_email, subject, html, text)

    def send_event_reminder(self, user_email: str, **reminder) -> dict:
        event_id = reminder.pop("event_id")
        subject, html, text = render_event_reminder(
            event_link=f"{self.platform_url}/events/{event_id}", **reminder
        )
        return self.send_email(user_email, subject, html, text)

    def send_event_invitation(self, user_email: str, **invitation) -> dict:
        invitation_id = invitation.pop("invitation_id")
        base = f"{self.platform_url}/invitations/{invitation_id}"
        subject, html, text = render_event_invitation(
            accept_link=f"{base}/accept", decline_link=f"{base}/decline", **invitation
        )
        return self.send_email(user_email, subject, html, text)
