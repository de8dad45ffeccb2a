"""Domain error codes and the exceptions services raise.

Each error carries a user-safe message and the HTTP status it maps to;
routes never build error responses for these by hand.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_SIGNUP = "DUPLICATE_SIGNUP"
    EVENT_FULL = "EVENT_FULL"
    SIGNUPS_NOT_OPEN = "SIGNUPS_NOT_OPEN"
    SIGNUPS_CLOSED = "SIGNUPS_CLOSED"
    EVENT_BUSY = "EVENT_BUSY"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"
    EMAIL_IN_USE = "EMAIL_IN_USE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code, user-safe message and HTTP status."""

    code: ErrorCode
    message: str
    status_code: int = 400

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    def __init__(self, resource: str) -> None:
        super().__init__(ErrorCode.NOT_FOUND, f"{resource} not found", 404)
        self.resource = resource


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: int) -> None:
        super().__init__("Event")
        self.event_id = event_id


class SignupNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Signup")


class DuplicateSignupError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.DUPLICATE_SIGNUP, "User already signed up for this event")


class EventFullError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.EVENT_FULL, "Event is full")


class SignupsNotOpenError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.SIGNUPS_NOT_OPEN, "Signups are not open yet")


class SignupsClosedError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.SIGNUPS_CLOSED, "Signup deadline has passed")


class EventBusyError(DomainError):
    """Raised when the per-event lock could not be acquired in time."""

    def __init__(self) -> None:
        super().__init__(
            ErrorCode.EVENT_BUSY, "Signup list is busy, please try again.", 409
        )


class EmailInUseError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.EMAIL_IN_USE, "User already exists")


class InvalidCredentialsError(DomainError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(ErrorCode.INVALID_CREDENTIALS, message)


class InvalidResetTokenError(DomainError):
    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(ErrorCode.INVALID_RESET_TOKEN, message)


class UnauthorizedError(DomainError):
    def __init__(self, message: str = "Could not validate credentials") -> None:
        super().__init__(ErrorCode.UNAUTHORIZED, message, 401)


class ForbiddenError(DomainError):
    def __init__(self, message: str = "Not authorized to manage this resource") -> None:
        super().__init__(ErrorCode.FORBIDDEN, message, 403)


class DuplicateInvitationError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            ErrorCode.DUPLICATE_INVITATION,
            "An invitation of this type already exists for this user and event",
        )


class InvitationNotFoundError(NotFoundError):
    """404 with a message that does not reveal whether the invitation exists."""

    def __init__(self, message: str = "Invitation not found") -> None:
        super().__init__("Invitation")
        self.message = message
