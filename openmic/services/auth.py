"""
Accounts, sessions and password resets.

Access tokens are JWTs whose ``jti`` must be live in the session store;
logging out or changing the password removes the session entries, which
revokes the tokens before they expire.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from openmic.core.config import settings
from openmic.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    new_reset_token,
    new_token_id,
    verify_password,
)
from openmic.models.users import User
from openmic.schemas.auth import ProfileUpdate, RegisterRequest
from openmic.services.errors import (
    EmailInUseError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    NotFoundError,
    UnauthorizedError,
)
from openmic.services.sessions import SessionStore

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email.lower()))


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


def issue_session(store: SessionStore, user: User) -> str:
    """Create a session entry for the user and return a signed access token."""
    jti = new_token_id()
    store.put(jti, str(user.id), settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)
    logger.info(f"Session created for user {user.id}")
    return create_access_token(data={"sub": str(user.id)}, jti=jti)


def authenticate_token(db: Session, store: SessionStore, token: str | None) -> tuple[User, str]:
    """Resolve a bearer token to (user, jti) or raise UnauthorizedError."""
    if not token:
        raise UnauthorizedError("No token provided")

    claims = decode_access_token(token)
    if claims is None or "jti" not in claims or "sub" not in claims:
        raise UnauthorizedError("Invalid token")

    jti = claims["jti"]
    if store.get(jti) != claims["sub"]:
        raise UnauthorizedError("Session expired or revoked")

    user = db.get(User, int(claims["sub"]))
    if user is None:
        raise UnauthorizedError("Invalid token")
    return user, jti


def register_user(db: Session, store: SessionStore, payload: RegisterRequest) -> tuple[str, User]:
    if get_user_by_email(db, payload.email) is not None:
        raise EmailInUseError()

    social = payload.social_media
    user = User(
        email=payload.email.lower(),
        password_hash=hash_password(payload.password),
        name=payload.name,
        phone=payload.phone,
        performer_type=payload.performer_type,
        bio=payload.bio,
        instagram_handle=social.instagram if social else None,
        twitter_handle=social.twitter if social else None,
        tiktok_handle=social.tiktok if social else None,
        youtube_handle=social.youtube if social else None,
        website_url=str(social.website) if social and social.website else None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailInUseError() from e
    db.refresh(user)

    logger.info(f"User {user.id} registered")
    return issue_session(store, user), user


def login(db: Session, store: SessionStore, *, email: str, password: str) -> tuple[str, User]:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {email}")
        raise InvalidCredentialsError()
    return issue_session(store, user), user


def logout(store: SessionStore, jti: str) -> None:
    store.delete(jti)


def revoke_all_sessions(store: SessionStore, user: User) -> int:
    return store.delete_by_value(str(user.id))


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        if field == "website_url" and value is not None:
            value = str(value)
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def change_password(
    db: Session,
    store: SessionStore,
    user: User,
    *,
    current_password: str,
    new_password: str,
) -> None:
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentialsError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.commit()
    revoke_all_sessions(store, user)


def request_password_reset(
    db: Session, reset_store: SessionStore, email: str
) -> tuple[User, str] | None:
    """Store a one-hour reset token for the account, if there is one."""
    user = get_user_by_email(db, email)
    if user is None:
        return None
    token = new_reset_token()
    reset_store.put(token, user.email, settings.RESET_TOKEN_EXPIRE_SECONDS)
    return user, token


def reset_password(
    db: Session,
    reset_store: SessionStore,
    session_store: SessionStore,
    *,
    token: str,
    new_password: str,
) -> User:
    """Consume a reset token and set the new password. Tokens work once."""
    email = reset_store.pop(token)
    if email is None:
        raise InvalidResetTokenError("Invalid or expired token")

    user = get_user_by_email(db, email)
    if user is None:
        raise InvalidResetTokenError("Invalid or expired token")

    user.password_hash = hash_password(new_password)
    db.commit()
    revoke_all_sessions(session_store, user)
    logger.info(f"Password reset for user {user.id}")
    return user
