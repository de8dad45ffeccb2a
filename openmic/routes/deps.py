import redis
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from openmic.database.db import get_db
from openmic.database.redis import get_redis_client
from openmic.models.users import User
from openmic.services.auth import authenticate_token
from openmic.services.sessions import RedisSessionStore, SessionStore

# auto_error is off so a missing token gets the same JSON error body as a bad one.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_redis() -> redis.Redis:
    return get_redis_client()


def get_session_store(client: redis.Redis = Depends(get_redis)) -> SessionStore:
    return RedisSessionStore(client, namespace="session")


def get_reset_token_store(client: redis.Redis = Depends(get_redis)) -> SessionStore:
    return RedisSessionStore(client, namespace="password_reset")


def get_current_session(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> tuple[User, str]:
    return authenticate_token(db, store, token)


def get_current_user(session: tuple[User, str] = Depends(get_current_session)) -> User:
    return session[0]
