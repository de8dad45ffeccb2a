import os

# Point the app at throwaway settings before anything reads them.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import date, datetime, time, timedelta, timezone

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from openmic.core.security import hash_password
from openmic.database.base import Base, Event, User, Venue
from openmic.database.db import get_db
from openmic.main import app
from openmic.routes.deps import get_redis
from openmic.services.auth import issue_session
from openmic.services.sessions import RedisSessionStore
from openmic.tasks import (
    send_event_invitation_task,
    send_event_reminder_task,
    send_password_reset_email_task,
)

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db_session() -> Session:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def redis_client(fake_redis, monkeypatch: pytest.MonkeyPatch):
    """Route the per-event signup lock to the fake Redis server."""
    monkeypatch.setattr("openmic.services.signups.get_redis_client", lambda: fake_redis)
    return fake_redis


@pytest.fixture
def session_store(fake_redis) -> RedisSessionStore:
    return RedisSessionStore(fake_redis, namespace="session")


@pytest.fixture
def reset_store(fake_redis) -> RedisSessionStore:
    return RedisSessionStore(fake_redis, namespace="password_reset")


@pytest.fixture
def queued(monkeypatch: pytest.MonkeyPatch) -> list:
    """Capture task.delay calls instead of talking to the broker."""
    calls = []

    def recorder(name):
        return lambda *args: calls.append((name, args))

    monkeypatch.setattr(
        send_password_reset_email_task, "delay", recorder("password_reset")
    )
    monkeypatch.setattr(send_event_reminder_task, "delay", recorder("event_reminder"))
    monkeypatch.setattr(send_event_invitation_task, "delay", recorder("event_invitation"))
    return calls


@pytest.fixture
def client(redis_client, queued):
    def override_get_db():
        db: Session = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    def _make_user(email: str, name: str = "Performer", role: str = "user") -> User:
        user = User(
            email=email,
            password_hash=hash_password(PASSWORD),
            name=name,
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers(session_store):
    def _auth_headers(user: User) -> dict[str, str]:
        token = issue_session(session_store, user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def host(make_user) -> User:
    return make_user("host@example.com", name="Hannah Host")


@pytest.fixture
def performer(make_user) -> User:
    return make_user("alice@example.com", name="Alice")


@pytest.fixture
def venue(db_session: Session, host: User) -> Venue:
    venue = Venue(name="The Basement", address="1 Main St", owner_id=host.id)
    db_session.add(venue)
    db_session.commit()
    db_session.refresh(venue)
    return venue


@pytest.fixture
def make_event(db_session: Session, venue: Venue, host: User):
    def _make_event(
        max_performers: int = 3,
        signup_opens: datetime | None = None,
        signup_deadline: datetime | None = None,
        title: str = "Tuesday Open Mic",
        on_date: date | None = None,
    ) -> Event:
        now = datetime.now(timezone.utc)
        event = Event(
            title=title,
            venue_id=venue.id,
            host_id=host.id,
            date=on_date or date.today() + timedelta(days=7),
            start_time=time(19, 0),
            end_time=time(22, 0),
            max_performers=max_performers,
            performance_length=10,
            event_type="open-mic",
            signup_opens=signup_opens or now - timedelta(days=1),
            signup_deadline=signup_deadline or now + timedelta(days=1),
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def event(make_event) -> Event:
    return make_event()
