import enum
import datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, Time, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from openmic.database.db import Base


class EventStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    FINISHED = "finished"


class SignupListMode(str, enum.Enum):
    SIGNUP_ORDER = "signup_order"
    RANDOM_ORDER = "random_order"
    BUCKET = "bucket"
    BOOKED_MIC = "booked_mic"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    venue_id: Mapped[int] = mapped_column(ForeignKey("venues.id"), nullable=False, index=True)
    host_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[datetime.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[datetime.time] = mapped_column(Time, nullable=False)
    max_performers: Mapped[int] = mapped_column(Integer, nullable=False)
    performance_length: Mapped[int] = mapped_column(Integer, nullable=False)
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    signup_list_mode: Mapped[str] = mapped_column(
        String(32), nullable=False, default=SignupListMode.SIGNUP_ORDER.value
    )
    signup_opens: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True))
    signup_deadline: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True))
    event_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=EventStatus.SCHEDULED.value
    )
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    venue: Mapped["Venue"] = relationship(back_populates="events")
    host: Mapped["User"] = relationship()
    signups: Mapped[list["Signup"]] = relationship(
        back_populates="event", cascade="all, delete-orphan"
    )
    invitations: Mapped[list["Invitation"]] = relationship(
        back_populates="event", cascade="all, delete-orphan"
    )

    @property
    def venue_name(self) -> str | None:
        return self.venue.name if self.venue else None

    @property
    def venue_address(self) -> str | None:
        return self.venue.address if self.venue else None

    @property
    def host_name(self) -> str | None:
        return self.host.name if self.host else None

    @property
    def current_signups(self) -> int:
        return sum(1 for s in self.signups if s.status == "confirmed")
