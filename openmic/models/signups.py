import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from openmic.database.db import Base


class SignupStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    WAITLIST = "waitlist"
    CANCELLED = "cancelled"


_ACTIVE = text("status != 'cancelled'")


class Signup(Base):
    __tablename__ = "signups"
    __table_args__ = (
        # one live signup per (event, user); manual performers have user_id NULL
        Index(
            "uq_signups_event_user_active",
            "event_id",
            "user_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    performer_name: Mapped[str | None] = mapped_column(String(200))
    performance_name: Mapped[str] = mapped_column(String(200), nullable=False)
    performance_type: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=SignupStatus.CONFIRMED.value
    )
    performance_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_current_performer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_finished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    event: Mapped["Event"] = relationship(back_populates="signups")
    user: Mapped["User"] = relationship()

    @property
    def user_name(self) -> str | None:
        return self.user.name if self.user else self.performer_name

    @property
    def user_email(self) -> str | None:
        return self.user.email if self.user else None

    @property
    def event_title(self) -> str | None:
        return self.event.title if self.event else None

    @property
    def event_date(self):
        return self.event.date if self.event else None

    @property
    def venue_name(self) -> str | None:
        return self.event.venue.name if self.event and self.event.venue else None
