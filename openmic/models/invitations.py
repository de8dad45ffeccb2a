import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from openmic.database.db import Base


class InvitationType(str, enum.Enum):
    COHOST = "cohost"
    PERFORMER = "performer"


class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


_PENDING = text("status = 'pending'")


class Invitation(Base):
    __tablename__ = "invitations"
    __table_args__ = (
        # one open invitation of each type per (event, invitee)
        Index(
            "uq_invitations_event_invitee_type_pending",
            "event_id",
            "invitee_id",
            "type",
            unique=True,
            sqlite_where=_PENDING,
            postgresql_where=_PENDING,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    inviter_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    invitee_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    message: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=InvitationStatus.PENDING.value
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    event: Mapped["Event"] = relationship(back_populates="invitations")
    inviter: Mapped["User"] = relationship(foreign_keys=[inviter_id])
    invitee: Mapped["User"] = relationship(foreign_keys=[invitee_id])

    @property
    def event_title(self) -> str | None:
        return self.event.title if self.event else None

    @property
    def event_date(self):
        return self.event.date if self.event else None

    @property
    def inviter_name(self) -> str | None:
        return self.inviter.name if self.inviter else None

    @property
    def invitee_name(self) -> str | None:
        return self.invitee.name if self.invitee else None
