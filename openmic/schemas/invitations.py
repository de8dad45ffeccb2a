import datetime
from typing import Literal

from pydantic import BaseModel, Field

from openmic.schemas.base import RequestModel

InvitationType = Literal["cohost", "performer"]


class InvitationCreate(RequestModel):
    event_id: int = Field(ge=1, alias="eventId")
    invitee_id: int = Field(ge=1, alias="inviteeId")
    type: InvitationType
    message: str | None = Field(default=None, max_length=2000)


class InvitationRespond(RequestModel):
    status: Literal["accepted", "declined"]


class InvitationOut(BaseModel):
    id: int
    event_id: int
    inviter_id: int
    invitee_id: int
    type: str
    message: str | None = None
    status: str
    responded_at: datetime.datetime | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None
    event_title: str | None = None
    event_date: datetime.date | None = None
    inviter_name: str | None = None
    invitee_name: str | None = None

    class Config:
        from_attributes = True
