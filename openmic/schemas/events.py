import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from openmic.schemas.base import RequestModel

EventType = Literal["open-mic", "showcase", "competition", "workshop"]
EventStatus = Literal["scheduled", "live", "finished"]
SignupListMode = Literal["signup_order", "random_order", "bucket", "booked_mic"]


def _check_window(opens, deadline):
    if opens and deadline and opens > deadline:
        raise ValueError("signupOpens must be before signupDeadline")


# ---------- Event ----------
class EventCreate(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    venue_id: int = Field(ge=1, alias="venueId")
    date: datetime.date
    start_time: datetime.time = Field(alias="startTime")
    end_time: datetime.time = Field(alias="endTime")
    max_performers: int = Field(ge=1, alias="maxPerformers")
    performance_length: int = Field(ge=1, alias="performanceLength")
    event_type: EventType = Field(alias="eventType")
    signup_list_mode: SignupListMode = Field(default="signup_order", alias="signupListMode")
    signup_opens: datetime.datetime | None = Field(default=None, alias="signupOpens")
    signup_deadline: datetime.datetime | None = Field(default=None, alias="signupDeadline")

    @model_validator(mode="after")
    def check_signup_window(self):
        _check_window(self.signup_opens, self.signup_deadline)
        return self


class EventUpdate(RequestModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    venue_id: int | None = Field(default=None, ge=1, alias="venueId")
    date: datetime.date | None = None
    start_time: datetime.time | None = Field(default=None, alias="startTime")
    end_time: datetime.time | None = Field(default=None, alias="endTime")
    max_performers: int | None = Field(default=None, ge=1, alias="maxPerformers")
    performance_length: int | None = Field(default=None, ge=1, alias="performanceLength")
    event_type: EventType | None = Field(default=None, alias="eventType")
    signup_list_mode: SignupListMode | None = Field(default=None, alias="signupListMode")
    signup_opens: datetime.datetime | None = Field(default=None, alias="signupOpens")
    signup_deadline: datetime.datetime | None = Field(default=None, alias="signupDeadline")
    event_status: EventStatus | None = Field(default=None, alias="eventStatus")

    @model_validator(mode="after")
    def check_signup_window(self):
        _check_window(self.signup_opens, self.signup_deadline)
        return self


class EventOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    venue_id: int
    venue_name: str | None = None
    venue_address: str | None = None
    host_id: int
    host_name: str | None = None
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    max_performers: int
    performance_length: int
    event_type: str
    signup_list_mode: str
    signup_opens: datetime.datetime | None = None
    signup_deadline: datetime.datetime | None = None
    event_status: str
    current_signups: int
    created_at: datetime.datetime | None = None

    class Config:
        from_attributes = True


class ReminderOut(BaseModel):
    event_id: int
    queued: int
