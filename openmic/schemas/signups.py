import datetime
from typing import Literal

from pydantic import BaseModel, Field

from openmic.schemas.base import RequestModel

PerformanceType = Literal["music", "comedy", "poetry", "storytelling", "other"]
SignupStatus = Literal["confirmed", "waitlist", "cancelled"]


class SignupCreate(RequestModel):
    event_id: int = Field(ge=1, alias="eventId")
    performance_name: str = Field(min_length=1, max_length=200, alias="performanceName")
    performance_type: PerformanceType = Field(alias="performanceType")
    notes: str | None = None


class ManualPerformerCreate(RequestModel):
    performer_name: str = Field(min_length=1, max_length=200, alias="performerName")
    performance_name: str = Field(min_length=1, max_length=200, alias="performanceName")
    performance_type: PerformanceType = Field(alias="performanceType")
    notes: str | None = None


class SignupOrderUpdate(RequestModel):
    signup_ids: list[int] = Field(alias="signupIds")


class SignupStatusUpdate(RequestModel):
    status: SignupStatus


class CurrentPerformerUpdate(RequestModel):
    is_current_performer: bool = Field(alias="isCurrentPerformer")


class SignupOut(BaseModel):
    id: int
    event_id: int
    user_id: int | None = None
    user_name: str | None = None
    performer_name: str | None = None
    performance_name: str
    performance_type: str
    notes: str | None = None
    status: str
    performance_order: int | None = None
    is_current_performer: bool
    is_finished: bool
    finished_at: datetime.datetime | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None

    class Config:
        from_attributes = True


class UserSignupOut(SignupOut):
    event_title: str | None = None
    event_date: datetime.date | None = None
    venue_name: str | None = None
