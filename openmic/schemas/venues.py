from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from openmic.schemas.base import RequestModel


class VenueCreate(RequestModel):
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=500)
    phone: str | None = None
    email: EmailStr | None = None
    description: str | None = None
    capacity: int | None = Field(default=None, ge=1)
    amenities: list[str] = Field(default_factory=list)


class VenueUpdate(RequestModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = Field(default=None, min_length=1, max_length=500)
    phone: str | None = None
    email: EmailStr | None = None
    description: str | None = None
    capacity: int | None = Field(default=None, ge=1)
    amenities: list[str] | None = None


class VenueOut(BaseModel):
    id: int
    name: str
    address: str
    phone: str | None = None
    email: str | None = None
    description: str | None = None
    capacity: int | None = None
    amenities: list[str]
    owner_id: int
    owner_name: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
