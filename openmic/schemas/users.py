from datetime import datetime

from pydantic import BaseModel


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    phone: str | None = None
    performer_type: str | None = None
    bio: str | None = None
    instagram_handle: str | None = None
    twitter_handle: str | None = None
    tiktok_handle: str | None = None
    youtube_handle: str | None = None
    website_url: str | None = None
    role: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class PublicUserOut(BaseModel):
    """What anyone may see about a user; no contact details."""

    id: int
    name: str
    performer_type: str | None = None
    bio: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
