from typing import Literal

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator

from openmic.schemas.base import RequestModel
from openmic.schemas.users import UserOut

PerformerType = Literal["musician", "comedian", "poet", "storyteller", "other"]

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class SocialMedia(RequestModel):
    instagram: str | None = None
    twitter: str | None = None
    tiktok: str | None = None
    youtube: str | None = None
    website: HttpUrl | None = None


class RegisterRequest(RequestModel):
    class Config:
        # passwords are taken verbatim
        str_strip_whitespace = False

    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=200)
    phone: str | None = None
    performer_type: PerformerType | None = Field(default=None, alias="performerType")
    bio: str | None = None
    social_media: SocialMedia | None = Field(default=None, alias="socialMedia")

    check_password_length = field_validator("password")(_check_password_bytes)


class LoginRequest(RequestModel):
    class Config:
        str_strip_whitespace = False

    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdate(RequestModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = None
    performer_type: PerformerType | None = Field(default=None, alias="performerType")
    bio: str | None = None
    instagram_handle: str | None = Field(default=None, alias="instagramHandle")
    twitter_handle: str | None = Field(default=None, alias="twitterHandle")
    tiktok_handle: str | None = Field(default=None, alias="tiktokHandle")
    youtube_handle: str | None = Field(default=None, alias="youtubeHandle")
    website_url: HttpUrl | None = Field(default=None, alias="websiteUrl")


class ChangePasswordRequest(RequestModel):
    class Config:
        str_strip_whitespace = False

    current_password: str = Field(min_length=1, alias="currentPassword")
    new_password: str = Field(min_length=6, alias="newPassword")

    check_password_length = field_validator("new_password")(_check_password_bytes)


class PasswordResetRequest(RequestModel):
    email: EmailStr


class PasswordResetConfirm(RequestModel):
    class Config:
        str_strip_whitespace = False

    token: str = Field(min_length=1)
    new_password: str = Field(min_length=6, alias="newPassword")

    check_password_length = field_validator("new_password")(_check_password_bytes)


class TokenOut(BaseModel):
    token: str
    user: UserOut
