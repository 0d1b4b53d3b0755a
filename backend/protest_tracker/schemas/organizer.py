"""
Pydantic schemas for organizer accounts, authentication and engagement.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.networks import validate_email

# bcrypt only looks at the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


class OrganizerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    bio: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, value: str) -> str:
        # Stored exactly as submitted; login compares against this string
        validate_email(value)
        return value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class OrganizerLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class OrganizerPublic(BaseModel):
    id: int
    name: str
    email: str
    bio: Optional[str]

    model_config = {"from_attributes": True}


class OrganizerProfile(OrganizerPublic):
    followers: int
    social_clicks: int
    created_at: datetime


class AuthResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    organizer_id: int = Field(..., serialization_alias="organizerId")
    organizer: OrganizerPublic


class FollowRequest(BaseModel):
    following: bool


class FollowResponse(BaseModel):
    followers: int


class AnalyticsResponse(BaseModel):
    followers: int
    total_likes: int
    social_clicks: int
