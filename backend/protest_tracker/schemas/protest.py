"""
Pydantic schemas for protest listings.
"""

from datetime import date as date_type
from datetime import datetime
from datetime import time as time_type
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


def normalize_tags(value: Union[str, list[str], None]) -> list[str]:
    """
    Accept either a list of tags or a comma-delimited string.

    Each tag is stripped of surrounding whitespace; empty tags are dropped and
    the entered order is kept.
    """
    if value is None:
        return []
    parts = value.split(",") if isinstance(value, str) else value
    if not isinstance(parts, list) or not all(isinstance(tag, str) for tag in parts):
        raise ValueError("tags must be a list of strings or a comma-separated string")
    return [tag.strip() for tag in parts if tag.strip()]


class ProtestBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    cause: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    date: date_type
    time: time_type
    official_link: Optional[str] = Field(None, max_length=255)
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        return normalize_tags(value)


class ProtestCreate(ProtestBase):
    pass


class ProtestUpdate(ProtestBase):
    """PUT replaces every editable field."""


class ProtestResponse(BaseModel):
    id: int
    organizer_id: int
    name: str
    cause: Optional[str]
    description: Optional[str]
    location: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    date: date_type
    time: time_type
    official_link: Optional[str]
    tags: list[str]
    likes: int
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, value):
        return value or []


class ProtestListItem(ProtestResponse):
    organizer_name: str
    attendees: int


class ProtestListResponse(BaseModel):
    protests: list[ProtestListItem]


class ProtestDeleteResponse(BaseModel):
    message: str
    protest_id: int


class LikeRequest(BaseModel):
    liked: bool


class LikeResponse(BaseModel):
    likes: int
