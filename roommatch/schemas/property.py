# property.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roommatch.schemas.profile import clean_list, clean_text


RoomType = Literal["private", "shared", "entire"]


class PropertyCreate(BaseModel):
    title: str = Field(max_length=255)
    description: str
    price: int = Field(ge=0)
    location: str = Field(max_length=255)
    room_type: RoomType = "private"
    image_urls: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    available: bool = True

    @field_validator("title", "description", "location", mode="before")
    @classmethod
    def _strip_text(cls, v):
        return clean_text(v)

    @field_validator("room_type", mode="before")
    @classmethod
    def _normalize_room_type(cls, v):
        v = clean_text(v)
        return v.lower() if isinstance(v, str) else v

    @field_validator("image_urls", "amenities", mode="before")
    @classmethod
    def _coerce_list(cls, v):
        return clean_list(v)


class Property(PropertyCreate):
    id: int
    user_id: int

    model_config = ConfigDict(from_attributes=True)


class PropertyFilters(BaseModel):
    location: str | None = None
    room_type: RoomType | None = None
    max_price: int | None = Field(default=None, ge=0)
    available_only: bool = False
