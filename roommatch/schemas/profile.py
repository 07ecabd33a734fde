# profile.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


Lifestyle = Literal["early-bird", "night-owl", "social", "quiet"]
Cleanliness = Literal["very-clean", "clean", "casual", "messy"]
SmokingPreference = Literal["non-smoker", "outside-only", "smoker"]
PetPreference = Literal["no-pets", "has-pets", "pet-friendly"]

LIST_FIELDS = ("hobbies", "interests", "roommate_qualities")


def clean_text(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def clean_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        # Form inputs sometimes post "Hiking, Cooking" instead of a list.
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return value


class UserProfileBase(BaseModel):
    full_name: str | None = Field(default=None, max_length=255)
    age: int | None = Field(default=None, ge=16, le=120)
    occupation: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    ideal_location: str | None = Field(default=None, max_length=255)
    budget: int | None = Field(default=None, ge=0)

    hobbies: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    roommate_qualities: list[str] = Field(default_factory=list)

    lifestyle: Lifestyle | None = None
    cleanliness: Cleanliness | None = None
    smoking_preference: SmokingPreference | None = None
    pet_preference: PetPreference | None = None
    additional_info: str | None = None

    @field_validator("full_name", "occupation", "location", "ideal_location", "additional_info", mode="before")
    @classmethod
    def _strip_text(cls, v):
        return clean_text(v)

    @field_validator("lifestyle", "cleanliness", "smoking_preference", "pet_preference", mode="before")
    @classmethod
    def _normalize_choice(cls, v):
        v = clean_text(v)
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("hobbies", "interests", "roommate_qualities", mode="before")
    @classmethod
    def _coerce_list(cls, v):
        return clean_list(v)


class UserProfileUpdate(UserProfileBase):
    """Profile payload; only fields present in the request are applied."""


class UserProfile(UserProfileBase):
    user_id: int
    profile_complete: bool = False

    model_config = ConfigDict(from_attributes=True)
