# match.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from roommatch.schemas.profile import Cleanliness, Lifestyle, PetPreference, SmokingPreference, UserProfile


class MatchFilters(BaseModel):
    location: str | None = None
    max_budget: int | None = Field(default=None, ge=0)
    lifestyle: Lifestyle | None = None
    cleanliness: Cleanliness | None = None
    smoking_preference: SmokingPreference | None = None
    pet_preference: PetPreference | None = None
    min_score: int = Field(default=0, ge=0, le=100)
    complete_only: bool = False
    limit: int | None = Field(default=None, ge=1, le=100)


class MatchResult(BaseModel):
    profile: UserProfile
    match_percentage: int


class CategoryScoreRead(BaseModel):
    category: str
    label: str
    score: float
    max_score: int
    detail: str

    model_config = ConfigDict(from_attributes=True)


class MatchDetails(BaseModel):
    user_id: int
    match_percentage: int
    total_score: float
    total_max_score: int
    categories: list[CategoryScoreRead] = Field(default_factory=list)
