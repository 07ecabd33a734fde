"""Roommate compatibility scoring.

The score is a weighted sum over eight independent categories. A category
only counts toward the maximum when both sides supplied the data it compares,
so missing answers never drag a match down. The result is not symmetric:
hobby, interest and quality ratios are taken against the current user's lists.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from roommatch.schemas.profile import UserProfile


LIFESTYLE_POINTS = 20
CLEANLINESS_POINTS = 15
SMOKING_POINTS = 15
PET_POINTS = 10
HOBBY_POINTS = 20
INTEREST_POINTS = 20
QUALITY_POINTS = 10
LOCATION_POINTS = 15
IDEAL_LOCATION_POINTS = 10


@dataclass(frozen=True)
class CategoryScore:
    category: str
    label: str
    score: float
    max_score: int
    detail: str


@dataclass(frozen=True)
class MatchBreakdown:
    percentage: int
    total_score: float
    total_max_score: int
    categories: list[CategoryScore] = field(default_factory=list)


def normalize_value(value: str | None) -> str:
    return (value or "").strip().lower()


def count_common(mine: Sequence[str], theirs: Sequence[str]) -> list[str]:
    """Entries of ``mine`` that appear in ``theirs``, compared case-insensitively."""
    their_set = {normalize_value(item) for item in theirs if item}
    return [item for item in mine if normalize_value(item) in their_set]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _exact_match(
    category: str,
    label: str,
    points: int,
    mine: str | None,
    theirs: str | None,
    same_detail: str,
    different_detail: str,
) -> Optional[CategoryScore]:
    if not mine or not theirs:
        return None
    same = mine == theirs
    return CategoryScore(
        category=category,
        label=label,
        score=float(points if same else 0),
        max_score=points,
        detail=same_detail if same else different_detail,
    )


def score_lifestyle(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    return _exact_match(
        "lifestyle",
        "Lifestyle Compatibility",
        LIFESTYLE_POINTS,
        user.lifestyle,
        other.lifestyle,
        "You both have similar lifestyle preferences!",
        "Your lifestyles may require some adjustment",
    )


def score_cleanliness(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    return _exact_match(
        "cleanliness",
        "Cleanliness Standards",
        CLEANLINESS_POINTS,
        user.cleanliness,
        other.cleanliness,
        "You share similar cleanliness preferences",
        "You may have different cleaning expectations",
    )


def score_smoking(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    return _exact_match(
        "smoking",
        "Smoking Compatibility",
        SMOKING_POINTS,
        user.smoking_preference,
        other.smoking_preference,
        "You have compatible smoking preferences",
        "You have different smoking preferences",
    )


def score_pets(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    return _exact_match(
        "pets",
        "Pet Compatibility",
        PET_POINTS,
        user.pet_preference,
        other.pet_preference,
        "You both have compatible pet preferences",
        "You have different views on pets",
    )


def _shared_list(
    category: str, label: str, noun: str, mine: Sequence[str], theirs: Sequence[str], points: int
) -> Optional[CategoryScore]:
    if not mine or not theirs:
        return None
    common = count_common(mine, theirs)
    score = len(common) / len(mine) * points
    if common:
        preview = ", ".join(common[:3])
        more = "..." if len(common) > 3 else ""
        detail = f"You share {len(common)} {noun} including: {preview}{more}"
    else:
        detail = f"You don't share any {noun} in common"
    return CategoryScore(category=category, label=label, score=score, max_score=points, detail=detail)


def score_hobbies(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    return _shared_list("hobbies", "Shared Hobbies", "hobbies", user.hobbies, other.hobbies, HOBBY_POINTS)


def score_interests(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    return _shared_list("interests", "Shared Interests", "interests", user.interests, other.interests, INTEREST_POINTS)


def score_qualities(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    desired = user.roommate_qualities
    if not desired:
        return None
    # Counts even when the candidate wrote nothing about themselves.
    text = normalize_value(other.additional_info)
    found = sum(1 for quality in desired if normalize_value(quality) in text) if text else 0
    score = min(float(QUALITY_POINTS), found / len(desired) * QUALITY_POINTS)
    if found:
        detail = f"This person may have {found} qualities you're looking for"
    else:
        detail = "We couldn't determine if this person has qualities you're looking for"
    return CategoryScore(
        category="qualities",
        label="Desired Qualities",
        score=score,
        max_score=QUALITY_POINTS,
        detail=detail,
    )


def score_location(user: UserProfile, other: UserProfile) -> Optional[CategoryScore]:
    mine = normalize_value(user.location)
    theirs = normalize_value(other.location)
    if not mine or not theirs:
        return None

    if mine == theirs:
        score, detail = LOCATION_POINTS, "You are both currently in the same location!"
    elif user.ideal_location and normalize_value(user.ideal_location) == theirs:
        score, detail = IDEAL_LOCATION_POINTS, "They are already in your ideal location."
    elif other.ideal_location and normalize_value(other.ideal_location) == mine:
        score, detail = IDEAL_LOCATION_POINTS, "You're in their ideal location."
    else:
        score, detail = 0, "Your locations don't match"

    return CategoryScore(
        category="location",
        label="Location",
        score=float(score),
        max_score=LOCATION_POINTS,
        detail=detail,
    )


CATEGORY_SCORERS: tuple[Callable[[UserProfile, UserProfile], Optional[CategoryScore]], ...] = (
    score_lifestyle,
    score_cleanliness,
    score_smoking,
    score_pets,
    score_hobbies,
    score_interests,
    score_qualities,
    score_location,
)


def score_breakdown(user_profile: UserProfile, candidate_profile: UserProfile) -> MatchBreakdown:
    categories = [
        result
        for result in (scorer(user_profile, candidate_profile) for scorer in CATEGORY_SCORERS)
        if result is not None
    ]
    total_score = sum(c.score for c in categories)
    total_max = sum(c.max_score for c in categories)
    percentage = round_half_up(total_score / total_max * 100) if total_max else 0
    return MatchBreakdown(
        percentage=max(0, min(100, percentage)),
        total_score=total_score,
        total_max_score=total_max,
        categories=categories,
    )


def score(user_profile: UserProfile, candidate_profile: UserProfile) -> int:
    """Compatibility of ``candidate_profile`` from ``user_profile``'s point of view, 0-100."""
    return score_breakdown(user_profile, candidate_profile).percentage
