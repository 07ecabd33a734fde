from __future__ import annotations

from roommatch.errors import NotFoundError
from roommatch.schemas.match import CategoryScoreRead, MatchDetails, MatchFilters, MatchResult
from roommatch.schemas.profile import UserProfile
from roommatch.services.match_scorer import normalize_value, score, score_breakdown
from roommatch.services.profile_service import list_other_profiles, require_user_profile
from roommatch.storage.base import Storage


def _passes_filters(candidate: UserProfile, filters: MatchFilters) -> bool:
    if filters.complete_only and not candidate.profile_complete:
        return False
    if filters.location:
        needle = normalize_value(filters.location)
        if needle not in normalize_value(candidate.location):
            return False
    if filters.max_budget is not None:
        if candidate.budget is None or candidate.budget > filters.max_budget:
            return False
    for name in ("lifestyle", "cleanliness", "smoking_preference", "pet_preference"):
        wanted = getattr(filters, name)
        if wanted is not None and getattr(candidate, name) != wanted:
            return False
    return True


def rank_matches(user_profile: UserProfile, candidates: list[UserProfile], filters: MatchFilters) -> list[MatchResult]:
    results: list[MatchResult] = []
    for candidate in candidates:
        if candidate.user_id == user_profile.user_id:
            continue
        if not _passes_filters(candidate, filters):
            continue
        percentage = score(user_profile, candidate)
        if percentage < filters.min_score:
            continue
        results.append(MatchResult(profile=candidate, match_percentage=percentage))

    # list.sort is stable, so equal scores keep store order.
    results.sort(key=lambda item: item.match_percentage, reverse=True)
    if filters.limit is not None:
        return results[: filters.limit]
    return results


def list_matches(storage: Storage, user_id: int, filters: MatchFilters | None = None) -> list[MatchResult]:
    user_profile = require_user_profile(storage, user_id)
    return rank_matches(user_profile, list_other_profiles(storage, user_id), filters or MatchFilters())


def match_details(storage: Storage, user_id: int, other_user_id: int) -> MatchDetails:
    user_profile = require_user_profile(storage, user_id)
    other_profile = storage.get_profile(other_user_id)
    if other_profile is None:
        raise NotFoundError("profile", "Match profile not found")
    breakdown = score_breakdown(user_profile, other_profile)
    return MatchDetails(
        user_id=other_user_id,
        match_percentage=breakdown.percentage,
        total_score=breakdown.total_score,
        total_max_score=breakdown.total_max_score,
        categories=[CategoryScoreRead.model_validate(c) for c in breakdown.categories],
    )
