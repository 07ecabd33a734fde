# matches.py
from fastapi import APIRouter, Depends, Query
from roommatch.routers.dependencies import get_current_user, get_storage
from roommatch.schemas.match import MatchDetails, MatchFilters, MatchResult
from roommatch.schemas.profile import Cleanliness, Lifestyle, PetPreference, SmokingPreference
from roommatch.services import match_service
from roommatch.storage.base import Storage, StoredUser


router = APIRouter(prefix="/matches", tags=["matches"])


def _match_filters(
    location: str | None = Query(default=None),
    max_budget: int | None = Query(default=None, ge=0),
    lifestyle: Lifestyle | None = Query(default=None),
    cleanliness: Cleanliness | None = Query(default=None),
    smoking_preference: SmokingPreference | None = Query(default=None),
    pet_preference: PetPreference | None = Query(default=None),
    min_score: int = Query(default=0, ge=0, le=100),
    complete_only: bool = Query(default=False),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> MatchFilters:
    return MatchFilters(
        location=location,
        max_budget=max_budget,
        lifestyle=lifestyle,
        cleanliness=cleanliness,
        smoking_preference=smoking_preference,
        pet_preference=pet_preference,
        min_score=min_score,
        complete_only=complete_only,
        limit=limit,
    )


@router.get("", response_model=list[MatchResult])
def list_matches(
    filters: MatchFilters = Depends(_match_filters),
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> list[MatchResult]:
    return match_service.list_matches(storage, current_user.id, filters)


@router.get("/{user_id}", response_model=MatchDetails)
def read_match_details(
    user_id: int,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> MatchDetails:
    return match_service.match_details(storage, current_user.id, user_id)
