# profiles.py
from fastapi import APIRouter, Depends
from roommatch.errors import NotFoundError
from roommatch.routers.dependencies import get_current_user, get_storage
from roommatch.schemas.profile import UserProfile, UserProfileUpdate
from roommatch.services import profile_service
from roommatch.storage.base import Storage, StoredUser


router = APIRouter(tags=["profiles"])


@router.get("/profile", response_model=UserProfile)
def read_my_profile(
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> UserProfile:
    return profile_service.require_user_profile(storage, current_user.id)


@router.post("/profile", response_model=UserProfile)
@router.put("/profile", response_model=UserProfile)
def save_my_profile(
    payload: UserProfileUpdate,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> UserProfile:
    return profile_service.save_user_profile(storage, current_user.id, payload)


@router.get("/profiles", response_model=list[UserProfile])
def list_profiles(
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> list[UserProfile]:
    return profile_service.list_other_profiles(storage, current_user.id)


@router.get("/profiles/{user_id}", response_model=UserProfile)
def read_profile(
    user_id: int,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> UserProfile:
    profile = profile_service.get_user_profile(storage, user_id)
    if profile is None:
        raise NotFoundError("profile", "Profile not found")
    return profile
