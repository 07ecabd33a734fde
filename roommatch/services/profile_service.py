# profile_service.py
import logging
from typing import Any

from roommatch.errors import NotFoundError
from roommatch.schemas.profile import LIST_FIELDS, UserProfile, UserProfileBase, UserProfileUpdate
from roommatch.storage.base import Storage


logger = logging.getLogger(__name__)


def is_profile_complete(fields: dict[str, Any]) -> bool:
    return bool(fields.get("full_name")) and bool(fields.get("hobbies")) and bool(fields.get("interests"))


def get_user_profile(storage: Storage, user_id: int) -> UserProfile | None:
    return storage.get_profile(user_id)


def require_user_profile(storage: Storage, user_id: int) -> UserProfile:
    profile = storage.get_profile(user_id)
    if profile is None:
        raise NotFoundError("profile", "Profile not found")
    return profile


def merge_profile_fields(existing: UserProfile | None, update: UserProfileUpdate) -> dict[str, Any]:
    """Apply the fields present in ``update`` on top of the stored profile."""
    base = existing.model_dump(include=set(UserProfileBase.model_fields)) if existing else UserProfileBase().model_dump()
    base.update(update.model_dump(exclude_unset=True))
    for name in LIST_FIELDS:
        base[name] = list(base.get(name) or [])
    base["profile_complete"] = is_profile_complete(base)
    return base


def save_user_profile(storage: Storage, user_id: int, update: UserProfileUpdate) -> UserProfile:
    if storage.get_user(user_id) is None:
        raise NotFoundError("user", "User not found")
    existing = storage.get_profile(user_id)
    fields = merge_profile_fields(existing, update)
    saved = storage.save_profile(user_id, fields)
    logger.info(
        "profile.saved user_id=%s created=%s complete=%s",
        user_id,
        existing is None,
        saved.profile_complete,
    )
    return saved


def list_other_profiles(storage: Storage, user_id: int) -> list[UserProfile]:
    return [profile for profile in storage.list_profiles() if profile.user_id != user_id]
