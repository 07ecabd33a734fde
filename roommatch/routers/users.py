# users.py
from fastapi import APIRouter, Depends
from roommatch.routers.dependencies import get_current_user, get_storage
from roommatch.schemas.user import UserRead, UserUpdate
from roommatch.storage.base import Storage, StoredUser


router = APIRouter()


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: StoredUser = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put("/me", response_model=UserRead)
def update_current_user(
    update: UserUpdate,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> UserRead:
    update_data = update.model_dump(exclude_unset=True)
    if not update_data:
        return UserRead.model_validate(current_user)
    user = storage.update_user(current_user.id, update_data)
    return UserRead.model_validate(user)
