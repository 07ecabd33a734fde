# auth.py
from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from roommatch.config import settings
from roommatch.errors import DuplicateUsernameError
from roommatch.routers.dependencies import get_storage
from roommatch.schemas.user import Token, UserCreate, UserLogin, UserRead
from roommatch.storage.base import Storage
from roommatch.utils.jwt_handler import create_access_token
from roommatch.utils.password_hash import hash_password, verify_password


router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, storage: Storage = Depends(get_storage)) -> UserRead:
    if storage.get_user_by_username(user_in.username):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already registered")
    try:
        user = storage.create_user(
            user_in.username,
            hash_password(user_in.password),
            avatar_url=user_in.avatar_url,
            bio=user_in.bio,
        )
    except DuplicateUsernameError as exc:
        # A concurrent registration claimed the name after the check above.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.detail) from exc
    return UserRead.model_validate(user)


@router.post("/login", response_model=Token)
def login_user(user_in: UserLogin, storage: Storage = Depends(get_storage)) -> Token:
    user = storage.get_user_by_username(user_in.username)
    if not user or not verify_password(user_in.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    token = create_access_token({"sub": str(user.id)}, expires_delta)
    return Token(access_token=token, token_type="bearer")
