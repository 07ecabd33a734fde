# dependencies.py
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from roommatch.errors import UnauthorizedError
from roommatch.schemas.user import TokenData
from roommatch.storage.base import Storage, StoredUser
from roommatch.utils.jwt_handler import decode_access_token


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_current_user(storage: Storage = Depends(get_storage), token: str = Depends(oauth2_scheme)) -> StoredUser:
    if not token:
        raise UnauthorizedError("Not authenticated")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise UnauthorizedError("Invalid token payload")
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise UnauthorizedError("Invalid token subject") from exc
    user = storage.get_user(token_data.user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user
