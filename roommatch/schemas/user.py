# user.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _validate_username(v: str) -> str:
    value = (v or "").strip()
    if len(value) < 3:
        raise ValueError("username must be at least 3 characters")
    if any(ch.isspace() for ch in value):
        raise ValueError("username must not contain whitespace")
    return value


class UserBase(BaseModel):
    username: str = Field(max_length=150)
    avatar_url: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("username")
    @classmethod
    def _validate_username(cls, v: str) -> str:
        return _validate_username(v)


class UserCreate(UserBase):
    password: str = Field(min_length=6, max_length=72)

    @field_validator("password")
    @classmethod
    def _validate_password_bytes(cls, v: str) -> str:
        # bcrypt only accepts up to 72 bytes.
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return v


class UserLogin(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _strip_username(cls, v: str) -> str:
        return (v or "").strip()


class UserRead(UserBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    avatar_url: Optional[str] = None
    bio: Optional[str] = None


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: int
