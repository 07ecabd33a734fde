from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConversationCreate(BaseModel):
    other_user_id: int


class ParticipantSummary(BaseModel):
    id: int
    username: str
    full_name: str | None = None
    avatar_url: str | None = None


class ConversationRead(BaseModel):
    id: int
    user1_id: int
    user2_id: int
    last_message_at: datetime
    unread_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class ConversationWithParticipant(ConversationRead):
    other_user: ParticipantSummary


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def _reject_blank_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v


class MessageRead(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
