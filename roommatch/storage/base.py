from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from roommatch.schemas.profile import UserProfile
from roommatch.schemas.property import Property


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def canonical_pair(user_id: int, other_user_id: int) -> tuple[int, int]:
    """Order two user ids ascending so either ordering maps to the same key."""
    a, b = int(user_id), int(other_user_id)
    return (a, b) if a <= b else (b, a)


@dataclass
class StoredUser:
    id: int
    username: str
    password: str
    avatar_url: str | None = None
    bio: str | None = None
    created_at: datetime | None = None


@dataclass
class StoredConversation:
    id: int
    user1_id: int
    user2_id: int
    last_message_at: datetime
    unread_count: int = 0

    @property
    def pair(self) -> tuple[int, int]:
        return (self.user1_id, self.user2_id)

    def involves(self, user_id: int) -> bool:
        return user_id in (self.user1_id, self.user2_id)

    def other_participant(self, user_id: int) -> int:
        return self.user2_id if user_id == self.user1_id else self.user1_id


@dataclass
class StoredMessage:
    id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool
    created_at: datetime


class Storage(ABC):
    """Persistence used by the services.

    Conversation keys passed in are already canonical (``user1_id < user2_id``).
    ``upsert_conversation`` and ``append_message`` must each be atomic with
    respect to other writers of the same pair. Every method may be called
    from concurrent request threads.
    """

    # Users

    @abstractmethod
    def get_user(self, user_id: int) -> StoredUser | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> StoredUser | None: ...

    @abstractmethod
    def create_user(
        self, username: str, password: str, *, avatar_url: str | None = None, bio: str | None = None
    ) -> StoredUser:
        """Insert a user; raises ``DuplicateUsernameError`` if the username is taken."""

    @abstractmethod
    def update_user(self, user_id: int, fields: dict[str, Any]) -> StoredUser: ...

    # Profiles

    @abstractmethod
    def get_profile(self, user_id: int) -> UserProfile | None: ...

    @abstractmethod
    def save_profile(self, user_id: int, fields: dict[str, Any]) -> UserProfile:
        """Create or replace the user's profile with ``fields`` (all profile columns)."""

    @abstractmethod
    def list_profiles(self) -> list[UserProfile]:
        """All profiles in creation order."""

    # Conversations

    @abstractmethod
    def get_conversation(self, user1_id: int, user2_id: int) -> StoredConversation | None:
        """Read-only pair lookup in either order; unlike ``upsert_conversation`` it never creates or touches."""

    @abstractmethod
    def get_conversation_by_id(self, conversation_id: int) -> StoredConversation | None: ...

    @abstractmethod
    def list_user_conversations(self, user_id: int) -> list[StoredConversation]: ...

    @abstractmethod
    def upsert_conversation(self, user1_id: int, user2_id: int, *, now: datetime) -> StoredConversation:
        """Create the pair's conversation, or set ``last_message_at=now`` on the existing one."""

    # Messages

    @abstractmethod
    def append_message(
        self, sender_id: int, receiver_id: int, content: str, *, now: datetime
    ) -> tuple[StoredMessage, StoredConversation]:
        """Store an unread message, creating the conversation if needed and bumping its unread counter."""

    @abstractmethod
    def list_pair_messages(self, user1_id: int, user2_id: int) -> list[StoredMessage]: ...

    @abstractmethod
    def mark_read(self, conversation_id: int, reader_id: int) -> int:
        """Flip the reader's unread messages in the conversation and zero its counter.

        Returns the number of messages flipped.
        """

    # Property listings

    @abstractmethod
    def create_property(self, user_id: int, fields: dict[str, Any]) -> Property: ...

    @abstractmethod
    def get_property(self, property_id: int) -> Property | None: ...

    @abstractmethod
    def list_properties(self) -> list[Property]:
        """All listings in creation order."""
