from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from itertools import count
from typing import Any

from roommatch.errors import DuplicateUsernameError, NotFoundError
from roommatch.schemas.profile import UserProfile
from roommatch.schemas.property import Property
from roommatch.storage.base import (
    Storage,
    StoredConversation,
    StoredMessage,
    StoredUser,
    canonical_pair,
    utc_now,
)


class MemoryStorage(Storage):
    """Process-local storage backed by dicts and incrementing id counters.

    Records are copied on the way in and out so callers never hold live state.
    Readers take the same lock as writers; request handlers run on a threadpool.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[int, StoredUser] = {}
        self._usernames: dict[str, int] = {}
        self._profiles: dict[int, UserProfile] = {}
        self._conversations: dict[int, StoredConversation] = {}
        self._pair_index: dict[tuple[int, int], int] = {}
        self._messages: dict[int, StoredMessage] = {}
        self._properties: dict[int, Property] = {}
        self._user_ids = count(1)
        self._conversation_ids = count(1)
        self._message_ids = count(1)
        self._property_ids = count(1)

    # Users

    def get_user(self, user_id: int) -> StoredUser | None:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def get_user_by_username(self, username: str) -> StoredUser | None:
        with self._lock:
            user_id = self._usernames.get(username)
            return replace(self._users[user_id]) if user_id is not None else None

    def create_user(
        self, username: str, password: str, *, avatar_url: str | None = None, bio: str | None = None
    ) -> StoredUser:
        with self._lock:
            if username in self._usernames:
                raise DuplicateUsernameError(username)
            user = StoredUser(
                id=next(self._user_ids),
                username=username,
                password=password,
                avatar_url=avatar_url,
                bio=bio,
                created_at=utc_now(),
            )
            self._users[user.id] = user
            self._usernames[username] = user.id
            return replace(user)

    def update_user(self, user_id: int, fields: dict[str, Any]) -> StoredUser:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("user")
            updated = replace(user, **fields)
            self._users[user_id] = updated
            return replace(updated)

    # Profiles

    def get_profile(self, user_id: int) -> UserProfile | None:
        with self._lock:
            profile = self._profiles.get(user_id)
            return profile.model_copy(deep=True) if profile else None

    def save_profile(self, user_id: int, fields: dict[str, Any]) -> UserProfile:
        profile = UserProfile(user_id=user_id, **fields)
        with self._lock:
            # Re-saving keeps the original insertion position.
            self._profiles[user_id] = profile
        return profile.model_copy(deep=True)

    def list_profiles(self) -> list[UserProfile]:
        with self._lock:
            return [profile.model_copy(deep=True) for profile in self._profiles.values()]

    # Conversations

    def get_conversation(self, user1_id: int, user2_id: int) -> StoredConversation | None:
        with self._lock:
            conversation_id = self._pair_index.get(canonical_pair(user1_id, user2_id))
            if conversation_id is None:
                return None
            return replace(self._conversations[conversation_id])

    def get_conversation_by_id(self, conversation_id: int) -> StoredConversation | None:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            return replace(conversation) if conversation else None

    def list_user_conversations(self, user_id: int) -> list[StoredConversation]:
        with self._lock:
            return [replace(c) for c in self._conversations.values() if c.involves(user_id)]

    def upsert_conversation(self, user1_id: int, user2_id: int, *, now: datetime) -> StoredConversation:
        with self._lock:
            return replace(self._upsert_locked(canonical_pair(user1_id, user2_id), now))

    def _upsert_locked(self, pair: tuple[int, int], now: datetime) -> StoredConversation:
        conversation_id = self._pair_index.get(pair)
        if conversation_id is not None:
            conversation = self._conversations[conversation_id]
            conversation.last_message_at = now
            return conversation
        conversation = StoredConversation(
            id=next(self._conversation_ids),
            user1_id=pair[0],
            user2_id=pair[1],
            last_message_at=now,
            unread_count=0,
        )
        self._conversations[conversation.id] = conversation
        self._pair_index[pair] = conversation.id
        return conversation

    # Messages

    def append_message(
        self, sender_id: int, receiver_id: int, content: str, *, now: datetime
    ) -> tuple[StoredMessage, StoredConversation]:
        with self._lock:
            conversation = self._upsert_locked(canonical_pair(sender_id, receiver_id), now)
            message = StoredMessage(
                id=next(self._message_ids),
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=content,
                read=False,
                created_at=now,
            )
            self._messages[message.id] = message
            conversation.unread_count += 1
            conversation.last_message_at = message.created_at
            return replace(message), replace(conversation)

    def list_pair_messages(self, user1_id: int, user2_id: int) -> list[StoredMessage]:
        pair = canonical_pair(user1_id, user2_id)
        with self._lock:
            return [
                replace(m)
                for m in self._messages.values()
                if canonical_pair(m.sender_id, m.receiver_id) == pair
            ]

    def mark_read(self, conversation_id: int, reader_id: int) -> int:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                raise NotFoundError("conversation")
            flipped = 0
            for message in self._messages.values():
                if message.receiver_id != reader_id or message.read:
                    continue
                if canonical_pair(message.sender_id, message.receiver_id) != conversation.pair:
                    continue
                message.read = True
                flipped += 1
            conversation.unread_count = 0
            return flipped

    # Property listings

    def create_property(self, user_id: int, fields: dict[str, Any]) -> Property:
        with self._lock:
            listing = Property(id=next(self._property_ids), user_id=user_id, **fields)
            self._properties[listing.id] = listing
            return listing.model_copy(deep=True)

    def get_property(self, property_id: int) -> Property | None:
        with self._lock:
            listing = self._properties.get(property_id)
            return listing.model_copy(deep=True) if listing else None

    def list_properties(self) -> list[Property]:
        with self._lock:
            return [listing.model_copy(deep=True) for listing in self._properties.values()]
