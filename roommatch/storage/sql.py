from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roommatch.errors import DuplicateUsernameError, NotFoundError
from roommatch.models.conversation import Conversation
from roommatch.models.message import Message
from roommatch.models.profile import UserProfileModel
from roommatch.models.property import PropertyListing
from roommatch.models.user import User
from roommatch.schemas.profile import UserProfile
from roommatch.schemas.property import Property
from roommatch.storage.base import (
    Storage,
    StoredConversation,
    StoredMessage,
    StoredUser,
    as_utc,
    canonical_pair,
)


logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = (
    "full_name",
    "age",
    "occupation",
    "location",
    "ideal_location",
    "budget",
    "hobbies",
    "interests",
    "roommate_qualities",
    "lifestyle",
    "cleanliness",
    "smoking_preference",
    "pet_preference",
    "additional_info",
    "profile_complete",
)

_PROPERTY_COLUMNS = (
    "title",
    "description",
    "price",
    "location",
    "room_type",
    "image_urls",
    "amenities",
    "available",
)


def _to_user(row: User) -> StoredUser:
    return StoredUser(
        id=row.id,
        username=row.username,
        password=row.password,
        avatar_url=row.avatar_url,
        bio=row.bio,
        created_at=as_utc(row.created_at) if row.created_at else None,
    )


def _to_profile(row: UserProfileModel) -> UserProfile:
    data = {name: getattr(row, name) for name in _PROFILE_COLUMNS}
    data["hobbies"] = list(data["hobbies"] or [])
    data["interests"] = list(data["interests"] or [])
    data["roommate_qualities"] = list(data["roommate_qualities"] or [])
    data["profile_complete"] = bool(data["profile_complete"])
    return UserProfile(user_id=row.user_id, **data)


def _to_conversation(row: Conversation) -> StoredConversation:
    return StoredConversation(
        id=row.id,
        user1_id=row.user1_id,
        user2_id=row.user2_id,
        last_message_at=as_utc(row.last_message_at),
        unread_count=int(row.unread_count or 0),
    )


def _to_message(row: Message) -> StoredMessage:
    return StoredMessage(
        id=row.id,
        sender_id=row.sender_id,
        receiver_id=row.receiver_id,
        content=row.content,
        read=bool(row.read),
        created_at=as_utc(row.created_at),
    )


def _to_property(row: PropertyListing) -> Property:
    data = {name: getattr(row, name) for name in _PROPERTY_COLUMNS}
    data["image_urls"] = list(data["image_urls"] or [])
    data["amenities"] = list(data["amenities"] or [])
    return Property(id=row.id, user_id=row.user_id, **data)


def _pair_filter(user1_id: int, user2_id: int):
    return or_(
        and_(Message.sender_id == user1_id, Message.receiver_id == user2_id),
        and_(Message.sender_id == user2_id, Message.receiver_id == user1_id),
    )


class SqlStorage(Storage):
    """SQLAlchemy-backed storage; every operation runs in its own session and transaction."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # Users

    def get_user(self, user_id: int) -> StoredUser | None:
        with self._session_factory() as db:
            row = db.query(User).filter(User.id == user_id).first()
            return _to_user(row) if row else None

    def get_user_by_username(self, username: str) -> StoredUser | None:
        with self._session_factory() as db:
            row = db.query(User).filter(User.username == username).first()
            return _to_user(row) if row else None

    def create_user(
        self, username: str, password: str, *, avatar_url: str | None = None, bio: str | None = None
    ) -> StoredUser:
        with self._session_factory() as db:
            row = User(username=username, password=password, avatar_url=avatar_url, bio=bio)
            db.add(row)
            try:
                db.commit()
            except IntegrityError as exc:
                # The only unique column on users is username.
                db.rollback()
                raise DuplicateUsernameError(username) from exc
            db.refresh(row)
            return _to_user(row)

    def update_user(self, user_id: int, fields: dict[str, Any]) -> StoredUser:
        with self._session_factory() as db:
            row = db.query(User).filter(User.id == user_id).first()
            if row is None:
                raise NotFoundError("user")
            for field, value in fields.items():
                setattr(row, field, value)
            db.commit()
            db.refresh(row)
            return _to_user(row)

    # Profiles

    def get_profile(self, user_id: int) -> UserProfile | None:
        with self._session_factory() as db:
            row = db.query(UserProfileModel).filter(UserProfileModel.user_id == user_id).first()
            return _to_profile(row) if row else None

    def save_profile(self, user_id: int, fields: dict[str, Any]) -> UserProfile:
        with self._session_factory() as db:
            row = db.query(UserProfileModel).filter(UserProfileModel.user_id == user_id).first()
            if row is None:
                row = UserProfileModel(user_id=user_id)
                db.add(row)
            for name in _PROFILE_COLUMNS:
                if name in fields:
                    setattr(row, name, fields[name])
            db.commit()
            db.refresh(row)
            return _to_profile(row)

    def list_profiles(self) -> list[UserProfile]:
        with self._session_factory() as db:
            rows = db.query(UserProfileModel).order_by(UserProfileModel.id).all()
            return [_to_profile(row) for row in rows]

    # Conversations

    def get_conversation(self, user1_id: int, user2_id: int) -> StoredConversation | None:
        low, high = canonical_pair(user1_id, user2_id)
        with self._session_factory() as db:
            row = _find_conversation(db, low, high)
            return _to_conversation(row) if row else None

    def get_conversation_by_id(self, conversation_id: int) -> StoredConversation | None:
        with self._session_factory() as db:
            row = db.query(Conversation).filter(Conversation.id == conversation_id).first()
            return _to_conversation(row) if row else None

    def list_user_conversations(self, user_id: int) -> list[StoredConversation]:
        with self._session_factory() as db:
            rows = (
                db.query(Conversation)
                .filter(or_(Conversation.user1_id == user_id, Conversation.user2_id == user_id))
                .order_by(Conversation.id)
                .all()
            )
            return [_to_conversation(row) for row in rows]

    def upsert_conversation(self, user1_id: int, user2_id: int, *, now: datetime) -> StoredConversation:
        low, high = canonical_pair(user1_id, user2_id)
        with self._session_factory() as db:
            row = _upsert_conversation(db, low, high, now)
            db.commit()
            db.refresh(row)
            return _to_conversation(row)

    # Messages

    def append_message(
        self, sender_id: int, receiver_id: int, content: str, *, now: datetime
    ) -> tuple[StoredMessage, StoredConversation]:
        low, high = canonical_pair(sender_id, receiver_id)
        with self._session_factory() as db:
            conversation = _upsert_conversation(db, low, high, now)
            message = Message(
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=content,
                read=False,
                created_at=now,
            )
            db.add(message)
            # Increment in SQL so concurrent senders do not lose updates.
            db.query(Conversation).filter(Conversation.id == conversation.id).update(
                {
                    Conversation.unread_count: Conversation.unread_count + 1,
                    Conversation.last_message_at: now,
                },
                synchronize_session=False,
            )
            db.commit()
            db.refresh(message)
            db.refresh(conversation)
            return _to_message(message), _to_conversation(conversation)

    def list_pair_messages(self, user1_id: int, user2_id: int) -> list[StoredMessage]:
        with self._session_factory() as db:
            rows = (
                db.query(Message)
                .filter(_pair_filter(user1_id, user2_id))
                .order_by(Message.created_at, Message.id)
                .all()
            )
            return [_to_message(row) for row in rows]

    def mark_read(self, conversation_id: int, reader_id: int) -> int:
        with self._session_factory() as db:
            conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
            if conversation is None:
                raise NotFoundError("conversation")
            flipped = (
                db.query(Message)
                .filter(_pair_filter(conversation.user1_id, conversation.user2_id))
                .filter(Message.receiver_id == reader_id)
                .filter(Message.read.is_(False))
                .update({Message.read: True}, synchronize_session=False)
            )
            conversation.unread_count = 0
            db.commit()
            return int(flipped or 0)

    # Property listings

    def create_property(self, user_id: int, fields: dict[str, Any]) -> Property:
        with self._session_factory() as db:
            row = PropertyListing(user_id=user_id, **{name: fields[name] for name in _PROPERTY_COLUMNS if name in fields})
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_property(row)

    def get_property(self, property_id: int) -> Property | None:
        with self._session_factory() as db:
            row = db.query(PropertyListing).filter(PropertyListing.id == property_id).first()
            return _to_property(row) if row else None

    def list_properties(self) -> list[Property]:
        with self._session_factory() as db:
            rows = db.query(PropertyListing).order_by(PropertyListing.id).all()
            return [_to_property(row) for row in rows]


def _find_conversation(db: Session, low: int, high: int) -> Conversation | None:
    return (
        db.query(Conversation)
        .filter(Conversation.user1_id == low)
        .filter(Conversation.user2_id == high)
        .first()
    )


def _upsert_conversation(db: Session, low: int, high: int, now: datetime) -> Conversation:
    row = _find_conversation(db, low, high)
    if row is not None:
        row.last_message_at = now
        db.flush()
        return row

    row = Conversation(user1_id=low, user2_id=high, last_message_at=now, unread_count=0)
    db.add(row)
    try:
        db.flush()
    except IntegrityError:
        # Another writer created the pair first; nothing else is pending in this transaction.
        db.rollback()
        logger.info("conversation.create_race users=%s,%s", low, high)
        row = _find_conversation(db, low, high)
        if row is None:
            raise
        row.last_message_at = now
        db.flush()
    else:
        logger.info("conversation.created id=%s users=%s,%s", row.id, low, high)
    return row
