"""Pairwise conversations between users.

A conversation is identified by its canonical pair (smaller user id first),
so ``resolve_conversation(5, 3)`` and ``resolve_conversation(3, 5)`` return
the same record. Messages carry no conversation id; they are matched to a
conversation through their unordered {sender, receiver} pair.
"""
from __future__ import annotations

import logging
from datetime import datetime

from roommatch.errors import NotFoundError, ValidationFailure
from roommatch.schemas.conversation import ConversationWithParticipant, ParticipantSummary
from roommatch.storage.base import Storage, StoredConversation, StoredMessage, canonical_pair, utc_now


logger = logging.getLogger(__name__)


def _require_other_user(storage: Storage, user_id: int, other_user_id: int, *, field: str, detail: str) -> None:
    if user_id == other_user_id:
        raise ValidationFailure(field, "Cannot start a conversation with yourself")
    if storage.get_user(other_user_id) is None:
        raise NotFoundError("user", detail)


def resolve_conversation(
    storage: Storage, user_id: int, other_user_id: int, *, now: datetime | None = None
) -> StoredConversation:
    """Return the pair's conversation, creating it on first contact.

    An existing conversation has ``last_message_at`` refreshed, which moves it
    to the top of both users' lists even when no message is sent.
    """
    _require_other_user(storage, user_id, other_user_id, field="other_user_id", detail="User not found")
    low, high = canonical_pair(user_id, other_user_id)
    conversation = storage.upsert_conversation(low, high, now=now or utc_now())
    logger.debug("conversation.resolved id=%s users=%s,%s", conversation.id, low, high)
    return conversation


def send_message(
    storage: Storage, sender_id: int, receiver_id: int, content: str, *, now: datetime | None = None
) -> StoredMessage:
    # Blank check only; content is stored exactly as sent.
    if not (content or "").strip():
        raise ValidationFailure("content", "Message content must not be empty")
    if sender_id == receiver_id:
        raise ValidationFailure("receiver_id", "Cannot send a message to yourself")
    if storage.get_user(receiver_id) is None:
        raise NotFoundError("user", "Recipient not found")

    message, conversation = storage.append_message(sender_id, receiver_id, content, now=now or utc_now())
    logger.info(
        "message.sent id=%s conversation_id=%s sender_id=%s receiver_id=%s unread=%s",
        message.id,
        conversation.id,
        sender_id,
        receiver_id,
        conversation.unread_count,
    )
    return message


def get_conversation(storage: Storage, conversation_id: int) -> StoredConversation:
    conversation = storage.get_conversation_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("conversation", "Conversation not found")
    return conversation


def get_conversation_for_participant(storage: Storage, conversation_id: int, user_id: int) -> StoredConversation:
    conversation = get_conversation(storage, conversation_id)
    # Outsiders get the same answer as for a missing conversation.
    if not conversation.involves(user_id):
        raise NotFoundError("conversation", "Conversation not found")
    return conversation


def list_messages(storage: Storage, conversation_id: int) -> list[StoredMessage]:
    conversation = get_conversation(storage, conversation_id)
    messages = storage.list_pair_messages(conversation.user1_id, conversation.user2_id)
    return sorted(messages, key=lambda m: (m.created_at, m.id))


def mark_read(storage: Storage, conversation_id: int, reader_id: int) -> None:
    get_conversation(storage, conversation_id)
    flipped = storage.mark_read(conversation_id, reader_id)
    logger.debug("conversation.read id=%s reader_id=%s flipped=%s", conversation_id, reader_id, flipped)


def list_conversations(storage: Storage, user_id: int) -> list[StoredConversation]:
    conversations = storage.list_user_conversations(user_id)
    return sorted(conversations, key=lambda c: c.last_message_at, reverse=True)


def describe_participant(storage: Storage, user_id: int) -> ParticipantSummary:
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("user", "User not found")
    profile = storage.get_profile(user_id)
    return ParticipantSummary(
        id=user.id,
        username=user.username,
        full_name=profile.full_name if profile else None,
        avatar_url=user.avatar_url,
    )


def with_participant(storage: Storage, conversation: StoredConversation, user_id: int) -> ConversationWithParticipant:
    other = describe_participant(storage, conversation.other_participant(user_id))
    return ConversationWithParticipant(
        id=conversation.id,
        user1_id=conversation.user1_id,
        user2_id=conversation.user2_id,
        last_message_at=conversation.last_message_at,
        unread_count=conversation.unread_count,
        other_user=other,
    )


def list_conversations_with_participants(storage: Storage, user_id: int) -> list[ConversationWithParticipant]:
    return [with_participant(storage, c, user_id) for c in list_conversations(storage, user_id)]
