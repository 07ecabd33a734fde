# conversations.py
from fastapi import APIRouter, Depends, Response, status
from roommatch.routers.dependencies import get_current_user, get_storage
from roommatch.schemas.conversation import (
    ConversationCreate,
    ConversationWithParticipant,
    MessageCreate,
    MessageRead,
)
from roommatch.services import conversation_service
from roommatch.storage.base import Storage, StoredUser


router = APIRouter(tags=["messaging"])


@router.get("/conversations", response_model=list[ConversationWithParticipant])
def list_my_conversations(
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> list[ConversationWithParticipant]:
    return conversation_service.list_conversations_with_participants(storage, current_user.id)


@router.post("/conversations", response_model=ConversationWithParticipant)
def start_conversation(
    payload: ConversationCreate,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> ConversationWithParticipant:
    conversation = conversation_service.resolve_conversation(storage, current_user.id, payload.other_user_id)
    return conversation_service.with_participant(storage, conversation, current_user.id)


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageRead])
def read_conversation_messages(
    conversation_id: int,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> list[MessageRead]:
    conversation_service.get_conversation_for_participant(storage, conversation_id, current_user.id)
    # Opening a conversation counts as reading it.
    conversation_service.mark_read(storage, conversation_id, current_user.id)
    messages = conversation_service.list_messages(storage, conversation_id)
    return [MessageRead.model_validate(m) for m in messages]


@router.post("/conversations/{conversation_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_conversation_read(
    conversation_id: int,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> Response:
    conversation_service.get_conversation_for_participant(storage, conversation_id, current_user.id)
    conversation_service.mark_read(storage, conversation_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    storage: Storage = Depends(get_storage),
    current_user: StoredUser = Depends(get_current_user),
) -> MessageRead:
    message = conversation_service.send_message(storage, current_user.id, payload.receiver_id, payload.content)
    return MessageRead.model_validate(message)
