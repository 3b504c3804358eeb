"""Conversation Routes — project chat sessions and their messages."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ruby_tutor.api.dependencies import get_conversation_store
from ruby_tutor.schemas.conversation import (
    ConversationCreate, ConversationResponse, MessageCreate, MessageResponse,
)
from ruby_tutor.services.conversation_store import ConversationStore

router = APIRouter(prefix="/api/v1", tags=["conversations"])


@router.get(
    "/projects/{project_id}/conversations",
    response_model=list[ConversationResponse],
)
async def list_conversations(
    project_id: UUID,
    weekly_plan_id: UUID | None = Query(None),
    store: ConversationStore = Depends(get_conversation_store),
):
    return await store.list_conversations(project_id, weekly_plan_id)


@router.post(
    "/projects/{project_id}/conversations",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    project_id: UUID,
    body: ConversationCreate,
    store: ConversationStore = Depends(get_conversation_store),
):
    return await store.create_conversation(
        project_id, body.weekly_plan_id, body.title, body.conversation_type,
    )


@router.get(
    "/conversations/{conversation_id}/messages",
    response_model=list[MessageResponse],
)
async def list_messages(
    conversation_id: UUID,
    store: ConversationStore = Depends(get_conversation_store),
):
    return await store.list_messages(conversation_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: UUID,
    body: MessageCreate,
    store: ConversationStore = Depends(get_conversation_store),
):
    return await store.send_message(conversation_id, body.content, body.role)
