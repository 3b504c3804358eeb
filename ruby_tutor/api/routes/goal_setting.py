"""Goal-setting Routes — persisted scoping chat that precedes project creation.

Invariants:
    - Conversations addressed by session_id for loading, by id for writes
    - /chat checks the conversation exists BEFORE streaming (404 as plain JSON)
    - /latest answers {"conversation": null} when every conversation is finalised
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ruby_tutor.api.dependencies import get_goal_setting_store, get_ruby_generator
from ruby_tutor.api.routes.sse import event_stream
from ruby_tutor.core.sequencing import paired_turns
from ruby_tutor.models.goal_setting import GoalSettingConversation, GoalSettingMessage
from ruby_tutor.schemas.goal_setting import (
    GoalChatRequest,
    GoalConversationResponse,
    GoalFinalize,
    GoalMessageCreate,
    GoalMessageResponse,
)
from ruby_tutor.services.goal_scoping import run_goal_chat
from ruby_tutor.services.goal_setting_store import GoalSettingStore
from ruby_tutor.services.ruby_generator import RubyGenerator

router = APIRouter(prefix="/api/v1/goal-setting", tags=["goal-setting"])


def _conversation_payload(
    conversation: GoalSettingConversation,
    messages: list[GoalSettingMessage] | None = None,
) -> dict:
    body = GoalConversationResponse.model_validate(conversation).model_dump(
        mode="json", exclude={"messages"},
    )
    rendered = [
        GoalMessageResponse.model_validate(m).model_dump(mode="json")
        for m in messages or []
    ]
    body["messages"] = rendered
    body["turns"] = paired_turns(rendered)
    return body


@router.post("/conversations", status_code=status.HTTP_201_CREATED)
async def start_conversation(
    store: GoalSettingStore = Depends(get_goal_setting_store),
):
    return _conversation_payload(await store.start_conversation())


@router.get("/conversations/latest")
async def latest_open_conversation(
    store: GoalSettingStore = Depends(get_goal_setting_store),
):
    conversation = await store.latest_open_conversation()
    if conversation is None:
        return {"conversation": None}
    messages = await store.list_messages(conversation.id)
    return {"conversation": _conversation_payload(conversation, messages)}


@router.get("/conversations/{session_id}")
async def load_conversation(
    session_id: str, store: GoalSettingStore = Depends(get_goal_setting_store),
):
    conversation, messages = await store.load_conversation(session_id)
    return _conversation_payload(conversation, messages)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=GoalMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_message(
    conversation_id: UUID,
    body: GoalMessageCreate,
    store: GoalSettingStore = Depends(get_goal_setting_store),
):
    return await store.add_message(conversation_id, body.role, body.content)


@router.post("/conversations/{conversation_id}/finalize")
async def finalize_goal(
    conversation_id: UUID,
    body: GoalFinalize,
    store: GoalSettingStore = Depends(get_goal_setting_store),
):
    conversation = await store.finalize_goal(
        conversation_id, body.project_name, body.project_description,
    )
    return _conversation_payload(conversation)


@router.get("/conversations/{conversation_id}/history")
async def conversation_history(
    conversation_id: UUID,
    store: GoalSettingStore = Depends(get_goal_setting_store),
):
    return {"history": await store.history(conversation_id)}


@router.post("/conversations/{conversation_id}/chat")
async def chat(
    conversation_id: UUID,
    body: GoalChatRequest,
    store: GoalSettingStore = Depends(get_goal_setting_store),
    generator: RubyGenerator = Depends(get_ruby_generator),
):
    """Store the child's turn, stream Ruby's scoping reply, persist the outcome."""
    await store.get_conversation(conversation_id)
    return event_stream(
        run_goal_chat(store, generator, conversation_id, body.message), "goal-chat",
    )
