"""Goal Scoping Chat — one persisted scoping turn: store, stream, store, maybe finalise.

Invariants:
    - History sent to the model is read BEFORE the new user turn is stored
    - Ruby's reply is stored only after the validated object arrives
    - A goal is finalised only when goal_set is true AND name and description are non-blank
    - Finalising opens a fresh conversation so the next visit starts clean
    - Yields event dicts; the last one is always `chat_complete` on success
"""

import logging
import uuid
from typing import AsyncIterator

from ruby_tutor.core.domain_types import GoalMessageRole
from ruby_tutor.core.errors import ErrorContext
from ruby_tutor.services.goal_setting_store import GoalSettingStore
from ruby_tutor.services.ruby_generator import RubyGenerator

logger = logging.getLogger(__name__)


async def run_goal_chat(
    store: GoalSettingStore,
    generator: RubyGenerator,
    conversation_id: uuid.UUID,
    message: str,
) -> AsyncIterator[dict]:
    conversation = await store.get_conversation(conversation_id)
    history = await store.history(conversation_id)
    await store.add_message(conversation_id, GoalMessageRole.USER, message)

    context = ErrorContext(user_id=store.user_id, operation="goal_chat")
    scoping: dict | None = None
    async for event in generator.stream_scoping(message, history, context=context):
        if event["type"] == "object":
            scoping = event["data"]
        yield event

    if scoping is None:
        return

    await store.add_message(
        conversation_id, GoalMessageRole.ASSISTANT, scoping["response"],
    )

    name = (scoping.get("project_name") or "").strip()
    description = (scoping.get("project_description") or "").strip()
    goal_set = bool(scoping.get("goal_set") and name and description)
    next_session_id = None
    if goal_set:
        await store.finalize_goal(conversation_id, name, description)
        fresh = await store.start_conversation()
        next_session_id = fresh.session_id

    yield {
        "type": "chat_complete",
        "data": {
            "session_id": conversation.session_id,
            "goal_set": goal_set,
            "project_name": name if goal_set else None,
            "project_description": description if goal_set else None,
            "next_session_id": next_session_id,
        },
    }
