"""Goal-setting Store — persistence for the pre-project scoping chat.

Invariants:
    - Conversations are user-scoped; another user's session behaves as not found
    - message_order = max + 1 (1-based); conversation.total_messages = that order
    - finalize_goal stores name + description, sets final_goal_decided and ended_at
    - latest_open_conversation returns the most recent not-yet-finalised conversation
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.core.domain_types import GoalMessageRole, UserId
from ruby_tutor.core.errors import ResourceNotFoundError
from ruby_tutor.core.sequencing import goal_session_id, history_for_model, next_order
from ruby_tutor.models.goal_setting import GoalSettingConversation, GoalSettingMessage

logger = logging.getLogger(__name__)


class GoalSettingStore:

    def __init__(self, db: AsyncSession, user_id: UserId):
        self.db = db
        self.user_id = user_id

    async def start_conversation(self) -> GoalSettingConversation:
        now = datetime.now(timezone.utc)
        conversation = GoalSettingConversation(
            user_id=self.user_id,
            session_id=goal_session_id(now),
            final_goal_decided=False,
            total_messages=0,
            started_at=now,
            created_at=now,
        )
        self.db.add(conversation)
        await self.db.commit()
        logger.info(
            "Goal-setting conversation started",
            extra={"session_id": conversation.session_id, "user_id": self.user_id},
        )
        return conversation

    async def get_conversation(
        self, conversation_id: uuid.UUID,
    ) -> GoalSettingConversation:
        result = await self.db.execute(
            select(GoalSettingConversation).where(
                GoalSettingConversation.id == conversation_id,
                GoalSettingConversation.user_id == self.user_id,
            ),
        )
        conversation = result.scalar_one_or_none()
        if not conversation:
            raise ResourceNotFoundError("GoalSettingConversation", str(conversation_id))
        return conversation

    async def load_conversation(
        self, session_id: str,
    ) -> tuple[GoalSettingConversation, list[GoalSettingMessage]]:
        result = await self.db.execute(
            select(GoalSettingConversation).where(
                GoalSettingConversation.session_id == session_id,
                GoalSettingConversation.user_id == self.user_id,
            ),
        )
        conversation = result.scalar_one_or_none()
        if not conversation:
            raise ResourceNotFoundError("GoalSettingConversation", session_id)
        return conversation, await self.list_messages(conversation.id)

    async def latest_open_conversation(self) -> GoalSettingConversation | None:
        result = await self.db.execute(
            select(GoalSettingConversation)
            .where(
                GoalSettingConversation.user_id == self.user_id,
                GoalSettingConversation.final_goal_decided.is_(False),
            )
            .order_by(GoalSettingConversation.created_at.desc())
            .limit(1),
        )
        return result.scalar_one_or_none()

    async def list_messages(self, conversation_id: uuid.UUID) -> list[GoalSettingMessage]:
        result = await self.db.execute(
            select(GoalSettingMessage)
            .where(GoalSettingMessage.conversation_id == conversation_id)
            .order_by(GoalSettingMessage.message_order),
        )
        return list(result.scalars().all())

    async def add_message(
        self, conversation_id: uuid.UUID, role: GoalMessageRole, content: str,
    ) -> GoalSettingMessage:
        conversation = await self.get_conversation(conversation_id)
        current_max = (await self.db.execute(
            select(func.max(GoalSettingMessage.message_order))
            .where(GoalSettingMessage.conversation_id == conversation_id),
        )).scalar_one_or_none()
        order = next_order(current_max)

        message = GoalSettingMessage(
            conversation_id=conversation_id,
            role=GoalMessageRole(role).value,
            content=content,
            message_order=order,
        )
        self.db.add(message)
        conversation.total_messages = order
        await self.db.commit()
        return message

    async def finalize_goal(
        self, conversation_id: uuid.UUID, project_name: str, project_description: str,
    ) -> GoalSettingConversation:
        conversation = await self.get_conversation(conversation_id)
        conversation.project_name = project_name
        conversation.project_description = project_description
        conversation.final_goal_decided = True
        conversation.ended_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"Goal finalised: {project_name}",
            extra={"session_id": conversation.session_id, "user_id": self.user_id},
        )
        return conversation

    async def history(self, conversation_id: uuid.UUID) -> list[dict]:
        await self.get_conversation(conversation_id)
        messages = await self.list_messages(conversation_id)
        return history_for_model(
            [{"role": m.role, "content": m.content} for m in messages],
        )
