"""Conversation Store — project chat sessions and their ordered messages.

Invariants:
    - Conversations reachable only through a project the user owns
    - display_order = max order within (project, weekly plan) + 1, starting at 1
    - message_order = max order within the conversation + 1, starting at 1
    - Each message bumps total_messages, last_activity_at and exactly one role counter

Design Decisions:
    - Orders computed with MAX() in the same transaction as the insert; concurrent
      writers to one conversation are not expected (one child, one chat window)
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ruby_tutor.core.domain_types import (
    ConversationStatus, ConversationType, MessageRole, UserId,
)
from ruby_tutor.core.errors import ResourceNotFoundError
from ruby_tutor.core.sequencing import message_counter_updates, next_order
from ruby_tutor.models.conversation import Conversation
from ruby_tutor.models.message import Message
from ruby_tutor.models.project import Project
from ruby_tutor.services.project_store import ProjectStore
from ruby_tutor.services.weekly_plan_store import WeeklyPlanStore

logger = logging.getLogger(__name__)


class ConversationStore:

    def __init__(self, db: AsyncSession, user_id: UserId):
        self.db = db
        self.user_id = user_id
        self.projects = ProjectStore(db, user_id)

    async def list_conversations(
        self, project_id: uuid.UUID, weekly_plan_id: uuid.UUID | None = None,
    ) -> list[Conversation]:
        await self.projects.get_project(project_id)
        query = select(Conversation).where(Conversation.project_id == project_id)
        if weekly_plan_id is not None:
            query = query.where(Conversation.weekly_plan_id == weekly_plan_id)
        result = await self.db.execute(
            query.order_by(Conversation.display_order, Conversation.started_at),
        )
        return list(result.scalars().all())

    async def create_conversation(
        self,
        project_id: uuid.UUID,
        weekly_plan_id: uuid.UUID | None = None,
        title: str | None = None,
        conversation_type: ConversationType = ConversationType.LEARNING,
    ) -> Conversation:
        await self.projects.get_project(project_id)
        if weekly_plan_id is not None:
            plan = await WeeklyPlanStore(self.db, self.user_id).get_weekly_plan(
                weekly_plan_id,
            )
            if plan.project_id != project_id:
                raise ResourceNotFoundError("WeeklyPlan", str(weekly_plan_id))

        current_max = (await self.db.execute(
            select(func.max(Conversation.display_order)).where(
                Conversation.project_id == project_id,
                Conversation.weekly_plan_id.is_(None) if weekly_plan_id is None
                else Conversation.weekly_plan_id == weekly_plan_id,
            ),
        )).scalar_one_or_none()
        order = next_order(current_max)

        conversation = Conversation(
            project_id=project_id,
            weekly_plan_id=weekly_plan_id,
            title=title or f"Conversation {order}",
            display_order=order,
            conversation_type=ConversationType(conversation_type).value,
            status=ConversationStatus.ACTIVE.value,
        )
        self.db.add(conversation)
        await self.db.commit()
        logger.info(
            f"Conversation {order} created",
            extra={"project_id": str(project_id), "user_id": self.user_id},
        )
        return conversation

    async def get_conversation(self, conversation_id: uuid.UUID) -> Conversation:
        result = await self.db.execute(
            select(Conversation)
            .join(Project, Project.id == Conversation.project_id)
            .where(
                Conversation.id == conversation_id,
                Project.user_id == self.user_id,
            ),
        )
        conversation = result.scalar_one_or_none()
        if not conversation:
            raise ResourceNotFoundError("Conversation", str(conversation_id))
        return conversation

    async def list_messages(self, conversation_id: uuid.UUID) -> list[Message]:
        await self.get_conversation(conversation_id)
        result = await self.db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.message_order),
        )
        return list(result.scalars().all())

    async def send_message(
        self,
        conversation_id: uuid.UUID,
        content: str,
        role: MessageRole = MessageRole.USER,
    ) -> Message:
        conversation = await self.get_conversation(conversation_id)
        role_value = MessageRole(role).value
        current_max = (await self.db.execute(
            select(func.max(Message.message_order))
            .where(Message.conversation_id == conversation_id),
        )).scalar_one_or_none()

        now = datetime.now(timezone.utc)
        message = Message(
            conversation_id=conversation_id,
            role=role_value,
            content=content,
            message_order=next_order(current_max),
            timestamp=now,
        )
        self.db.add(message)
        for key, value in message_counter_updates(
            conversation.total_messages, conversation.user_messages,
            conversation.ruby_messages, role_value, now,
        ).items():
            setattr(conversation, key, value)
        await self.db.commit()
        return message
