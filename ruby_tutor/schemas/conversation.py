"""Conversation Schemas — project chat sessions and their messages.

Invariants:
    - MessageCreate.content: 1-20000 chars, stripped, non-empty
    - role defaults to 'user'; 'ruby' and 'assistant' both count as Ruby turns
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ruby_tutor.core.domain_types import ConversationType, MessageRole


class ConversationCreate(BaseModel):
    weekly_plan_id: UUID | None = None
    title: str | None = Field(None, max_length=200)
    conversation_type: ConversationType = ConversationType.LEARNING


class ConversationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    weekly_plan_id: UUID | None
    title: str
    display_order: int
    conversation_type: str
    status: str
    concepts_covered: list[str]
    learning_objectives: list[str]
    total_messages: int
    user_messages: int
    ruby_messages: int
    code_generated_count: int
    engagement_score: float | None
    started_at: datetime
    ended_at: datetime | None
    last_activity_at: datetime
    session_number: int


class MessageCreate(BaseModel):
    content: str = Field(min_length=1, max_length=20_000)
    role: MessageRole = MessageRole.USER

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    conversation_id: UUID
    role: str
    content: str
    message_order: int
    thought: str | None
    action: str | None
    code: str | None
    code_language: str | None
    concept_taught: str | None
    timestamp: datetime
    execution_status: str | None
