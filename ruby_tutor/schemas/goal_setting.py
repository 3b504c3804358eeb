"""Goal-setting Schemas — scoping chat persistence.

Invariants:
    - GoalMessageCreate.role in {'user', 'assistant'}
    - GoalFinalize requires non-blank name and description
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ruby_tutor.core.domain_types import GoalMessageRole


class GoalMessageCreate(BaseModel):
    role: GoalMessageRole
    content: str = Field(min_length=1, max_length=5000)


class GoalFinalize(BaseModel):
    project_name: str = Field(min_length=1, max_length=200)
    project_description: str = Field(min_length=1, max_length=5000)

    @field_validator("project_name", "project_description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class GoalChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message cannot be empty or whitespace")
        return v


class GoalMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    role: str
    content: str
    message_order: int
    timestamp: datetime


class GoalConversationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    session_id: str
    project_name: str | None
    project_description: str | None
    final_goal_decided: bool
    total_messages: int
    started_at: datetime
    ended_at: datetime | None
    messages: list[GoalMessageResponse] = []
