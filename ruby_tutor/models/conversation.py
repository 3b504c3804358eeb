"""Conversation ORM — a chat session between the child and Ruby for a project week.

Invariants:
    - Always belongs to a Project; weekly_plan_id optional (project-level chats)
    - display_order is 1-based per (project_id, weekly_plan_id)
    - total_messages == user_messages + ruby_messages (maintained by ConversationStore)

Design Decisions:
    - Counters denormalised on the row: dashboard reads never scan messages
    - Learning analytics (engagement, confusion, success moments) as JSON: shape evolves with prompts
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ruby_tutor.db.base import Base


class Conversation(Base):
    """Conversation entity — one chat session."""
    __tablename__ = "conversations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    weekly_plan_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("weekly_plans.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    conversation_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="learning",
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    concepts_covered: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    learning_objectives: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ruby_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    code_generated_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    engagement_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    confusion_indicators: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    success_moments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    goals_achieved: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    next_session_plan: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    session_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
