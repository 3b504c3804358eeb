"""Message ORM — one chat turn inside a Conversation.

Invariants:
    - Always belongs to a Conversation (conversation_id FK, cascade on delete)
    - message_order is 1-based and strictly increasing per conversation
    - role in {'user', 'ruby', 'assistant'}; non-user roles are Ruby's turns

Design Decisions:
    - Ruby's reasoning (thought/action/code) stored alongside content: replaying a
      session never needs the model again
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ruby_tutor.db.base import Base


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    conversation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    message_order: Mapped[int] = mapped_column(Integer, nullable=False)
    thought: Mapped[str | None] = mapped_column(Text, nullable=True)
    action: Mapped[str | None] = mapped_column(Text, nullable=True)
    code: Mapped[str | None] = mapped_column(Text, nullable=True)
    code_language: Mapped[str | None] = mapped_column(String(20), nullable=True)
    concept_taught: Mapped[str | None] = mapped_column(String(200), nullable=True)
    difficulty_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    learning_objective: Mapped[str | None] = mapped_column(Text, nullable=True)
    ruby_response_tone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_understood: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    needs_retry: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    execution_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
