"""CodeArtifact ORM — a stored snapshot of code the child produced.

Invariants:
    - Always belongs to a Project; message_id links the chat turn that produced it (optional)
    - version_number = artifacts already stored for the project + 1
    - execution_status in {'pending', 'success', 'error', 'timeout', 'manual_stop'}
    - times_viewed only ever increments

Design Decisions:
    - parent_artifact_id self-reference: iterations of the same program form a chain
    - Execution metadata kept on the artifact (no separate runs table): one run is what the UI shows
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ruby_tutor.db.base import Base


class CodeArtifact(Base):
    """Code artifact entity — code plus execution and learning metadata."""
    __tablename__ = "code_artifacts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    message_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("messages.id", ondelete="SET NULL"),
        nullable=True,
    )
    parent_artifact_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("code_artifacts.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(20), nullable=False)
    version_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    has_been_executed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    execution_successful: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    execution_output: Mapped[str | None] = mapped_column(Text, nullable=True)
    execution_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    execution_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    last_executed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    concepts_demonstrated: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    complexity_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    educational_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_milestone: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    milestone_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    modifications_made: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    times_viewed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    times_modified: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_viewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
