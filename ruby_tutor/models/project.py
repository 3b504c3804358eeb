"""Project ORM — a child's multi-week coding learning engagement.

Invariants:
    - id is UUID primary key; user_id is the identity provider's subject (string)
    - master_plan stores the planning wizard state as JSON (see core/master_plan.py)
    - status transitions: planning -> active -> completed | paused | archived
    - current_week is 0 while planning, 1..duration_weeks once active
    - Dependent rows (weekly plans, conversations, messages, artifacts) reference it with
      ON DELETE CASCADE; the store also deletes them explicitly (SQLite ignores FKs)

Design Decisions:
    - JSON columns for string lists: portable across PostgreSQL and SQLite test DB
    - total_time_spent kept as interval text ("HH:MM:SS"), parsed only by core/metrics.py
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ruby_tutor.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """Project aggregate root — owns weekly plans, conversations and artifacts."""
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default="experiment",
    )
    initial_request: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scoped_goal: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    master_plan: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    plan_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    plan_approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    learning_goal: Mapped[str] = mapped_column(Text, nullable=False, default="")
    target_concepts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    difficulty_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default="beginner",
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="planning")
    current_week: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    concepts_mastered: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_time_spent: Mapped[str] = mapped_column(
        String(32), nullable=False, default="00:00:00",
    )
    milestones_reached: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

