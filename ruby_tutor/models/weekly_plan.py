"""WeeklyPlan ORM — one week of a project's approved master plan.

Invariants:
    - Always belongs to a Project (project_id FK, cascade on delete)
    - week_number starts at 1; at most one row per (project_id, week_number, attempt_number)
    - Week 1 is created 'current', later weeks 'locked'
    - goals mirrors {main_goal, concepts, deliverables} from the breakdown week

Design Decisions:
    - week_number as Integer (not auto-increment): copied from the LLM breakdown
    - attempt_number allows a simplified retry of the same week without losing history
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, DateTime, ForeignKey, JSON, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ruby_tutor.db.base import Base


class WeeklyPlan(Base):
    """Weekly plan entity — objectives and deliverables for one week."""
    __tablename__ = "weekly_plans"
    __table_args__ = (
        UniqueConstraint(
            "project_id", "week_number", "attempt_number",
            name="uq_weekly_plans_project_week_attempt",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    week_title: Mapped[str] = mapped_column(String(200), nullable=False)
    week_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    learning_objectives: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    target_concepts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    difficulty_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default="normal",
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="locked")
    progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    daily_goals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    estimated_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    goals: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    deliverables: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
