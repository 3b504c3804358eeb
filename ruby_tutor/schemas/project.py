"""Project Schemas — create/update bodies and the public project shape.

Invariants:
    - ProjectCreate.title: 1-200 chars, stripped, non-empty
    - ProjectUpdate is partial: only fields explicitly sent are written (exclude_unset)
    - duration_weeks always within 1..4
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ruby_tutor.core.domain_types import (
    MAX_DURATION_WEEKS,
    MIN_DURATION_WEEKS,
    DifficultyLevel,
    ProjectStatus,
    ProjectType,
)


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    project_type: ProjectType = ProjectType.EXPERIMENT
    initial_request: str = Field("", max_length=5000)
    scoped_goal: str = Field("", max_length=5000)
    duration_weeks: int = Field(3, ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    master_plan: dict = Field(default_factory=dict)
    learning_goal: str = ""
    target_concepts: list[str] = Field(default_factory=list)
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class ProjectUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    project_type: ProjectType | None = None
    scoped_goal: str | None = None
    duration_weeks: int | None = Field(None, ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    master_plan: dict | None = None
    learning_goal: str | None = None
    target_concepts: list[str] | None = None
    difficulty_level: DifficultyLevel | None = None
    status: ProjectStatus | None = None
    current_week: int | None = Field(None, ge=0)
    progress_percentage: int | None = Field(None, ge=0, le=100)
    concepts_mastered: list[str] | None = None
    total_sessions: int | None = Field(None, ge=0)
    total_time_spent: str | None = Field(None, pattern=r"^\d+:\d{2}(:\d{2})?$")
    milestones_reached: list[str] | None = None
    is_public: bool | None = None
    is_template: bool | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    title: str
    description: str | None
    project_type: str
    initial_request: str
    scoped_goal: str
    duration_weeks: int
    master_plan: dict
    plan_approved: bool
    plan_approved_at: datetime | None
    learning_goal: str
    target_concepts: list[str]
    difficulty_level: str
    status: str
    current_week: int
    progress_percentage: int
    concepts_mastered: list[str]
    total_sessions: int
    total_time_spent: str
    milestones_reached: list[str]
    is_public: bool
    is_template: bool
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None


class DashboardMetricsResponse(BaseModel):
    completed: int
    active: int
    total: int
    total_time_minutes: int
    formatted_time: str
    concepts: int
