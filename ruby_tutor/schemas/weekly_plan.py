"""Weekly Plan Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ruby_tutor.core.domain_types import WeeklyPlanDifficulty, WeeklyPlanStatus
from ruby_tutor.schemas.llm import MasterPlan, NestedMasterPlan


class WeeklyPlanFromMasterPlan(BaseModel):
    """master_plan may be nested ({overview, breakdown}) or already flat."""
    master_plan: MasterPlan | NestedMasterPlan


class WeeklyPlanUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    week_title: str | None = Field(None, min_length=1, max_length=200)
    week_description: str | None = None
    learning_objectives: list[str] | None = None
    target_concepts: list[str] | None = None
    difficulty_level: WeeklyPlanDifficulty | None = None
    status: WeeklyPlanStatus | None = None
    progress_percentage: int | None = Field(None, ge=0, le=100)
    daily_goals: list | None = None
    estimated_sessions: int | None = Field(None, ge=1)
    goals: dict | None = None
    deliverables: list[str] | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


class WeeklyPlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    week_number: int
    week_title: str
    week_description: str | None
    learning_objectives: list[str]
    target_concepts: list[str]
    attempt_number: int
    difficulty_level: str
    status: str
    progress_percentage: int
    daily_goals: list
    estimated_sessions: int
    goals: dict
    deliverables: list[str]
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None
    completed_at: datetime | None
