"""Planning Schemas — wizard state and step inputs for the project detail flow."""

from pydantic import BaseModel, Field

from ruby_tutor.core.domain_types import (
    MAX_DURATION_WEEKS,
    MIN_DURATION_WEEKS,
    PlanningStep,
)


class GenerateStepRequest(BaseModel):
    """replay=True regenerates even when plan data already exists (retry / redo)."""
    replay: bool = False


class DurationUpdate(BaseModel):
    # Out-of-range values are clamped by the orchestrator, not rejected
    weeks: int = Field(ge=-100, le=100)


class PlanStateResponse(BaseModel):
    step: PlanningStep
    overview: dict | None
    breakdown: dict | None
    duration_weeks: int = Field(ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    auto_generate_allowed: bool
    can_approve: bool
    approval_blockers: list[str]
    generation_in_progress: bool
    plan_approved: bool
