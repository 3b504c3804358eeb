"""LLM Output Schemas — the fixed shapes Ruby's model calls must return.

Invariants:
    - Each schema doubles as the input_schema of the single forced tool for its call
    - project_type / difficulty_assessment restricted to the domain enums
    - recommended_duration in MIN_DURATION_WEEKS..MAX_DURATION_WEEKS
    - target_concepts prompted for 4-8 entries but accepted at any length

Design Decisions:
    - Strict on fields the planner stores in DB columns, lenient on prose lists:
      a 9-concept overview is still a usable plan
    - project_name/project_description always present in ProjectScoping (empty until
      goal_set) so the streamed object has a stable shape
"""

from pydantic import BaseModel, Field

from ruby_tutor.core.domain_types import (
    DEFAULT_ESTIMATED_SESSIONS,
    MAX_DURATION_WEEKS,
    MIN_DURATION_WEEKS,
    DifficultyLevel,
    ProjectType,
)


class ProjectScoping(BaseModel):
    """One scoping chat turn from Ruby."""
    response: str = Field(description="Ruby's reply to the child: 2-3 short sentences")
    goal_set: bool = Field(
        description="True only when the project is specific and achievable in 1-4 weeks",
    )
    project_name: str = Field(
        "", description="Short project name, only when goal_set is true",
    )
    project_description: str = Field(
        "", description="One or two sentence description, only when goal_set is true",
    )


class ProjectOverview(BaseModel):
    """Initial analysis of a scoped project."""
    response: str = Field(description="Encouraging message to the child")
    project_analysis: str
    project_type: ProjectType
    recommended_duration: int = Field(ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    difficulty_assessment: DifficultyLevel
    learning_trajectory: str
    target_concepts: list[str] = Field(description="4-8 programming concepts")


class WeekBreakdown(BaseModel):
    week: int = Field(ge=1)
    title: str
    main_goal: str
    concepts: list[str]
    deliverables: list[str]
    estimated_sessions: int = Field(DEFAULT_ESTIMATED_SESSIONS, ge=1)


class WeeklyBreakdown(BaseModel):
    """Week-by-week plan built on an approved overview."""
    response: str
    weekly_breakdown: list[WeekBreakdown] = Field(min_length=1)
    success_criteria: list[str]


class MasterPlan(BaseModel):
    """Flattened overview + breakdown (the shape stored by older clients)."""
    response: str = ""
    project_analysis: str
    project_type: ProjectType
    recommended_duration: int = Field(ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    difficulty_assessment: DifficultyLevel
    learning_trajectory: str
    weekly_breakdown: list[WeekBreakdown]
    success_criteria: list[str] = []


class NestedMasterPlan(BaseModel):
    """Overview + breakdown as the planning wizard stores them."""
    overview: ProjectOverview
    breakdown: WeeklyBreakdown
