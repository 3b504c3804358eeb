"""Code Artifact Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ruby_tutor.core.domain_types import CodeLanguage


class ArtifactCreate(BaseModel):
    code: str = Field(min_length=1, max_length=200_000)
    language: CodeLanguage
    title: str | None = Field(None, max_length=200)
    description: str | None = None
    message_id: UUID | None = None
    parent_artifact_id: UUID | None = None
    is_milestone: bool = False
    milestone_description: str | None = None
    educational_notes: str | None = None


class ExecutionResult(BaseModel):
    successful: bool
    output: str | None = Field(None, max_length=100_000)
    error: str | None = Field(None, max_length=100_000)


class ArtifactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    message_id: UUID | None
    parent_artifact_id: UUID | None
    title: str | None
    description: str | None
    code: str
    language: str
    version_number: int
    has_been_executed: bool
    execution_successful: bool | None
    execution_output: str | None
    execution_error: str | None
    execution_status: str
    last_executed_at: datetime | None
    concepts_demonstrated: list[str]
    complexity_score: int
    educational_notes: str | None
    is_milestone: bool
    milestone_description: str | None
    modifications_made: list
    times_viewed: int
    times_modified: int
    last_viewed_at: datetime | None
    created_at: datetime
