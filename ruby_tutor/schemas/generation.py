"""Generation Request Schemas — bodies of the thin LLM forwarder endpoints.

Invariants:
    - camelCase (projectName) and snake_case (project_name) both accepted
    - user_age / experience_level fall back to settings defaults when omitted
    - Required text fields default to "" so the route can answer with its own 400 message

Design Decisions:
    - Blank-field checks live in the route, not a validator: the client relies on the
      exact "Project name and description are required" wording
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ruby_tutor.schemas.llm import ProjectOverview


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OverviewRequest(_CamelModel):
    project_name: str = Field("", alias="projectName", max_length=200)
    project_description: str = Field("", alias="projectDescription", max_length=5000)
    user_age: int | None = Field(None, alias="userAge", ge=4, le=18)
    experience_level: str | None = Field(None, alias="experienceLevel", max_length=50)

    @field_validator("project_name", "project_description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class BreakdownRequest(OverviewRequest):
    project_overview: ProjectOverview | None = Field(None, alias="projectOverview")


class HistoryTurn(BaseModel):
    """One scoping exchange: either side may be empty."""
    user: str = ""
    ruby: str = ""


class ScopingChatRequest(_CamelModel):
    message: str = Field(min_length=1, max_length=2000)
    conversation_history: list[HistoryTurn] = Field(
        default_factory=list, alias="conversationHistory", max_length=100,
    )

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message cannot be empty or whitespace")
        return v
