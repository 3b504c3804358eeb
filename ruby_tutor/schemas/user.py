"""User Schemas — child profile creation at sign-up."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    parent_email: str = Field(
        min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )
    date_of_birth: date | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v or not v.replace("-", "").replace("'", "").replace(" ", "").isalpha():
            raise ValueError("name must contain letters only")
        return v


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None
    username: str
    display_name: str
    parent_email: str
    date_of_birth: date | None
    age: int | None
    supervised_mode: bool
    content_filter_level: str
    learning_style: str
    attention_span_minutes: int
    profile_visibility: str
    allow_data_for_research: bool
    created_at: datetime


class MeResponse(BaseModel):
    id: str
    email: str | None
    profile: ProfileResponse | None
