"""Request schemas — generation bodies, project create/update and weekly plan updates.

Invariants:
    - camelCase and snake_case field names both accepted on generation bodies
    - Blank project name/description pass the schema (route answers the 400)
    - Scoping message must be non-blank
    - Project title stripped and non-blank; duration within 1..4
"""

import pytest
from pydantic import ValidationError

from ruby_tutor.schemas.generation import (
    BreakdownRequest, OverviewRequest, ScopingChatRequest,
)
from ruby_tutor.schemas.project import ProjectCreate, ProjectUpdate
from ruby_tutor.schemas.weekly_plan import WeeklyPlanUpdate

from tests.plan_samples import overview_input


# --- Generation ---------------------------------------------------------------

def test_overview_request_accepts_camel_case():
    req = OverviewRequest.model_validate({
        "projectName": "  Pong  ", "projectDescription": "Paddles", "userAge": 10,
    })
    assert req.project_name == "Pong"
    assert req.user_age == 10
    assert req.experience_level is None


def test_overview_request_accepts_snake_case():
    req = OverviewRequest.model_validate({
        "project_name": "Pong", "project_description": "Paddles",
    })
    assert req.project_description == "Paddles"


def test_overview_request_blank_fields_pass_schema():
    req = OverviewRequest.model_validate({})
    assert req.project_name == ""
    assert req.project_description == ""


def test_overview_request_rejects_unrealistic_age():
    with pytest.raises(ValidationError):
        OverviewRequest.model_validate({"projectName": "x", "userAge": 99})


def test_breakdown_request_parses_overview():
    req = BreakdownRequest.model_validate({
        "projectName": "Pong", "projectDescription": "Paddles",
        "projectOverview": overview_input(),
    })
    assert req.project_overview.recommended_duration == 2


def test_scoping_request_defaults_history():
    req = ScopingChatRequest.model_validate({"message": " hi "})
    assert req.message == "hi"
    assert req.conversation_history == []


def test_scoping_request_rejects_blank_message():
    with pytest.raises(ValidationError):
        ScopingChatRequest.model_validate({"message": "   "})


def test_scoping_history_sides_default_blank():
    req = ScopingChatRequest.model_validate({
        "message": "robots", "conversationHistory": [{"user": "hello"}],
    })
    assert req.conversation_history[0].ruby == ""


# --- Projects -----------------------------------------------------------------

def test_project_create_strips_title():
    assert ProjectCreate(title="  Maze  ").title == "Maze"


def test_project_create_rejects_blank_title():
    with pytest.raises(ValidationError):
        ProjectCreate(title="   ")


def test_project_create_rejects_long_duration():
    with pytest.raises(ValidationError):
        ProjectCreate(title="Maze", duration_weeks=5)


def test_project_update_only_dumps_sent_fields():
    update = ProjectUpdate.model_validate({"status": "active"})
    assert update.model_dump(exclude_unset=True, mode="json") == {"status": "active"}


def test_project_update_validates_interval_text():
    assert ProjectUpdate(total_time_spent="01:30:00").total_time_spent == "01:30:00"
    with pytest.raises(ValidationError):
        ProjectUpdate(total_time_spent="ninety minutes")


# --- Weekly plans -------------------------------------------------------------

def test_weekly_plan_update_stores_enum_values():
    update = WeeklyPlanUpdate.model_validate({"status": "completed"})
    assert update.model_dump(exclude_unset=True) == {"status": "completed"}


def test_weekly_plan_update_rejects_unknown_status():
    with pytest.raises(ValidationError):
        WeeklyPlanUpdate.model_validate({"status": "done"})
