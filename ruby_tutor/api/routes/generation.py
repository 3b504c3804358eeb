"""Generation Forwarders — thin endpoints that call Ruby's model once and return its object.

Invariants:
    - Blank name/description (and overview for breakdown) -> 400 before any model call
    - Overview/breakdown return the validated schema object as JSON
    - Scoping chat streams `partial` fragments, one `object`, then `done`
    - Authenticated: model calls cost money
"""

import logging

from fastapi import APIRouter, Depends

from ruby_tutor.api.dependencies import get_ruby_generator
from ruby_tutor.api.routes.sse import event_stream
from ruby_tutor.core.errors import ErrorContext, InputValidationError
from ruby_tutor.infrastructure.auth import CurrentUser, get_current_user
from ruby_tutor.schemas.generation import (
    BreakdownRequest, OverviewRequest, ScopingChatRequest,
)
from ruby_tutor.schemas.llm import ProjectOverview, WeeklyBreakdown
from ruby_tutor.services.ruby_generator import RubyGenerator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/generate", tags=["generation"])


@router.post("/project-overview", response_model=ProjectOverview)
async def generate_project_overview(
    body: OverviewRequest,
    user: CurrentUser = Depends(get_current_user),
    generator: RubyGenerator = Depends(get_ruby_generator),
):
    if not body.project_name or not body.project_description:
        raise InputValidationError(
            "Project name and description are required", "project_name",
        )
    return await generator.generate_overview(
        body.project_name,
        body.project_description,
        body.user_age,
        body.experience_level,
        context=ErrorContext(user_id=user.id, operation="generate_overview"),
    )


@router.post("/weekly-breakdown", response_model=WeeklyBreakdown)
async def generate_weekly_breakdown(
    body: BreakdownRequest,
    user: CurrentUser = Depends(get_current_user),
    generator: RubyGenerator = Depends(get_ruby_generator),
):
    if not body.project_name or not body.project_description or not body.project_overview:
        raise InputValidationError(
            "Project name, description, and overview are required", "project_overview",
        )
    return await generator.generate_breakdown(
        body.project_name,
        body.project_description,
        body.project_overview.model_dump(mode="json"),
        body.user_age,
        body.experience_level,
        context=ErrorContext(user_id=user.id, operation="generate_breakdown"),
    )


@router.post("/project-scoping-chat")
async def project_scoping_chat(
    body: ScopingChatRequest,
    user: CurrentUser = Depends(get_current_user),
    generator: RubyGenerator = Depends(get_ruby_generator),
):
    history = [turn.model_dump() for turn in body.conversation_history]
    return event_stream(
        generator.stream_scoping(
            body.message, history,
            context=ErrorContext(user_id=user.id, operation="project_scoping_chat"),
        ),
        "scoping",
    )
