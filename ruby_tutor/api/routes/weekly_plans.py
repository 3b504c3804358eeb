"""Weekly Plan Routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ruby_tutor.api.dependencies import get_weekly_plan_store
from ruby_tutor.schemas.weekly_plan import (
    WeeklyPlanFromMasterPlan, WeeklyPlanResponse, WeeklyPlanUpdate,
)
from ruby_tutor.services.weekly_plan_store import WeeklyPlanStore

router = APIRouter(prefix="/api/v1", tags=["weekly-plans"])


@router.get(
    "/projects/{project_id}/weekly-plans", response_model=list[WeeklyPlanResponse],
)
async def list_weekly_plans(
    project_id: UUID, store: WeeklyPlanStore = Depends(get_weekly_plan_store),
):
    return await store.list_weekly_plans(project_id)


@router.post(
    "/projects/{project_id}/weekly-plans",
    response_model=list[WeeklyPlanResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_weekly_plans(
    project_id: UUID,
    body: WeeklyPlanFromMasterPlan | None = None,
    store: WeeklyPlanStore = Depends(get_weekly_plan_store),
):
    """Create weekly plan rows from a master plan (the project's own when omitted)."""
    if body is None:
        project = await store.projects.get_project(project_id)
        master_plan = project.master_plan
    else:
        master_plan = body.master_plan.model_dump(mode="json")
    return await store.create_from_master_plan(project_id, master_plan)


@router.patch("/weekly-plans/{weekly_plan_id}", response_model=WeeklyPlanResponse)
async def update_weekly_plan(
    weekly_plan_id: UUID,
    body: WeeklyPlanUpdate,
    store: WeeklyPlanStore = Depends(get_weekly_plan_store),
):
    return await store.update_weekly_plan(
        weekly_plan_id, body.model_dump(exclude_unset=True, mode="python"),
    )
